from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base

# Skill kinds an exam item can belong to; also the values of Exam.type.
READING = "reading"
LISTENING = "listening"
WRITING = "writing"
SPEAKING = "speaking"
SKILL_KINDS = (READING, LISTENING, WRITING, SPEAKING)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Exam(Base):
    __tablename__ = "exams"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200))
    # stored as the author typed it; dispatch lower-cases it
    type: Mapped[str] = mapped_column(String(32))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    items: Mapped[List["SkillItem"]] = relationship(
        back_populates="exam",
        cascade="all, delete-orphan",
        order_by=lambda: [SkillItem.display_order, SkillItem.id],
    )
    attempts: Mapped[List["Attempt"]] = relationship(
        back_populates="exam", cascade="all, delete-orphan"
    )

    def items_of(self, kind: str) -> List["SkillItem"]:
        return [it for it in self.items if it.kind == kind]


class SkillItem(Base):
    __tablename__ = "skill_items"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exam_id: Mapped[int] = mapped_column(ForeignKey("exams.id", ondelete="CASCADE"), index=True)
    kind: Mapped[str] = mapped_column(String(16))
    content: Mapped[str] = mapped_column(Text, default="")
    question_markup: Mapped[str] = mapped_column(Text, default="")
    question_type: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0)
    # JSON-encoded list of canonical answers, as extracted from the markup
    correct_answer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    question_html: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    exam: Mapped[Exam] = relationship(back_populates="items")


class Attempt(Base):
    __tablename__ = "attempts"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exam_id: Mapped[int] = mapped_column(ForeignKey("exams.id", ondelete="CASCADE"), index=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    score: Mapped[Decimal] = mapped_column(Numeric(4, 2), default=Decimal("0"))
    answer_text: Mapped[str] = mapped_column(Text)

    exam: Mapped[Exam] = relationship(back_populates="attempts")


class WritingFeedback(Base):
    """Band feedback written by the AI grading worker for writing/speaking exams."""

    __tablename__ = "writing_feedbacks"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exam_id: Mapped[int] = mapped_column(ForeignKey("exams.id", ondelete="CASCADE"))
    user_id: Mapped[int] = mapped_column(Integer)
    writing_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    overall: Mapped[Decimal] = mapped_column(Numeric(3, 1))
    task_achievement: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    coherence_cohesion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lexical_resource: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    grammar_accuracy: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    grammar_vocab_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    feedback_sections: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (sa.Index("ix_writing_feedbacks_exam_user", "exam_id", "user_id"),)
