from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from models import Attempt, Exam, SkillItem, WritingFeedback


class ExamStore:
    """Data access for exams, their items and attempts. Wraps one session."""

    def __init__(self, db: Session):
        self.db = db

    # --- exams ---

    def get_exam_by_id(self, exam_id: int) -> Optional[Exam]:
        stmt = select(Exam).options(selectinload(Exam.items)).where(Exam.id == exam_id)
        return self.db.scalars(stmt).first()

    def list_exams(self) -> List[Exam]:
        stmt = select(Exam).options(selectinload(Exam.items)).order_by(Exam.id)
        return list(self.db.scalars(stmt))

    def add_exam(self, exam: Exam) -> Exam:
        self.db.add(exam)
        return exam

    def delete_exam(self, exam: Exam) -> None:
        self.db.delete(exam)

    # --- items ---

    def get_item(self, item_id: int) -> Optional[SkillItem]:
        return self.db.get(SkillItem, item_id)

    def get_skill_items_by_exam(self, exam_id: int, kind: str) -> List[SkillItem]:
        stmt = (
            select(SkillItem)
            .where(SkillItem.exam_id == exam_id, SkillItem.kind == kind)
            .order_by(SkillItem.display_order, SkillItem.id)
        )
        return list(self.db.scalars(stmt))

    def add_item(self, item: SkillItem) -> SkillItem:
        self.db.add(item)
        return item

    def delete_item(self, item: SkillItem) -> None:
        self.db.delete(item)

    # --- attempts ---

    def create_attempt(self, attempt: Attempt) -> Attempt:
        self.db.add(attempt)
        return attempt

    def get_attempt(self, attempt_id: int) -> Optional[Attempt]:
        stmt = (
            select(Attempt).options(selectinload(Attempt.exam)).where(Attempt.id == attempt_id)
        )
        return self.db.scalars(stmt).first()

    def attempts_for_user(self, user_id: int) -> List[Attempt]:
        stmt = (
            select(Attempt)
            .options(selectinload(Attempt.exam))
            .where(Attempt.user_id == user_id)
            .order_by(Attempt.submitted_at.desc(), Attempt.id.desc())
        )
        return list(self.db.scalars(stmt))

    def recent_attempts(self, limit: int) -> List[Attempt]:
        stmt = (
            select(Attempt)
            .options(selectinload(Attempt.exam))
            .order_by(Attempt.submitted_at.desc(), Attempt.id.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt))

    def count_attempts(self, exam_id: int) -> int:
        stmt = select(func.count(Attempt.id)).where(Attempt.exam_id == exam_id)
        return self.db.scalar(stmt) or 0

    # --- writing feedback (rows written by the AI grader) ---

    def feedback_for(self, exam_id: int, user_id: int) -> List[WritingFeedback]:
        stmt = (
            select(WritingFeedback)
            .where(WritingFeedback.exam_id == exam_id, WritingFeedback.user_id == user_id)
            .order_by(WritingFeedback.created_at, WritingFeedback.id)
        )
        return list(self.db.scalars(stmt))

    def save_changes(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, obj) -> None:
        self.db.refresh(obj)
