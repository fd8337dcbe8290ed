# services/exams/schemas/exams.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from schemas.base import CamelModel

SkillKind = Literal["reading", "listening", "writing", "speaking"]

# ---------- Read ----------


class SkillItemOut(CamelModel):
    id: int
    exam_id: int
    kind: str
    content: str
    question_markup: str
    question_type: Optional[str] = None
    display_order: int
    created_at: Optional[datetime] = None
    correct_answer: Optional[str] = None
    question_html: Optional[str] = None


class ExamOut(CamelModel):
    exam_id: int
    exam_name: str
    exam_type: str
    created_at: Optional[datetime] = None
    readings: List[SkillItemOut] = []
    listenings: List[SkillItemOut] = []
    writings: List[SkillItemOut] = []
    speakings: List[SkillItemOut] = []


# ---------- Authoring ----------


class SkillItemIn(CamelModel):
    kind: SkillKind
    content: str = ""
    question_markup: str = ""
    question_type: Optional[str] = None
    display_order: int = 0
    # explicit overrides; when omitted both are compiled from question_markup
    correct_answer: Optional[str] = None
    question_html: Optional[str] = None


class SkillItemUpdate(CamelModel):
    content: Optional[str] = None
    question_markup: Optional[str] = None
    question_type: Optional[str] = None
    display_order: Optional[int] = None
    correct_answer: Optional[str] = None
    question_html: Optional[str] = None


class ExamCreate(CamelModel):
    exam_name: str = Field(min_length=1, max_length=200)
    exam_type: str = Field(min_length=1, max_length=32)
    items: List[SkillItemIn] = []


class ExamUpdate(CamelModel):
    exam_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    exam_type: Optional[str] = Field(default=None, min_length=1, max_length=32)
