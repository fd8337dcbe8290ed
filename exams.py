"""
Exam service: reads exams, scores submissions and records attempts.

Reading and listening exams are scored here from the canonical answers stored
on their items. Writing and speaking exams are graded by the external AI
feedback worker; submissions to them are recorded with a score of 0.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from errors import (
    AttemptNotFoundError,
    EmptySubmissionError,
    ExamLockedError,
    ExamNotFoundError,
    InvalidExamError,
    ItemLockedError,
    ItemNotFoundError,
    NotAuthenticatedError,
)
from markup import compile_markup
from models import LISTENING, READING, Attempt, Exam, SkillItem
from schemas.attempts import SubmitAttemptIn
from schemas.exams import ExamCreate, ExamUpdate, SkillItemIn, SkillItemUpdate
from scoring import score_items
from store import ExamStore

logger = logging.getLogger("ielts-exams.exams")


def compile_item(item: SkillItem, correct_answer: Optional[str], question_html: Optional[str]):
    """Fill the answer key and HTML from the item's markup unless given explicitly."""
    compiled = compile_markup(item.question_markup or "")
    item.correct_answer = (
        correct_answer if correct_answer is not None else json.dumps(compiled.answers)
    )
    item.question_html = question_html if question_html is not None else compiled.html


class ExamService:
    def __init__(self, store: ExamStore):
        self.store = store

    # --- reads ---

    def get_by_id(self, exam_id: int) -> Exam:
        exam = self.store.get_exam_by_id(exam_id)
        if exam is None:
            raise ExamNotFoundError(exam_id)
        return exam

    def get_all(self) -> List[Exam]:
        return self.store.list_exams()

    # --- submissions ---

    def evaluate(self, exam: Exam, raw_answer_text: Optional[str]) -> Decimal:
        """Band score for reading/listening exams, 0 for any other type."""
        kind = (exam.type or "").lower()
        if kind == READING:
            return self.evaluate_reading(exam, raw_answer_text)
        if kind == LISTENING:
            return self.evaluate_listening(exam, raw_answer_text)
        return Decimal("0")

    def evaluate_reading(self, exam: Exam, raw_answer_text: Optional[str]) -> Decimal:
        return self._score_kind(exam, READING, raw_answer_text)

    def evaluate_listening(self, exam: Exam, raw_answer_text: Optional[str]) -> Decimal:
        return self._score_kind(exam, LISTENING, raw_answer_text)

    def _score_kind(self, exam: Exam, kind: str, raw_answer_text: Optional[str]) -> Decimal:
        items = self.store.get_skill_items_by_exam(exam.id, kind)
        return score_items(raw_answer_text, items).score

    def submit_attempt(self, payload: SubmitAttemptIn, user_id: Optional[int]) -> Attempt:
        if not payload.answer_text or not payload.answer_text.strip():
            raise EmptySubmissionError()
        if user_id is None:
            raise NotAuthenticatedError()

        exam = self.get_by_id(payload.exam_id)
        score = self.evaluate(exam, payload.answer_text)

        now = datetime.now(UTC)
        attempt = Attempt(
            exam_id=exam.id,
            user_id=user_id,
            started_at=payload.started_at or now,
            submitted_at=now,
            score=score,
            answer_text=payload.answer_text,
        )
        try:
            self.store.create_attempt(attempt)
            self.store.save_changes()
        except SQLAlchemyError:
            logger.exception("failed to store attempt exam=%s user=%s", exam.id, user_id)
            self.store.rollback()
            raise
        self.store.refresh(attempt)

        logger.info(
            "attempt %s: exam=%s type=%s user=%s score=%s",
            attempt.id,
            exam.id,
            exam.type,
            user_id,
            score,
        )
        return attempt

    # --- attempt history ---

    def get_attempt(self, attempt_id: int) -> Attempt:
        attempt = self.store.get_attempt(attempt_id)
        if attempt is None:
            raise AttemptNotFoundError(attempt_id)
        return attempt

    def attempts_for_user(self, user_id: int) -> List[Attempt]:
        return self.store.attempts_for_user(user_id)

    def recent_attempts(self, limit: int = 20) -> List[Attempt]:
        return self.store.recent_attempts(max(1, min(limit, 100)))

    # --- authoring ---

    def create_exam(self, data: ExamCreate) -> Exam:
        exam = Exam(name=data.exam_name.strip(), type=data.exam_type.strip())
        if not exam.name or not exam.type:
            raise InvalidExamError("Exam name and type are required.")
        for item_in in data.items:
            exam.items.append(self._new_item(item_in))
        self.store.add_exam(exam)
        self.store.save_changes()
        return self.get_by_id(exam.id)

    def update_exam(self, exam_id: int, data: ExamUpdate) -> Exam:
        exam = self.get_by_id(exam_id)
        new_type = data.exam_type.strip() if data.exam_type is not None else exam.type
        # stored scores were computed for the current type
        if new_type != exam.type and self.store.count_attempts(exam.id) > 0:
            raise ExamLockedError(exam.id)
        if data.exam_name is not None:
            exam.name = data.exam_name.strip()
        exam.type = new_type
        self.store.save_changes()
        return exam

    def delete_exam(self, exam_id: int) -> None:
        exam = self.get_by_id(exam_id)
        # attempt history is append-only
        if self.store.count_attempts(exam.id) > 0:
            raise ExamLockedError(exam.id)
        self.store.delete_exam(exam)
        self.store.save_changes()

    def add_item(self, exam_id: int, data: SkillItemIn) -> SkillItem:
        exam = self.get_by_id(exam_id)
        item = self._new_item(data)
        item.exam_id = exam.id
        self.store.add_item(item)
        self.store.save_changes()
        return item

    def update_item(self, item_id: int, data: SkillItemUpdate) -> SkillItem:
        item = self._editable_item(item_id)
        if data.content is not None:
            item.content = data.content
        if data.question_type is not None:
            item.question_type = data.question_type
        if data.display_order is not None:
            item.display_order = data.display_order

        if data.question_markup is not None:
            item.question_markup = data.question_markup
            compile_item(item, data.correct_answer, data.question_html)
        else:
            if data.correct_answer is not None:
                item.correct_answer = data.correct_answer
            if data.question_html is not None:
                item.question_html = data.question_html

        self.store.save_changes()
        return item

    def delete_item(self, item_id: int) -> None:
        item = self._editable_item(item_id)
        self.store.delete_item(item)
        self.store.save_changes()

    def _editable_item(self, item_id: int) -> SkillItem:
        item = self.store.get_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        # scored attempts refer to the item's answer key
        if self.store.count_attempts(item.exam_id) > 0:
            raise ItemLockedError(item_id)
        return item

    @staticmethod
    def _new_item(data: SkillItemIn) -> SkillItem:
        item = SkillItem(
            kind=data.kind,
            content=data.content,
            question_markup=data.question_markup,
            question_type=data.question_type,
            display_order=data.display_order,
        )
        compile_item(item, data.correct_answer, data.question_html)
        return item
