# Objective (reading/listening) scoring on the IELTS band scale.

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger("ielts-exams.scoring")

BAND_MAX = Decimal("9")
_CENTS = Decimal("0.01")

T = TypeVar("T")


class AnswerGroup(BaseModel):
    """A learner's answers for one skill item."""

    model_config = ConfigDict(populate_by_name=True)

    skill_id: int = Field(alias="skillId")
    answers: List[Optional[str]] = Field(default_factory=list)


@dataclass(frozen=True)
class Decoded(Generic[T]):
    """Result of a tolerant decode: ``ok`` is False when the default was used."""

    value: T
    ok: bool


_GROUPS = TypeAdapter(List[AnswerGroup])
_STRINGS = TypeAdapter(List[str])


def _decode_or_default(adapter: TypeAdapter, raw: Optional[str], what: str) -> Decoded:
    if raw is None or not raw.strip():
        return Decoded(value=[], ok=False)
    try:
        return Decoded(value=adapter.validate_json(raw), ok=True)
    except ValidationError as e:
        # Stored/submitted JSON is best-effort; never fail the request over it
        logger.debug("ignoring malformed %s: %s", what, e.errors()[:1])
        return Decoded(value=[], ok=False)


def decode_answer_groups(raw: Optional[str]) -> Decoded[List[AnswerGroup]]:
    return _decode_or_default(_GROUPS, raw, "answer payload")


def decode_answer_list(raw: Optional[str]) -> Decoded[List[str]]:
    return _decode_or_default(_STRINGS, raw, "canonical answers")


def _norm(s: str) -> str:
    return s.strip().lower()


@dataclass(frozen=True)
class ScoreResult:
    correct_count: int
    total_questions: int
    score: Decimal


def band_score(correct: int, total: int) -> Decimal:
    """``correct/total`` scaled to 0-9, two decimals, clamped to the band range."""
    if total <= 0:
        return Decimal("0")
    raw = Decimal(correct) / Decimal(total) * BAND_MAX
    raw = max(Decimal("0"), min(raw, BAND_MAX))
    return raw.quantize(_CENTS, rounding=ROUND_HALF_EVEN)


def score_items(raw_answer_text: Optional[str], items: Sequence[Any]) -> ScoreResult:
    """
    Score a submission against ``items`` (anything with ``id`` and ``correct_answer``).

    - items with no matching answer group are skipped entirely
    - each canonical answer of a matched item is one question
    - a submitted answer is correct if it equals ANY canonical answer of that item
      (trimmed, case-insensitive); duplicates count again, extras cost nothing
    """
    groups = decode_answer_groups(raw_answer_text).value
    total = 0
    correct = 0

    for item in items:
        group = next((g for g in groups if g.skill_id == item.id), None)
        if group is None:
            continue

        expected = decode_answer_list(item.correct_answer).value
        total += len(expected)
        canonical = {_norm(c) for c in expected}

        for ans in group.answers:
            if ans is not None and _norm(ans) in canonical:
                correct += 1

    return ScoreResult(correct_count=correct, total_questions=total, score=band_score(correct, total))
