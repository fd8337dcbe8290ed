from datetime import datetime
from typing import Optional

from schemas.base import CamelModel


class SubmitAttemptIn(CamelModel):
    exam_id: int
    # JSON-encoded list of {"skillId": int, "answers": [str]}
    answer_text: Optional[str] = None
    # accepted for compatibility; the server always computes its own
    score: Optional[float] = None
    started_at: Optional[datetime] = None


class AttemptOut(CamelModel):
    attempt_id: int
    started_at: Optional[datetime]
    submitted_at: Optional[datetime]
    exam_id: int
    exam_name: str = ""
    exam_type: str = ""
    total_score: float
    # usually excluded in list views
    answer_text: Optional[str] = None
