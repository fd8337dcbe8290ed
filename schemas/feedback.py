from datetime import datetime
from typing import List, Optional

from schemas.base import CamelModel


class WritingFeedbackOut(CamelModel):
    id: int
    exam_id: int
    user_id: int
    writing_id: Optional[int] = None
    overall: float
    task_achievement: Optional[str] = None
    coherence_cohesion: Optional[str] = None
    lexical_resource: Optional[str] = None
    grammar_accuracy: Optional[str] = None
    grammar_vocab_json: Optional[str] = None
    feedback_sections: Optional[str] = None
    created_at: Optional[datetime] = None


class FeedbackListOut(CamelModel):
    feedbacks: List[WritingFeedbackOut]
    # mean of `overall` across feedbacks, 0 while the grader is still running
    average_overall: float
