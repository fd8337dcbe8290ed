# services/exams/routers/feedback.py
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from db import get_db
from schemas.feedback import FeedbackListOut, WritingFeedbackOut
from store import ExamStore

router = APIRouter(prefix="/writing", tags=["writing"])


@router.get("/feedback/{exam_id}/{user_id}", response_model=FeedbackListOut)
def get_feedback(exam_id: int, user_id: int, db: Session = Depends(get_db)):
    # Rows are produced asynchronously by the AI grader; clients poll until non-empty.
    rows = ExamStore(db).feedback_for(exam_id, user_id)
    feedbacks = [WritingFeedbackOut.model_validate(r, from_attributes=True) for r in rows]

    average = Decimal("0")
    if rows:
        average = sum((Decimal(r.overall) for r in rows), Decimal("0")) / len(rows)
    return FeedbackListOut(
        feedbacks=feedbacks,
        average_overall=float(average.quantize(Decimal("0.01"))),
    )
