# services/exams/routers/attempts.py

from fastapi import APIRouter, Depends

from deps.auth import require_client
from deps.services import get_exam_service
from exams import ExamService
from models import Attempt
from schemas.attempts import AttemptOut

router = APIRouter(prefix="/attempts", tags=["attempts"])


def attempt_out(a: Attempt) -> AttemptOut:
    exam = a.exam
    return AttemptOut(
        attempt_id=a.id,
        started_at=a.started_at,
        submitted_at=a.submitted_at,
        exam_id=a.exam_id,
        exam_name=exam.name if exam else "",
        exam_type=exam.type if exam else "",
        total_score=float(a.score or 0),
        answer_text=a.answer_text or "",
    )


@router.get("/recent-list", dependencies=[Depends(require_client)])
def attempts_recent(limit: int = 20, service: ExamService = Depends(get_exam_service)):
    items = service.recent_attempts(limit)
    # exclude potentially large answer payloads
    rows = [attempt_out(a).model_dump(by_alias=True, exclude={"answer_text"}) for a in items]
    return {"ok": True, "items": rows, "count": len(rows)}


@router.get("/user/{user_id}", response_model=list[AttemptOut])
def attempts_by_user(user_id: int, service: ExamService = Depends(get_exam_service)):
    return [attempt_out(a) for a in service.attempts_for_user(user_id)]


@router.get("/{attempt_id}", response_model=AttemptOut)
def get_attempt(attempt_id: int, service: ExamService = Depends(get_exam_service)):
    return attempt_out(service.get_attempt(attempt_id))
