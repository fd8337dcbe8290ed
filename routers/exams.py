# services/exams/routers/exams.py

from typing import List, Optional

from fastapi import APIRouter, Depends

from deps.auth import current_user_id, require_client
from deps.services import get_exam_service
from exams import ExamService
from models import LISTENING, READING, SPEAKING, WRITING, Exam
from routers.attempts import attempt_out
from schemas.attempts import AttemptOut, SubmitAttemptIn
from schemas.exams import ExamOut, SkillItemOut

router = APIRouter(prefix="/exams", tags=["exams"])


def exam_out(exam: Exam) -> ExamOut:
    def items(kind: str) -> List[SkillItemOut]:
        return [SkillItemOut.model_validate(it, from_attributes=True) for it in exam.items_of(kind)]

    return ExamOut(
        exam_id=exam.id,
        exam_name=exam.name,
        exam_type=exam.type,
        created_at=exam.created_at,
        readings=items(READING),
        listenings=items(LISTENING),
        writings=items(WRITING),
        speakings=items(SPEAKING),
    )


@router.get("", response_model=List[ExamOut])
def list_exams(service: ExamService = Depends(get_exam_service)):
    return [exam_out(e) for e in service.get_all()]


@router.get("/{exam_id}", response_model=ExamOut)
def get_exam(exam_id: int, service: ExamService = Depends(get_exam_service)):
    return exam_out(service.get_by_id(exam_id))


@router.post("/submit", response_model=AttemptOut, dependencies=[Depends(require_client)])
def submit_answers(
    payload: SubmitAttemptIn,
    user_id: Optional[int] = Depends(current_user_id),
    service: ExamService = Depends(get_exam_service),
):
    # any client-sent score is ignored; the server scores the attempt itself
    attempt = service.submit_attempt(payload, user_id)
    return attempt_out(attempt)
