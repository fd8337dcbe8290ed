from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from deps.auth import require_admin
from deps.services import get_exam_service
from exams import ExamService
from routers.exams import exam_out
from schemas.exams import (
    ExamCreate,
    ExamOut,
    ExamUpdate,
    SkillItemIn,
    SkillItemOut,
    SkillItemUpdate,
)

# Exam authoring. Every route requires the admin token.
router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/exams", response_model=ExamOut, status_code=201)
def create_exam(data: ExamCreate, service: ExamService = Depends(get_exam_service)):
    return exam_out(service.create_exam(data))


@router.put("/exams/{exam_id}", response_model=ExamOut)
def update_exam(exam_id: int, data: ExamUpdate, service: ExamService = Depends(get_exam_service)):
    return exam_out(service.update_exam(exam_id, data))


@router.delete("/exams/{exam_id}", status_code=204)
def delete_exam(exam_id: int, service: ExamService = Depends(get_exam_service)):
    service.delete_exam(exam_id)
    return Response(status_code=204)


@router.post("/exams/{exam_id}/items", response_model=SkillItemOut, status_code=201)
def add_item(exam_id: int, data: SkillItemIn, service: ExamService = Depends(get_exam_service)):
    item = service.add_item(exam_id, data)
    return SkillItemOut.model_validate(item, from_attributes=True)


@router.put("/items/{item_id}", response_model=SkillItemOut)
def update_item(
    item_id: int, data: SkillItemUpdate, service: ExamService = Depends(get_exam_service)
):
    item = service.update_item(item_id, data)
    return SkillItemOut.model_validate(item, from_attributes=True)


@router.delete("/items/{item_id}", status_code=204)
def delete_item(item_id: int, service: ExamService = Depends(get_exam_service)):
    service.delete_item(item_id)
    return Response(status_code=204)
