from fastapi import Depends
from sqlalchemy.orm import Session

from db import get_db
from exams import ExamService
from store import ExamStore


def get_exam_service(db: Session = Depends(get_db)) -> ExamService:
    return ExamService(ExamStore(db))
