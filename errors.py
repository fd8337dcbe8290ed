"""
Service exceptions and their HTTP mapping.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger("ielts-exams.errors")


class ExamServiceError(Exception):
    """Base exception; carries the HTTP status it maps to."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ExamNotFoundError(ExamServiceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, exam_id: int):
        self.exam_id = exam_id
        super().__init__("Exam not found.")


class ItemNotFoundError(ExamServiceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__("Skill item not found.")


class AttemptNotFoundError(ExamServiceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, attempt_id: int):
        self.attempt_id = attempt_id
        super().__init__("Attempt not found.")


class EmptySubmissionError(ExamServiceError):
    def __init__(self):
        super().__init__("Invalid or empty payload.")


class NotAuthenticatedError(ExamServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self):
        super().__init__("Please login to submit exam.")


class InvalidExamError(ExamServiceError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class ItemLockedError(ExamServiceError):
    """Raised when editing an item of an exam that already has scored attempts."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__("Skill item is locked: its exam already has attempts.")


class ExamLockedError(ExamServiceError):
    """Raised when deleting or retyping an exam that already has scored attempts."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, exam_id: int):
        self.exam_id = exam_id
        super().__init__("Exam is locked: it already has attempts.")


async def _service_error_handler(request: Request, exc: ExamServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s -> %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ExamServiceError, _service_error_handler)
