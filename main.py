import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from errors import register_error_handlers

# Routers
from routers.admin import router as admin_router
from routers.attempts import router as attempts_router
from routers.exams import router as exams_router
from routers.feedback import router as feedback_router
from routers.health import router as health_router
from routers.markup import router as markup_router

logger = logging.getLogger("ielts-exams")
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173"
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_ORIGINS).split(",") if o.strip()]

app = FastAPI(title="IELTS Exams – Scoring API")

# Allow calls from the SPA dev servers and configured production origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "x-api-key", "x-admin-token", "x-user-id"],
)
register_error_handlers(app)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(exams_router)  # /exams, /exams/{id}, /exams/submit
app.include_router(attempts_router)  # /attempts/...
app.include_router(admin_router)  # /admin/exams..., /admin/items...
app.include_router(markup_router)  # /markup/render
app.include_router(feedback_router)  # /writing/feedback/...
app.include_router(health_router)  # /health/...
