# services/exams/routers/markup.py
from fastapi import APIRouter

from markup import compile_markup, render
from schemas.markup import RenderRequest, RenderResponse

router = APIRouter(prefix="/markup", tags=["markup"])


@router.post("/render", response_model=RenderResponse)
def render_markup(req: RenderRequest):
    """Authoring preview: HTML as a learner (or, with reveal, a reviewer) sees it, plus the answer key."""
    compiled = compile_markup(req.markdown)
    html = render(req.markdown, reveal=True) if req.reveal else compiled.html
    return RenderResponse(html=html, answers=compiled.answers)
