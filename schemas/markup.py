from typing import List

from schemas.base import CamelModel


class RenderRequest(CamelModel):
    markdown: str = ""
    reveal: bool = False


class RenderResponse(CamelModel):
    html: str
    answers: List[str]
