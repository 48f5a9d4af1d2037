from typing import Optional
from pydantic import BaseModel, field_validator
from util.functions import normalize_page_url


class RelativePosition(BaseModel):
    # 0-100, position inside the anchored element's box
    xP: float
    yP: float


class ClickPosition(BaseModel):
    # xVw: percent of viewport width; yPx: document offset (viewport y + scroll)
    xVw: float
    yPx: float


class AnchorDescriptor(BaseModel):
    """
    Where a note is attached on a page, independent of any DOM snapshot.

    Both positions are always populated; clickPosition is only used at render
    time when the selector no longer locates a visible element.
    """

    pageUrl: str
    elementSelector: Optional[str] = None
    relativePosition: RelativePosition
    clickPosition: ClickPosition

    # Notes are keyed by origin + path; query strings never split a page.
    @field_validator("pageUrl")
    @classmethod
    def _normalize_page_url(cls, v: str) -> str:
        return normalize_page_url(v)
