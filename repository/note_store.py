from abc import ABC, abstractmethod
from typing import List, Optional
from core.note_index import NoteIndex
from model.note import Note
from util.enums import ErrorMessage
from util.errors import NoteValidationError


class NoteStore(ABC):
    """
    CRUD over notes for one storage backend, each maintaining its own index.

    Reads never raise for storage/network failures: they log and return an
    empty result. Writes raise AppError subclasses.
    """

    @abstractmethod
    async def query_index(self, requesting_user: Optional[str] = None) -> NoteIndex: ...

    @abstractmethod
    async def query_notes(
        self, page_url: str, requesting_user: Optional[str] = None
    ) -> List[Note]: ...

    @abstractmethod
    async def upsert_note(self, note: Note) -> Note:
        """Insert or replace `note`; returns the stored value (id assigned)."""

    @abstractmethod
    async def delete_note(self, note_id: str, page_url: str) -> None: ...


def validate_note(
    note: Note,
    *,
    content_max: int,
    selector_max: int,
    page_url_max: Optional[int] = None,
) -> None:
    """Reject oversize notes before anything is written."""
    if len(note.content) > content_max:
        raise NoteValidationError(ErrorMessage.CONTENT_TOO_LONG, content_max)
    if page_url_max is not None and len(note.anchorData.pageUrl) > page_url_max:
        raise NoteValidationError(ErrorMessage.PAGE_URL_TOO_LONG, page_url_max)
    selector = note.anchorData.elementSelector
    if selector and len(selector) > selector_max:
        raise NoteValidationError(ErrorMessage.SELECTOR_TOO_LONG, selector_max)
