from typing import Optional
from pydantic import BaseModel, Field, field_validator
from model.anchor import AnchorDescriptor
from model.note import MillisTimestamp, Note
from util.enums import NoteTarget
from util.functions import normalize_page_url, utc_now
from util.types import IndexDto


class NoteDraft(BaseModel):
    """Note fields a client may submit; id and authorId are assigned server-side."""

    content: str
    anchorData: AnchorDescriptor
    updatedAt: MillisTimestamp = Field(default_factory=utc_now)


class QueryNotesRequest(BaseModel):
    pageUrl: str = Field(min_length=1)
    requestingUser: Optional[str] = None

    @field_validator("pageUrl")
    @classmethod
    def _normalize_page_url(cls, v: str) -> str:
        return normalize_page_url(v)


class UpsertNoteRequest(BaseModel):
    data: NoteDraft
    target: NoteTarget
    # Set when editing an existing note; the whole value is replaced.
    noteId: Optional[str] = None
    requestingUser: Optional[str] = None
    # The user's own JWT for the remote store; the anon key is used without it.
    accessToken: Optional[str] = None

    def to_note(self) -> Note:
        # authorId is a placeholder; NotesSyncManager stamps the real owner.
        return Note(
            id=self.noteId,
            authorId=self.requestingUser or "",
            content=self.data.content,
            anchorData=self.data.anchorData,
            updatedAt=self.data.updatedAt,
        )


class DeleteNoteRequest(BaseModel):
    noteId: str = Field(min_length=1)
    pageUrl: str = Field(min_length=1)
    authorId: str = Field(min_length=1)
    requestingUser: Optional[str] = None
    accessToken: Optional[str] = None

    @field_validator("pageUrl")
    @classmethod
    def _normalize_page_url(cls, v: str) -> str:
        return normalize_page_url(v)


class QueryIndexRequest(BaseModel):
    requestingUser: Optional[str] = None


class IndexResponse(BaseModel):
    index: IndexDto
