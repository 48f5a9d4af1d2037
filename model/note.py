from datetime import datetime, timezone
from typing import Annotated, Any, Optional
from pydantic import AfterValidator, BaseModel, BeforeValidator, Field, PlainSerializer
from model.anchor import AnchorDescriptor
from util.functions import datetime_to_millis, millis_to_datetime, utc_now


def _from_millis(v: Any) -> Any:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return millis_to_datetime(int(v))
    return v


def _ensure_utc(v: datetime) -> datetime:
    return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)


# Timezone-aware in memory, integer milliseconds on every serialized form.
MillisTimestamp = Annotated[
    datetime,
    BeforeValidator(_from_millis),
    AfterValidator(_ensure_utc),
    PlainSerializer(datetime_to_millis, return_type=int),
]


class Note(BaseModel):
    # id is None until a store assigns one (e.g. pending remote insert)
    id: Optional[str] = None
    authorId: str
    content: str
    anchorData: AnchorDescriptor
    updatedAt: MillisTimestamp = Field(default_factory=utc_now)


class RemoteNoteRow(BaseModel):
    """Row shape of the remote `notes` table."""

    id: Optional[str] = None
    author_id: str
    page_url: str
    content: str
    element_selector: Optional[str] = None
    relative_position_x: float
    relative_position_y: float
    click_position_x: float
    click_position_y: float
    updated_at: Annotated[datetime, AfterValidator(_ensure_utc)]

    @classmethod
    def from_note(cls, note: Note) -> "RemoteNoteRow":
        anchor = note.anchorData
        return cls(
            id=note.id,
            author_id=note.authorId,
            page_url=anchor.pageUrl,
            content=note.content,
            element_selector=anchor.elementSelector,
            relative_position_x=anchor.relativePosition.xP,
            relative_position_y=anchor.relativePosition.yP,
            click_position_x=anchor.clickPosition.xVw,
            click_position_y=anchor.clickPosition.yPx,
            updated_at=note.updatedAt,
        )

    def to_note(self) -> Note:
        return Note(
            id=self.id,
            authorId=self.author_id,
            content=self.content,
            anchorData=AnchorDescriptor(
                pageUrl=self.page_url,
                elementSelector=self.element_selector,
                relativePosition={
                    "xP": self.relative_position_x,
                    "yP": self.relative_position_y,
                },
                clickPosition={
                    "xVw": self.click_position_x,
                    "yPx": self.click_position_y,
                },
            ),
            updatedAt=self.updated_at,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body for insert/update; the id is never sent, the database owns it."""
        return self.model_dump(mode="json", exclude={"id"})
