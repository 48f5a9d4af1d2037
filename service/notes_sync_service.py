import asyncio
import logging
from typing import List, Optional
from uuid import uuid4
from core.note_index import NoteIndex
from model.note import Note
from repository.local_note_repository import LocalNoteStore
from repository.remote_note_repository import RemoteNoteStore
from util.constants import LOCAL_AUTHOR_ID
from util.enums import NoteTarget
from util.errors import NotAuthenticatedError
from util.functions import normalize_page_url

logger = logging.getLogger(__name__)


class NotesSyncManager:
    """
    Facade over the local (private) and remote (published) stores.

    Every call is a one-shot orchestration. Reads fan out to both stores and
    merge; writes go to exactly one store. A remote write invalidates the
    remote index cache after it completes and before the call returns, so
    any later queryIndex sees the written page.
    """

    def __init__(self, local: LocalNoteStore, remote: RemoteNoteStore) -> None:
        self._local = local
        self._remote = remote

    async def query_notes_for(
        self, page_url: str, requesting_user: Optional[str] = None
    ) -> List[Note]:
        """Local and (when signed in) remote notes for a page, oldest first."""
        page_url = normalize_page_url(page_url)
        if requesting_user:
            local_notes, remote_notes = await asyncio.gather(
                self._local.query_notes(page_url),
                self._remote.query_notes(page_url, requesting_user),
            )
        else:
            local_notes, remote_notes = await self._local.query_notes(page_url), []

        notes = sorted([*local_notes, *remote_notes], key=lambda n: n.updatedAt)
        logger.debug(
            "notes.sync.query page=%s local=%d remote=%d",
            page_url,
            len(local_notes),
            len(remote_notes),
        )
        return notes

    async def query_index(self, requesting_user: Optional[str] = None) -> NoteIndex:
        if requesting_user:
            local_index, remote_index = await asyncio.gather(
                self._local.query_index(),
                self._remote.query_index(requesting_user),
            )
        else:
            local_index, remote_index = await self._local.query_index(), NoteIndex.empty()
        return local_index.merge(remote_index)

    async def upsert_note(
        self,
        note: Note,
        target: NoteTarget,
        requesting_user: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> Note:
        """
        Write `note` to the store selected by `target`.

        Local writes are owned by LOCAL_AUTHOR_ID and get a fresh id when none
        was supplied. Remote writes are owned by `requesting_user` and fail
        with NotAuthenticatedError before any I/O when there is none. `access_token`
        is the user JWT forwarded to the remote store.
        """
        if target == NoteTarget.REMOTE:
            if not requesting_user:
                raise NotAuthenticatedError()
            stored = await self._remote.upsert_note(
                note.model_copy(update={"authorId": requesting_user}), access_token
            )
            self.invalidate_remote_index()
            return stored

        return await self._local.upsert_note(
            note.model_copy(
                update={"id": note.id or str(uuid4()), "authorId": LOCAL_AUTHOR_ID}
            )
        )

    async def delete_note(
        self,
        note_id: str,
        page_url: str,
        author_id: str,
        requesting_user: Optional[str] = None,
        access_token: Optional[str] = None,
    ) -> None:
        page_url = normalize_page_url(page_url)
        if author_id == LOCAL_AUTHOR_ID:
            await self._local.delete_note(note_id, page_url)
            return

        if not requesting_user:
            raise NotAuthenticatedError()
        await self._remote.delete_note(note_id, page_url, access_token)
        self.invalidate_remote_index()

    def invalidate_remote_index(self) -> None:
        """Drop the cached remote index; call after writes and on sign-in/out."""
        self._remote.invalidate_index_cache()

    async def aclose(self) -> None:
        await self._remote.aclose()
