import logging
from typing import Iterable, List, Optional
from uuid import uuid4
from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError
from config.cache import get_redis
from config.settings import settings
from core.note_index import NoteIndex
from model.note import Note
from repository.namespaces import LOCAL_INDEX, LOCAL_NOTES
from repository.note_store import NoteStore, validate_note
from util.constants import LOCAL_AUTHOR_ID
from util.errors import TransportError

logger = logging.getLogger(__name__)


class LocalNoteStore(NoteStore):
    """
    Redis-backed private notes of the distinguished local author.

    Flow:
    - One hash per page: field = note id, value = the note's JSON.
    - One set holds the pages the local author has notes on.
    - Every write is a single-key command (HSET / HDEL / SADD), so concurrent
      requests never overwrite each other's notes.
    - Upsert writes the note first, then adds the page to the index. A delete
      that empties a page removes it from the index inside a WATCH on the page
      hash, so a racing upsert keeps its page indexed.
    """

    def __init__(
        self,
        client: Optional[Redis] = None,
        *,
        content_max: int = settings.CONTENT_MAX_LENGTH,
        selector_max: int = settings.SELECTOR_MAX_LENGTH,
    ) -> None:
        self._redis = client
        self._content_max = int(content_max)
        self._selector_max = int(selector_max)

    async def _client(self) -> Redis:
        if self._redis is None:
            self._redis = await get_redis()
        return self._redis

    @staticmethod
    def _key(page_url: str) -> str:
        return f"{LOCAL_NOTES}:{page_url}"

    @staticmethod
    def _decode_notes(values: Iterable[str], page_url: str) -> List[Note]:
        out: List[Note] = []
        for raw in values:
            try:
                out.append(Note.model_validate_json(raw))
            except ValidationError:
                # Skip malformed entries instead of losing the whole page
                logger.warning("notes.local.note.malformed page=%s", page_url)
        return out

    async def _drop_page_if_empty(self, r: Redis, page_url: str) -> None:
        key = self._key(page_url)
        async with r.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(key)
                    if await pipe.hlen(key):
                        return
                    pipe.multi()
                    pipe.srem(LOCAL_INDEX, page_url)
                    await pipe.execute()
                    return
                except WatchError:
                    # A note landed on the page meanwhile; look again.
                    continue

    # ---------------- NoteStore ----------------

    async def query_index(self, requesting_user: Optional[str] = None) -> NoteIndex:
        # The local "follow set" is the local author alone.
        try:
            r = await self._client()
            pages = await r.smembers(LOCAL_INDEX)
        except RedisError as e:
            logger.error("notes.local.index.read_error err=%s", type(e).__name__)
            return NoteIndex.empty()
        return NoteIndex({LOCAL_AUTHOR_ID: pages or ()})

    async def query_notes(
        self, page_url: str, requesting_user: Optional[str] = None
    ) -> List[Note]:
        try:
            r = await self._client()
            values = await r.hvals(self._key(page_url))
        except RedisError as e:
            logger.error(
                "notes.local.query.read_error page=%s err=%s", page_url, type(e).__name__
            )
            return []
        notes = self._decode_notes(values or [], page_url)
        return sorted(
            (n for n in notes if n.authorId == LOCAL_AUTHOR_ID), key=lambda n: n.updatedAt
        )

    async def upsert_note(self, note: Note) -> Note:
        validate_note(
            note, content_max=self._content_max, selector_max=self._selector_max
        )
        stored = note.model_copy(
            update={"id": note.id or str(uuid4()), "authorId": LOCAL_AUTHOR_ID}
        )
        page_url = stored.anchorData.pageUrl
        try:
            r = await self._client()
            await r.hset(self._key(page_url), stored.id, stored.model_dump_json())
            await r.sadd(LOCAL_INDEX, page_url)
        except RedisError as e:
            logger.error(
                "notes.local.upsert.error page=%s err=%s", page_url, type(e).__name__
            )
            raise TransportError("Failed to save local note") from e

        logger.info("notes.local.upsert page=%s id=%s", page_url, stored.id)
        return stored

    async def delete_note(self, note_id: str, page_url: str) -> None:
        try:
            r = await self._client()
            removed = await r.hdel(self._key(page_url), note_id)
            # Redis drops the emptied hash itself; only the index needs care.
            await self._drop_page_if_empty(r, page_url)
        except RedisError as e:
            logger.error(
                "notes.local.delete.error page=%s id=%s err=%s",
                page_url,
                note_id,
                type(e).__name__,
            )
            raise TransportError("Failed to delete local note") from e

        logger.info("notes.local.delete page=%s id=%s removed=%d", page_url, note_id, removed)
