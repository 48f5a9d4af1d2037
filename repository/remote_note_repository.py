import logging
from typing import Any, Dict, List, Optional
import httpx
from pydantic import TypeAdapter
from config.settings import settings
from core.index_cache import IndexCache
from core.note_index import NoteIndex
from model.api import IndexResponse
from model.note import Note, RemoteNoteRow
from repository.note_store import NoteStore, validate_note
from util.constants import ExternalURIs
from util.errors import NoteNotFoundError, TransportError
from util.functions import postgrest_in
from util.timing import timed

logger = logging.getLogger(__name__)

_ROWS = TypeAdapter(List[RemoteNoteRow])


class RemoteNoteStore(NoteStore):
    """
    Published notes in the Supabase `notes` table.

    Flow:
    - queryIndex asks the index edge function for (author, page) pairs limited
      to the user's follow set (self included); the result is cached per user
      in the injected IndexCache.
    - queryNotes only hits the table when the index lists authors for the page,
      and filters the fetch to exactly those authors.
    - Writes never touch the cache; the caller invalidates it once the write
      has completed.
    """

    def __init__(
        self,
        cache: IndexCache,
        client: Optional[httpx.AsyncClient] = None,
        *,
        api_key: str = settings.SUPABASE_ANON_KEY,
        table: str = settings.REMOTE_NOTES_TABLE,
        index_function: str = settings.REMOTE_INDEX_FUNCTION,
        content_max: int = settings.CONTENT_MAX_LENGTH,
        selector_max: int = settings.SELECTOR_MAX_LENGTH,
        page_url_max: int = settings.PAGE_URL_MAX_LENGTH,
    ) -> None:
        self._cache = cache
        self._http = client or httpx.AsyncClient(
            base_url=settings.SUPABASE_URL,
            timeout=httpx.Timeout(settings.REMOTE_TIMEOUT_SECONDS, connect=5.0),
        )
        self._api_key = api_key
        self._table_url = f"{ExternalURIs.SUPABASE_REST}/{table}"
        self._index_url = f"{ExternalURIs.SUPABASE_FUNCTIONS}/{index_function}"
        self._content_max = int(content_max)
        self._selector_max = int(selector_max)
        self._page_url_max = int(page_url_max)

    def _headers(
        self, *, representation: bool = False, access_token: Optional[str] = None
    ) -> Dict[str, str]:
        # apikey always identifies the project; the bearer is the user JWT when
        # one is given, so row-level security sees the author.
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {access_token or self._api_key}",
            "content-type": "application/json",
        }
        if representation:
            headers["Prefer"] = "return=representation"
        return headers

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        res = await self._http.request(method, url, **kwargs)
        res.raise_for_status()
        return res

    def invalidate_index_cache(self) -> None:
        self._cache.invalidate()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ---------------- Reads (never raise) ----------------

    async def query_index(self, requesting_user: Optional[str] = None) -> NoteIndex:
        if not requesting_user:
            return NoteIndex.empty()

        cached = self._cache.get(requesting_user)
        if cached is not None:
            logger.debug("notes.remote.index.hit user=%s", requesting_user)
            return cached

        try:
            with timed(logger, "notes.remote.index", user=requesting_user):
                res = await self._request(
                    "POST",
                    self._index_url,
                    headers=self._headers(),
                    json={"did": requesting_user},
                )
            data = IndexResponse.model_validate(res.json())
        except (httpx.HTTPError, ValueError) as e:
            # Failed fetches are not cached; the next call retries.
            logger.error(
                "notes.remote.index.error user=%s err=%s", requesting_user, type(e).__name__
            )
            return NoteIndex.empty()

        index = NoteIndex.from_dto(data.index)
        self._cache.set(requesting_user, index)
        logger.info(
            "notes.remote.index.miss user=%s authors=%d", requesting_user, len(index)
        )
        return index

    async def query_notes(
        self, page_url: str, requesting_user: Optional[str] = None
    ) -> List[Note]:
        if not requesting_user:
            return []

        index = await self.query_index(requesting_user)
        authors = index.get_authors_for_page(page_url)
        if not authors:
            return []

        params = {
            "select": "*",
            "page_url": f"eq.{page_url}",
            "author_id": postgrest_in(sorted(authors)),
        }
        try:
            with timed(logger, "notes.remote.query", page=page_url, authors=len(authors)):
                res = await self._request(
                    "GET", self._table_url, headers=self._headers(), params=params
                )
            rows = _ROWS.validate_python(res.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "notes.remote.query.error page=%s err=%s", page_url, type(e).__name__
            )
            return []
        return [row.to_note() for row in rows]

    # ---------------- Writes (raise) ----------------

    async def upsert_note(self, note: Note, access_token: Optional[str] = None) -> Note:
        validate_note(
            note,
            content_max=self._content_max,
            selector_max=self._selector_max,
            page_url_max=self._page_url_max,
        )
        payload = RemoteNoteRow.from_note(note).to_payload()
        # Insert vs update is decided by the presence of an id alone.
        try:
            if note.id:
                res = await self._request(
                    "PATCH",
                    self._table_url,
                    headers=self._headers(representation=True, access_token=access_token),
                    params={"id": f"eq.{note.id}"},
                    json=payload,
                )
            else:
                res = await self._request(
                    "POST",
                    self._table_url,
                    headers=self._headers(representation=True, access_token=access_token),
                    json=payload,
                )
            rows = _ROWS.validate_python(res.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "notes.remote.upsert.error page=%s id=%s err=%s",
                note.anchorData.pageUrl,
                note.id,
                type(e).__name__,
            )
            raise TransportError("Failed to publish note") from e

        if not rows:
            if note.id:
                raise NoteNotFoundError(note.id)
            raise TransportError("Remote store returned no row for insert")

        stored = rows[0].to_note()
        logger.info("notes.remote.upsert page=%s id=%s", stored.anchorData.pageUrl, stored.id)
        return stored

    async def delete_note(
        self, note_id: str, page_url: str, access_token: Optional[str] = None
    ) -> None:
        try:
            await self._request(
                "DELETE",
                self._table_url,
                headers=self._headers(access_token=access_token),
                params={"id": f"eq.{note_id}"},
            )
        except httpx.HTTPError as e:
            logger.error(
                "notes.remote.delete.error page=%s id=%s err=%s",
                page_url,
                note_id,
                type(e).__name__,
            )
            raise TransportError("Failed to delete published note") from e
        logger.info("notes.remote.delete page=%s id=%s", page_url, note_id)
