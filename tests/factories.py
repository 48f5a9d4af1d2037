"""Builders and in-memory fakes shared by the tests."""

import json
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from model.anchor import AnchorDescriptor
from model.note import Note

PAGE = "https://a.com/p"
OTHER_PAGE = "https://a.com/q"
ALICE = "did:plc:alice"
BOB = "did:plc:bob"
CAROL = "did:plc:carol"

CONTENT_MAX = 100
SELECTOR_MAX = 50
PAGE_URL_MAX = 80

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _parse_in(value: str) -> set[str]:
    inner = value.removeprefix("in.(").removesuffix(")")
    return {part.strip().strip('"') for part in inner.split(",") if part.strip()}


class FakeSupabase:
    """
    In-memory stand-in for the Supabase edge function and the PostgREST
    `notes` table, served through httpx.MockTransport.
    """

    def __init__(self) -> None:
        self.rows: dict[str, dict[str, Any]] = {}
        self.follows: dict[str, list[str]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_status: int | None = None
        self.raise_connect = False
        self._seq = 0

    # ---------------- Inspection ----------------

    @property
    def index_calls(self) -> int:
        return sum(1 for r in self.requests if r.url.path.startswith("/functions/v1/"))

    @property
    def table_calls(self) -> int:
        return sum(1 for r in self.requests if r.url.path.startswith("/rest/v1/"))

    def add_row(
        self,
        author_id: str,
        page_url: str = PAGE,
        content: str = "remote note",
        updated_at: datetime = BASE_TIME,
    ) -> dict[str, Any]:
        self._seq += 1
        row = {
            "id": f"row-{self._seq}",
            "author_id": author_id,
            "page_url": page_url,
            "content": content,
            "element_selector": "#x",
            "relative_position_x": 50.0,
            "relative_position_y": 50.0,
            "click_position_x": 10.0,
            "click_position_y": 300.0,
            "updated_at": updated_at.isoformat(),
        }
        self.rows[row["id"]] = row
        return row

    # ---------------- Transport ----------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_connect:
            raise httpx.ConnectError("connection refused", request=request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"message": "failure"})

        path = request.url.path
        if path == "/functions/v1/get-index":
            return self._index(json.loads(request.content))
        if path == "/rest/v1/notes":
            return getattr(self, f"_{request.method.lower()}")(request)
        return httpx.Response(404, json={"message": "not found"})

    def _index(self, body: dict[str, Any]) -> httpx.Response:
        did = body["did"]
        allowed = {did, *self.follows.get(did, [])}
        index: dict[str, list[str]] = {}
        for row in self.rows.values():
            if row["author_id"] in allowed:
                pages = index.setdefault(row["author_id"], [])
                if row["page_url"] not in pages:
                    pages.append(row["page_url"])
        return httpx.Response(200, json={"index": index})

    def _get(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        page = params["page_url"].removeprefix("eq.")
        authors = _parse_in(params["author_id"])
        rows = [
            r
            for r in self.rows.values()
            if r["page_url"] == page and r["author_id"] in authors
        ]
        return httpx.Response(200, json=rows)

    def _post(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self._seq += 1
        row = {**body, "id": f"row-{self._seq}"}
        self.rows[row["id"]] = row
        return httpx.Response(201, json=[row])

    def _patch(self, request: httpx.Request) -> httpx.Response:
        note_id = request.url.params["id"].removeprefix("eq.")
        if note_id not in self.rows:
            return httpx.Response(200, json=[])
        self.rows[note_id].update(json.loads(request.content))
        return httpx.Response(200, json=[self.rows[note_id]])

    def _delete(self, request: httpx.Request) -> httpx.Response:
        self.rows.pop(request.url.params["id"].removeprefix("eq."), None)
        return httpx.Response(204)


# ---------------- Builders ----------------


def make_anchor(
    page_url: str = PAGE, selector: str | None = "#x", **overrides: Any
) -> AnchorDescriptor:
    data = {
        "pageUrl": page_url,
        "elementSelector": selector,
        "relativePosition": {"xP": 50.0, "yP": 50.0},
        "clickPosition": {"xVw": 10.0, "yPx": 300.0},
    }
    data.update(overrides)
    return AnchorDescriptor.model_validate(data)


def make_note(
    content: str = "hello",
    *,
    page_url: str = PAGE,
    note_id: str | None = None,
    author_id: str = "",
    minutes: int = 0,
    selector: str | None = "#x",
) -> Note:
    return Note(
        id=note_id,
        authorId=author_id,
        content=content,
        anchorData=make_anchor(page_url, selector),
        updatedAt=BASE_TIME + timedelta(minutes=minutes),
    )


