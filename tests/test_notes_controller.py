"""HTTP tests for the notes routes, served in-process over ASGI."""

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

import routes
from util.constants import LOCAL_AUTHOR_ID, InternalURIs
from tests.factories import ALICE, BASE_TIME, PAGE, make_anchor


@pytest.fixture
def app(manager):
    api = FastAPI()
    routes.register_routes(api)
    api.state.notes_manager = manager
    return api


@pytest_asyncio.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c


def upsert_body(content: str = "hello", target: str = "local", **extra):
    body = {
        "data": {
            "content": content,
            "anchorData": make_anchor(PAGE).model_dump(mode="json"),
            "updatedAt": int(BASE_TIME.timestamp() * 1000),
        },
        "target": target,
    }
    body.update(extra)
    return body


class TestNotesRoutes:
    """Request/response shapes and error mapping."""

    @pytest.mark.asyncio
    async def test_upsert_local_returns_page_notes(self, client):
        res = await client.post(InternalURIs.UPSERT_NOTE, json=upsert_body())

        assert res.status_code == 200
        [note] = res.json()
        assert note["authorId"] == LOCAL_AUTHOR_ID
        assert note["id"]
        assert note["updatedAt"] == int(BASE_TIME.timestamp() * 1000)
        assert note["anchorData"]["elementSelector"] == "#x"

    @pytest.mark.asyncio
    async def test_query_notes(self, client):
        await client.post(InternalURIs.UPSERT_NOTE, json=upsert_body("one"))

        res = await client.post(InternalURIs.QUERY_NOTES, json={"pageUrl": PAGE})

        assert res.status_code == 200
        assert [n["content"] for n in res.json()] == ["one"]

    @pytest.mark.asyncio
    async def test_query_notes_requires_page_url(self, client):
        res = await client.post(InternalURIs.QUERY_NOTES, json={"pageUrl": ""})

        assert res.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_returns_remaining_notes(self, client):
        [note] = (
            await client.post(InternalURIs.UPSERT_NOTE, json=upsert_body())
        ).json()

        res = await client.post(
            InternalURIs.DELETE_NOTE,
            json={"noteId": note["id"], "pageUrl": PAGE, "authorId": LOCAL_AUTHOR_ID},
        )

        assert res.status_code == 200
        assert res.json() == []

    @pytest.mark.asyncio
    async def test_query_index(self, client):
        await client.post(InternalURIs.UPSERT_NOTE, json=upsert_body())

        res = await client.post(InternalURIs.QUERY_INDEX, json={})

        assert res.status_code == 200
        assert res.json() == {"index": {LOCAL_AUTHOR_ID: [PAGE]}}

    @pytest.mark.asyncio
    async def test_remote_upsert_with_user(self, client, supabase):
        res = await client.post(
            InternalURIs.UPSERT_NOTE,
            json=upsert_body("public", target="remote", requestingUser=ALICE),
        )

        assert res.status_code == 200
        assert [n["authorId"] for n in res.json()] == [ALICE]
        assert len(supabase.rows) == 1

    @pytest.mark.asyncio
    async def test_remote_upsert_without_user_is_401(self, client, supabase):
        res = await client.post(
            InternalURIs.UPSERT_NOTE, json=upsert_body(target="remote")
        )

        assert res.status_code == 401
        assert supabase.requests == []

    @pytest.mark.asyncio
    async def test_oversize_content_is_422(self, client):
        res = await client.post(InternalURIs.UPSERT_NOTE, json=upsert_body("x" * 500))

        assert res.status_code == 422
        assert "100" in res.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_target_is_422(self, client):
        res = await client.post(InternalURIs.UPSERT_NOTE, json=upsert_body(target="cloud"))

        assert res.status_code == 422

    @pytest.mark.asyncio
    async def test_page_urls_are_normalized(self, client):
        body = upsert_body("tracked")
        body["data"]["anchorData"]["pageUrl"] = "https://A.com/p?utm=1#frag"

        [note] = (await client.post(InternalURIs.UPSERT_NOTE, json=body)).json()
        res = await client.post(
            InternalURIs.QUERY_NOTES, json={"pageUrl": "https://a.com/p?other=2"}
        )

        assert note["anchorData"]["pageUrl"] == PAGE
        assert [n["content"] for n in res.json()] == ["tracked"]

    @pytest.mark.asyncio
    async def test_remote_upsert_forwards_access_token(self, client, supabase):
        res = await client.post(
            InternalURIs.UPSERT_NOTE,
            json=upsert_body(
                target="remote", requestingUser=ALICE, accessToken="user-jwt"
            ),
        )

        assert res.status_code == 200
        insert = next(
            r
            for r in supabase.requests
            if r.method == "POST" and r.url.path == "/rest/v1/notes"
        )
        assert insert.headers["authorization"] == "Bearer user-jwt"
