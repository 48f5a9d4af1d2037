"""Shared fixtures for the notes service tests."""

import os

# Settings are read at import time; provide a complete test environment first.
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("ALLOWED_ORIGIN", "http://localhost")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_TIMES", "100")
os.environ.setdefault("RATE_LIMIT_SECONDS", "60")
os.environ.setdefault("TRUST_PROXY", "false")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")

import httpx
import pytest
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis

from core.index_cache import IndexCache
from repository.local_note_repository import LocalNoteStore
from repository.remote_note_repository import RemoteNoteStore
from service.notes_sync_service import NotesSyncManager
from tests.factories import (
    CONTENT_MAX,
    PAGE_URL_MAX,
    SELECTOR_MAX,
    FakeClock,
    FakeSupabase,
)


# ---------------- Fixtures ----------------


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def index_cache(clock):
    return IndexCache(ttl_seconds=30, clock=clock)


@pytest.fixture
def redis_client():
    return FakeRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def local_store(redis_client):
    return LocalNoteStore(
        redis_client, content_max=CONTENT_MAX, selector_max=SELECTOR_MAX
    )


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def remote_store(supabase, index_cache):
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(supabase.handler),
        base_url="https://test.supabase.co",
    )
    return RemoteNoteStore(
        index_cache,
        client,
        api_key="anon-key",
        content_max=CONTENT_MAX,
        selector_max=SELECTOR_MAX,
        page_url_max=PAGE_URL_MAX,
    )


@pytest.fixture
def manager(local_store, remote_store):
    return NotesSyncManager(local_store, remote_store)
