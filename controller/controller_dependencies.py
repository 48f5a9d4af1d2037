from typing import List
from fastapi import Request
from fastapi.params import Depends
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.index_cache import IndexCache
from repository.local_note_repository import LocalNoteStore
from repository.remote_note_repository import RemoteNoteStore
from service.notes_sync_service import NotesSyncManager


def build_notes_sync_manager() -> NotesSyncManager:
    """One manager per process: the remote index cache lives as long as it does."""
    cache = IndexCache(ttl_seconds=settings.INDEX_CACHE_TTL_SECONDS)
    return NotesSyncManager(LocalNoteStore(), RemoteNoteStore(cache))


def get_notes_sync_manager(request: Request) -> NotesSyncManager:
    return request.app.state.notes_manager


def rate_limit_dependencies() -> List[Depends]:
    if not settings.RATE_LIMIT_ENABLED:
        return []
    return [
        Depends(
            RateLimiter(
                times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
            )
        )
    ]
