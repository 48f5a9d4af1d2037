import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional
from core.note_index import NoteIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedIndex:
    user_id: str
    index: NoteIndex
    stored_at: float


class IndexCache:
    """
    Single-slot, TTL-bounded cache for the remote index, keyed by requesting user.

    Holds at most one entry; a lookup for another user is a miss, and storing
    for another user replaces the slot. Every read and write is one attribute
    access, so concurrent coroutines need no lock.
    """

    def __init__(
        self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._slot: Optional[CachedIndex] = None

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, user_id: str) -> Optional[NoteIndex]:
        slot = self._slot
        if slot is None or slot.user_id != user_id:
            return None
        if self._clock() - slot.stored_at >= self._ttl:
            return None
        return slot.index

    def set(self, user_id: str, index: NoteIndex) -> None:
        self._slot = CachedIndex(user_id=user_id, index=index, stored_at=self._clock())

    def invalidate(self) -> None:
        if self._slot is not None:
            logger.debug("notes.index_cache.invalidate user=%s", self._slot.user_id)
        self._slot = None
