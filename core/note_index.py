from typing import AbstractSet, Dict, FrozenSet, Iterable, Iterator, Mapping, Optional, Tuple
from util.types import IndexDto


class NoteIndex:
    """
    Immutable mapping of authorId -> set of pageUrls the author has notes on.

    Used as a cheap pre-filter before fetching a page's notes. An author with
    no pages is never stored: operations that empty an author's set drop the
    key instead.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[str, Iterable[str]]] = None) -> None:
        cleaned: Dict[str, FrozenSet[str]] = {}
        for author_id, pages in (entries or {}).items():
            page_set = frozenset(pages)
            if page_set:
                cleaned[author_id] = page_set
        self._entries = cleaned

    @classmethod
    def empty(cls) -> "NoteIndex":
        return cls()

    @classmethod
    def from_dto(cls, dto: Optional[IndexDto]) -> "NoteIndex":
        return cls(dto or {})

    def to_dto(self) -> IndexDto:
        # Sorted for stable storage and responses; order carries no meaning.
        return {author: sorted(pages) for author, pages in sorted(self._entries.items())}

    def get_authors_for_page(self, page_url: str) -> FrozenSet[str]:
        return frozenset(a for a, pages in self._entries.items() if page_url in pages)

    def get_pages_for_author(self, author_id: str) -> FrozenSet[str]:
        return self._entries.get(author_id, frozenset())

    def entries(self) -> Iterator[Tuple[str, AbstractSet[str]]]:
        return iter(self._entries.items())

    def authors(self) -> FrozenSet[str]:
        return frozenset(self._entries)

    def merge(self, other: "NoteIndex") -> "NoteIndex":
        """Union per author; commutative, associative, identity is the empty index."""
        merged: Dict[str, FrozenSet[str]] = dict(self._entries)
        for author_id, pages in other._entries.items():
            merged[author_id] = merged.get(author_id, frozenset()) | pages
        return NoteIndex(merged)

    def __contains__(self, author_id: object) -> bool:
        return author_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NoteIndex):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(frozenset(self._entries.items()))

    def __repr__(self) -> str:
        return f"NoteIndex({self.to_dto()!r})"
