from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Optional


@dataclass(frozen=True)
class BoundingBox:
    """Viewport-relative layout box of an element."""

    left: float
    top: float
    width: float
    height: float

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0


EMPTY_BOX = BoundingBox(0.0, 0.0, 0.0, 0.0)


@dataclass(eq=False)
class DomNode:
    """
    Minimal element model: tag, optional id, layout box and the tree links.
    Identity equality, like DOM nodes.
    """

    tag: str
    id: Optional[str] = None
    box: BoundingBox = EMPTY_BOX
    children: List["DomNode"] = field(default_factory=list)
    parent: Optional["DomNode"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.tag = self.tag.lower()
        for child in self.children:
            child.parent = self

    def append(self, child: "DomNode") -> "DomNode":
        child.parent = self
        self.children.append(child)
        return child

    def iter_descendants(self) -> Iterator["DomNode"]:
        """Depth-first, document order, excluding self."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def same_tag_siblings(self) -> List["DomNode"]:
        if self.parent is None:
            return [self]
        return [c for c in self.parent.children if c.tag == self.tag]


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    scroll_y: float = 0.0


@dataclass
class PageState:
    """The page as seen at capture or render time."""

    url: str
    document: DomNode
    viewport: Viewport

    @property
    def body(self) -> DomNode:
        if self.document.tag == "body":
            return self.document
        for node in self.document.iter_descendants():
            if node.tag == "body":
                return node
        return self.document


@dataclass(frozen=True)
class InteractionEvent:
    """A click (context-menu) on `target`, in viewport coordinates."""

    target: DomNode
    client_x: float
    client_y: float


class Point(NamedTuple):
    x: float
    y: float
