"""
Structural selector engine.

Supports exactly the selectors the anchor capture produces, plus plain
descendant combinators:

    compound   := tag | "#" ident | tag "#" ident, then optional ":nth-of-type(n)"
    selector   := compound ((" > " | whitespace) compound)*

Anything else raises SelectorSyntaxError. Matching mirrors querySelector: the
leftmost compound may match at any depth, the first hit in document order wins.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional
from core.entities import DomNode


class SelectorSyntaxError(ValueError):
    pass


_COMPOUND = re.compile(
    r"(?P<tag>[a-zA-Z][a-zA-Z0-9-]*)?"
    r"(?:#(?P<id>-?[_a-zA-Z][_a-zA-Z0-9-]*))?"
    r"(?::nth-of-type\((?P<nth>[1-9][0-9]*)\))?"
)
_SEPARATOR = re.compile(r"(\s*>\s*|\s+)")

CHILD = ">"
DESCENDANT = " "


@dataclass(frozen=True)
class Compound:
    tag: Optional[str]
    id: Optional[str]
    nth: Optional[int]

    def matches(self, node: DomNode) -> bool:
        if self.tag is not None and node.tag != self.tag:
            return False
        if self.id is not None and node.id != self.id:
            return False
        if self.nth is not None:
            siblings = node.same_tag_siblings()
            if self.nth > len(siblings) or siblings[self.nth - 1] is not node:
                return False
        return True


@dataclass(frozen=True)
class Step:
    # combinator linking this compound to the previous one; None for the first
    combinator: Optional[str]
    compound: Compound


def _parse_compound(text: str, selector: str) -> Compound:
    m = _COMPOUND.fullmatch(text)
    if not text or m is None or not (m.group("tag") or m.group("id")):
        raise SelectorSyntaxError(f"unsupported compound {text!r} in {selector!r}")
    nth = m.group("nth")
    return Compound(
        tag=m.group("tag").lower() if m.group("tag") else None,
        id=m.group("id"),
        nth=int(nth) if nth else None,
    )


def parse_selector(selector: str) -> List[Step]:
    if not isinstance(selector, str) or not selector.strip():
        raise SelectorSyntaxError("empty selector")
    parts = _SEPARATOR.split(selector.strip())
    steps: List[Step] = []
    combinator: Optional[str] = None
    # split() with a capture group alternates compound, separator, compound...
    for i, part in enumerate(parts):
        if i % 2:
            combinator = CHILD if ">" in part else DESCENDANT
            continue
        steps.append(Step(combinator, _parse_compound(part, selector)))
    return steps


def _matches_from(node: DomNode, steps: List[Step], pos: int) -> bool:
    step = steps[pos]
    if not step.compound.matches(node):
        return False
    if pos == 0:
        return True
    parent = node.parent
    if step.combinator == CHILD:
        return parent is not None and _matches_from(parent, steps, pos - 1)
    while parent is not None:
        if _matches_from(parent, steps, pos - 1):
            return True
        parent = parent.parent
    return False


def query_selector_all(root: DomNode, selector: str) -> Iterator[DomNode]:
    steps = parse_selector(selector)
    last = len(steps) - 1
    for node in [root, *root.iter_descendants()]:
        if _matches_from(node, steps, last):
            yield node


def query_selector(root: DomNode, selector: str) -> Optional[DomNode]:
    """First match in document order; raises SelectorSyntaxError when malformed."""
    return next(query_selector_all(root, selector), None)
