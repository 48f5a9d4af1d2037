import logging
from typing import List, Optional
from core.entities import DomNode, InteractionEvent, PageState, Point
from core.selector import SelectorSyntaxError, parse_selector, query_selector
from model.anchor import AnchorDescriptor, ClickPosition, RelativePosition
from util.functions import normalize_page_url

logger = logging.getLogger(__name__)


def _id_step(node: DomNode) -> Optional[str]:
    return f"#{node.id}" if node.id else None


def generate_selector(element: DomNode, body: DomNode, max_length: int) -> Optional[str]:
    """
    Structural path from the nearest id-bearing ancestor (or the body) down to
    `element`, e.g. "#main > ul > li:nth-of-type(3)".

    Returns None when the path is longer than `max_length` or does not parse;
    the note then renders from its click position only.
    """
    path: List[str] = []
    fast = _id_step(element)
    if fast is not None:
        path.append(fast)
    else:
        current: Optional[DomNode] = element
        while current is not None and current is not body:
            step = _id_step(current)
            if step is not None:
                path.insert(0, step)
                break
            step = current.tag
            siblings = current.same_tag_siblings()
            if len(siblings) > 1:
                position = next(i for i, s in enumerate(siblings, start=1) if s is current)
                step += f":nth-of-type({position})"
            path.insert(0, step)
            current = current.parent

    selector = " > ".join(path)
    if not selector or len(selector) > max_length:
        return None
    try:
        parse_selector(selector)
    except SelectorSyntaxError:
        logger.debug("anchor.selector.invalid selector=%r", selector)
        return None
    return selector


def _percent_within(offset: float, extent: float) -> float:
    return (offset / extent) * 100 if extent else 0.0


def capture_anchor(
    event: InteractionEvent, page: PageState, max_selector_length: int
) -> AnchorDescriptor:
    """
    Build the durable anchor for a click. Relative and absolute positions are
    both stored; which one renders is decided later against the live page.
    """
    target = event.target
    box = target.box
    viewport = page.viewport
    return AnchorDescriptor(
        pageUrl=normalize_page_url(page.url),
        elementSelector=generate_selector(target, page.body, max_selector_length),
        relativePosition=RelativePosition(
            xP=_percent_within(event.client_x - box.left, box.width),
            yP=_percent_within(event.client_y - box.top, box.height),
        ),
        clickPosition=ClickPosition(
            xVw=_percent_within(event.client_x, viewport.width),
            yPx=event.client_y + viewport.scroll_y,
        ),
    )


def _locate(selector: Optional[str], page: PageState) -> Optional[DomNode]:
    if not selector:
        return None
    try:
        return query_selector(page.document, selector)
    except SelectorSyntaxError:
        logger.debug("anchor.resolve.bad_selector selector=%r", selector)
        return None


def resolve_anchor(anchor: AnchorDescriptor, page: PageState) -> Point:
    """
    Viewport coordinates for a stored anchor on the current page.

    Prefers the element's current box; a missing, malformed or zero-area match
    falls back to the stored click position. Never raises for a valid anchor.
    """
    element = _locate(anchor.elementSelector, page)
    if element is not None and element.box.has_area:
        box = element.box
        # boxes are viewport-relative already, no scroll adjustment
        return Point(
            x=box.left + box.width * anchor.relativePosition.xP / 100,
            y=box.top + box.height * anchor.relativePosition.yP / 100,
        )

    viewport = page.viewport
    return Point(
        x=viewport.width * anchor.clickPosition.xVw / 100,
        y=anchor.clickPosition.yPx - viewport.scroll_y,
    )
