"""Unit kinds, HTML tags, and the per-unit transform."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .errors import AllocationError, UnitConsumedError

logger = logging.getLogger(__name__)


class UnitKind(Enum):
    """Semantic kind of a parsed Markdown unit."""

    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    BULLET_ITEM = "bullet_item"
    IMAGE = "image"
    PLAIN_LINE = "plain_line"


class HTMLTag(Enum):
    """HTML element a unit renders as, with its wrapping text."""

    H1 = ("h1", "<h1>", "</h1>")
    H2 = ("h2", "<h2>", "</h2>")
    H3 = ("h3", "<h3>", "</h3>")
    LI = ("li", "<li>", "</li>")
    IMG = ("img", None, None)
    NONE = ("none", None, None)

    def __init__(
        self, label: str, start_text: Optional[str], end_text: Optional[str]
    ) -> None:
        self.label = label
        self.start_text = start_text
        self.end_text = end_text

    @property
    def is_heading(self) -> bool:
        return self in _HEADINGS


_HEADINGS = frozenset({HTMLTag.H1, HTMLTag.H2, HTMLTag.H3})

_TAGS_BY_KIND: dict[UnitKind, HTMLTag] = {
    UnitKind.HEADING1: HTMLTag.H1,
    UnitKind.HEADING2: HTMLTag.H2,
    UnitKind.HEADING3: HTMLTag.H3,
    UnitKind.BULLET_ITEM: HTMLTag.LI,
    UnitKind.IMAGE: HTMLTag.IMG,
    UnitKind.PLAIN_LINE: HTMLTag.NONE,
}


def tag_of(kind: object) -> HTMLTag:
    """Return the tag for ``kind``; anything unrecognised maps to NONE."""

    try:
        return _TAGS_BY_KIND.get(kind, HTMLTag.NONE)  # type: ignore[arg-type]
    except TypeError:
        # unhashable
        return HTMLTag.NONE


@dataclass
class SourceUnit:
    """A parsed unit whose strings are handed over exactly once.

    ``take()`` moves ``content`` and ``uri`` out of the unit. The fields
    are cleared afterwards and a second ``take()`` raises
    :class:`UnitConsumedError`.
    """

    kind: UnitKind
    content: Optional[str] = ""
    uri: Optional[str] = None
    consumed: bool = field(default=False, compare=False)

    def take(self) -> tuple[str, Optional[str]]:
        if self.consumed:
            raise UnitConsumedError(
                f"{self.kind!r} unit was already transformed."
            )
        content, uri = self.content, self.uri
        self.content = None
        self.uri = None
        self.consumed = True
        return content or "", uri


@dataclass(frozen=True)
class RenderableUnit:
    """A unit ready for serialization."""

    tag: HTMLTag
    content: str = ""
    uri: Optional[str] = None


def transform(unit: SourceUnit) -> RenderableUnit:
    """Map ``unit`` to a :class:`RenderableUnit`, consuming its payload."""

    tag = tag_of(unit.kind)
    if tag is HTMLTag.NONE and unit.kind is not UnitKind.PLAIN_LINE:
        logger.debug(
            "Unrecognised unit kind rendered as plain line",
            extra={"kind": repr(unit.kind)},
        )
    content, uri = unit.take()
    try:
        return RenderableUnit(tag=tag, content=content, uri=uri)
    except MemoryError as exc:
        raise AllocationError("Unable to allocate renderable unit.") from exc


__all__ = [
    "UnitKind",
    "HTMLTag",
    "SourceUnit",
    "RenderableUnit",
    "tag_of",
    "transform",
]
