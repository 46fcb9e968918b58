"""Convert parsed Markdown units into a single HTML document."""

from __future__ import annotations

from .convert_html import (
    DocumentDefaults,
    HTMLDocument,
    HTMLTag,
    RenderableUnit,
    SourceUnit,
    UnitKind,
    convert,
    parse_markdown,
    release,
    serialize,
    tag_of,
    transform,
)

__all__ = [
    "DocumentDefaults",
    "HTMLDocument",
    "HTMLTag",
    "RenderableUnit",
    "SourceUnit",
    "UnitKind",
    "convert",
    "parse_markdown",
    "release",
    "serialize",
    "tag_of",
    "transform",
]
