"""Turn Markdown text into the flat unit sequence the builder consumes.

Only the constructs the HTML writer knows about are recognised: three
heading levels, bullet items, standalone images, and plain lines. Nested
lists are flattened and inline markup is kept as written.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Sequence

from markdown_it import MarkdownIt
from markdown_it.helpers import parseLinkDestination
from markdown_it.token import Token

from .errors import SourceError
from .units import SourceUnit, UnitKind

logger = logging.getLogger(__name__)

_HEADING_KINDS = {
    "h1": UnitKind.HEADING1,
    "h2": UnitKind.HEADING2,
    "h3": UnitKind.HEADING3,
}
_LINE_BREAKS = frozenset({"softbreak", "hardbreak"})
_VERBATIM_BLOCKS = frozenset({"fence", "code_block", "html_block"})


def build_markdown_it() -> MarkdownIt:
    md = MarkdownIt("commonmark")
    # Image sources are emitted as written, without percent-encoding.
    md.normalizeLink = lambda url: url
    return md


def parse_markdown(
    text: str, *, md: MarkdownIt | None = None
) -> List[SourceUnit]:
    """Return the units found in ``text`` in document order."""

    tokens = (md or build_markdown_it()).parse(text)
    units = list(_iter_units(tokens))
    logger.debug("Parsed Markdown", extra={"unit_count": len(units)})
    return units


def parse_file(path: Path) -> List[SourceUnit]:
    """Read ``path`` as UTF-8 and parse it."""

    if not path.exists():
        raise SourceError(f"{path}: No such file or directory")
    if not path.is_file():
        raise SourceError(f"{path}: Not a regular file")
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise SourceError(f"{path}: {exc.strerror or exc}") from exc
    return parse_markdown(text)


def _iter_units(tokens: Sequence[Token]) -> Iterator[SourceUnit]:
    lists: list[str] = []
    heading: str | None = None

    for token in tokens:
        kind = token.type
        if kind in ("bullet_list_open", "ordered_list_open"):
            lists.append(kind)
        elif kind in ("bullet_list_close", "ordered_list_close"):
            lists.pop()
        elif kind == "heading_open":
            heading = token.tag
        elif kind == "heading_close":
            heading = None
        elif kind == "inline":
            if heading is not None:
                yield SourceUnit(
                    _HEADING_KINDS.get(heading, UnitKind.PLAIN_LINE),
                    token.content.strip(),
                )
                continue
            if lists and lists[-1] == "bullet_list_open":
                yield from _inline_units(token, UnitKind.BULLET_ITEM)
            else:
                yield from _inline_units(token, UnitKind.PLAIN_LINE)
        elif kind in _VERBATIM_BLOCKS:
            for line in token.content.rstrip("\n").split("\n"):
                if line.strip():
                    yield SourceUnit(UnitKind.PLAIN_LINE, line.rstrip())


def _inline_units(token: Token, kind: UnitKind) -> Iterator[SourceUnit]:
    lines = token.content.split("\n")
    groups = _split_children(token.children or [])
    if len(groups) != len(lines):
        groups = [[] for _ in lines]

    for line, children in zip(lines, groups):
        text = line.strip()
        image = _standalone_image(children)
        if image is not None:
            uri = _raw_destination(text)
            if uri is None:
                uri = image.attrGet("src") or ""
            yield SourceUnit(UnitKind.IMAGE, "", uri)
        elif text:
            yield SourceUnit(kind, text)


def _split_children(children: Sequence[Token]) -> list[list[Token]]:
    groups: list[list[Token]] = [[]]
    for child in children:
        if child.type in _LINE_BREAKS:
            groups.append([])
        else:
            groups[-1].append(child)
    return groups


def _standalone_image(children: Sequence[Token]) -> Token | None:
    significant = [
        child
        for child in children
        if not (child.type == "text" and not child.content.strip())
    ]
    if len(significant) == 1 and significant[0].type == "image":
        return significant[0]
    return None


def _raw_destination(text: str) -> str | None:
    """Return the link destination of ``![alt](dest)`` exactly as typed.

    Reference-style images and anything unparsable yield ``None``.
    """

    if not text.startswith("!["):
        return None
    depth = 1
    pos = 2
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                break
        pos += 1
    else:
        return None

    pos += 1
    if text[pos : pos + 1] != "(":
        return None
    pos += 1
    while pos < len(text) and text[pos] in " \t":
        pos += 1

    result = parseLinkDestination(text, pos, len(text))
    if not result.ok:
        return None
    raw = text[pos : result.pos]
    if raw.startswith("<") and raw.endswith(">"):
        raw = raw[1:-1]
    return raw


__all__ = ["build_markdown_it", "parse_file", "parse_markdown"]
