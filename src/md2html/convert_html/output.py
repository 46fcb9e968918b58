"""Stream an :class:`HTMLDocument` to a file or text stream."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Optional, TextIO, Union

from jinja2 import Environment

from .document import HTMLDocument
from .errors import DestinationOpenError, DestinationWriteError
from .units import HTMLTag, RenderableUnit

logger = logging.getLogger(__name__)

Destination = Union[str, "os.PathLike[str]", TextIO, None]

NEWLINE = "\n"
INDENT = "\t"
LINE_BREAK = "<br>"
LIST_OPEN = "<ul>"
LIST_CLOSE = "</ul>"

# Only ``title`` is interpolated; every other byte is fixed.
_ENV = Environment(autoescape=False, keep_trailing_newline=True)
HEAD_TEMPLATE = _ENV.from_string(
    "<!DOCTYPE html>\n"
    '<html lang="en">\n'
    "<head>\n"
    '\t<meta charset="UTF-8">\n'
    '\t<meta name="viewport" '
    'content="width=device-width, initial-scale=1.0">\n'
    "\t<title>{{ title }}</title>\n"
    "</head>\n"
    "<body>\n"
)
TAIL_TEMPLATE = _ENV.from_string("</body>\n</html>\n")


def serialize(
    doc: HTMLDocument, destination: Destination = None
) -> Optional[Path]:
    """Write ``doc`` as HTML and return the path written to.

    ``destination`` may be a path, an open text stream, or ``None`` to use
    ``doc.destination_name``. Paths are opened and closed here; streams are
    only flushed and ``None`` is returned for them.
    """

    doc.ensure_live()
    if destination is None:
        destination = Path(doc.destination_name)

    if hasattr(destination, "write"):
        stream: TextIO = destination  # type: ignore[assignment]
        try:
            _write_document(doc, stream)
            stream.flush()
        except OSError as exc:
            raise DestinationWriteError(
                f"Failed writing HTML to stream: {exc}"
            ) from exc
        return None

    path = Path(destination)  # type: ignore[arg-type]
    try:
        handle = path.open("w", encoding="utf-8", newline="")
    except OSError as exc:
        raise DestinationOpenError(
            f"Unable to open '{path}' for writing: {exc.strerror or exc}"
        ) from exc
    try:
        with handle:
            _write_document(doc, handle)
    except OSError as exc:
        raise DestinationWriteError(
            f"Failed writing HTML to '{path}': {exc.strerror or exc}"
        ) from exc
    return path


def iter_html(doc: HTMLDocument) -> Iterator[str]:
    """Yield the document's HTML in write order."""

    yield from HEAD_TEMPLATE.generate(title=doc.title)
    yield from _iter_body(doc.units)
    yield from TAIL_TEMPLATE.generate()


def _write_document(doc: HTMLDocument, handle: TextIO) -> None:
    for chunk in iter_html(doc):
        handle.write(chunk)
    logger.debug(
        "Serialized HTML document",
        extra={
            "destination_name": doc.destination_name,
            "unit_count": len(doc),
        },
    )


def _iter_body(units: tuple[RenderableUnit, ...]) -> Iterator[str]:
    inside_list = False
    last = len(units) - 1
    for index, unit in enumerate(units):
        yield NEWLINE

        is_item = unit.tag is HTMLTag.LI
        if is_item and not inside_list:
            yield INDENT + LIST_OPEN + NEWLINE
            inside_list = True

        yield INDENT * 2 if is_item else INDENT
        yield from _render_unit(unit)

        run_ends = index == last or units[index + 1].tag is not HTMLTag.LI
        if is_item and run_ends:
            yield NEWLINE + INDENT + LIST_CLOSE + NEWLINE
            inside_list = False


def _render_unit(unit: RenderableUnit) -> Iterator[str]:
    tag = unit.tag
    if tag.start_text:
        yield tag.start_text
    yield unit.content
    if tag.end_text:
        yield tag.end_text
    # IMG has no wrapping text; any content is emitted before the image.
    if tag is HTMLTag.IMG and unit.uri is not None:
        yield f'<img src="{unit.uri}">'
    if not tag.is_heading:
        yield LINE_BREAK


__all__ = ["HEAD_TEMPLATE", "TAIL_TEMPLATE", "iter_html", "serialize"]
