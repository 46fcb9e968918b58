"""Assemble parsed units into an :class:`HTMLDocument`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .errors import AllocationError, DocumentReleasedError
from .units import RenderableUnit, SourceUnit, transform

DEFAULT_DESTINATION_NAME = "index.html"
DEFAULT_TITLE = "Document"


@dataclass(frozen=True)
class DocumentDefaults:
    """Fallback file name and title used when no override is given."""

    destination_name: str = DEFAULT_DESTINATION_NAME
    title: str = DEFAULT_TITLE


class HTMLDocument:
    """Renderable units plus the metadata needed to write them out.

    Every field is read-only once constructed. ``release()`` is the only
    mutation: it drops the units and marks the document unusable.
    """

    __slots__ = ("_destination_name", "_title", "_units", "_released")

    def __init__(
        self,
        destination_name: str,
        title: str,
        units: Iterable[RenderableUnit] = (),
    ) -> None:
        self._destination_name = destination_name
        self._title = title
        self._units: tuple[RenderableUnit, ...] = tuple(units)
        self._released = False

    @property
    def destination_name(self) -> str:
        return self._destination_name

    @property
    def title(self) -> str:
        return self._title

    @property
    def units(self) -> tuple[RenderableUnit, ...]:
        return self._units

    @property
    def released(self) -> bool:
        return self._released

    def __len__(self) -> int:
        return len(self._units)

    def __repr__(self) -> str:
        return (
            f"HTMLDocument(destination_name={self._destination_name!r}, "
            f"title={self._title!r}, units={len(self._units)})"
        )

    def ensure_live(self) -> None:
        if self._released:
            raise DocumentReleasedError(
                f"Document '{self._destination_name}' was already released."
            )

    def release(self) -> None:
        self.ensure_live()
        self._units = ()
        self._released = True


def build(
    units: Iterable[SourceUnit],
    name_override: Optional[str] = None,
    title_override: Optional[str] = None,
    *,
    defaults: DocumentDefaults = DocumentDefaults(),
) -> HTMLDocument:
    """Transform ``units`` in order and wrap them in a document.

    Overrides win when they are non-blank; otherwise ``defaults`` apply.
    Each source unit is consumed by the transform.
    """

    try:
        rendered: list[RenderableUnit] = []
        for unit in units:
            rendered.append(transform(unit))
        return HTMLDocument(
            destination_name=_pick(name_override, defaults.destination_name),
            title=_pick(title_override, defaults.title),
            units=tuple(rendered),
        )
    except MemoryError as exc:
        raise AllocationError("Unable to allocate HTML document.") from exc


convert = build


def release(doc: HTMLDocument) -> None:
    """Tear ``doc`` down; it cannot be serialized afterwards."""

    doc.release()


def _pick(override: Optional[str], default: str) -> str:
    if override is not None and override.strip():
        return override
    return default


__all__ = [
    "DEFAULT_DESTINATION_NAME",
    "DEFAULT_TITLE",
    "DocumentDefaults",
    "HTMLDocument",
    "build",
    "convert",
    "release",
]
