"""File-level Markdown-to-HTML conversion."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .document import DocumentDefaults, build, release
from .errors import ConversionError, DestinationOpenError
from .output import serialize
from .parser import parse_file

_LOGGER = logging.getLogger(__name__)


class ConversionStatus(Enum):
    """Outcome status for a single conversion."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionOutcome:
    """Result of converting (or attempting to convert) one Markdown file."""

    source: Path
    status: ConversionStatus
    output_path: Optional[Path] = None
    unit_count: int = 0
    reason: Optional[str] = None
    error: Optional[Exception] = None


def convert_file(
    source: Path,
    *,
    output_dir: Path,
    defaults: DocumentDefaults = DocumentDefaults(),
    destination_name: Optional[str] = None,
    title: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> ConversionOutcome:
    """Convert ``source`` into an HTML file under ``output_dir``.

    Pipeline failures are reported through the returned outcome instead of
    being raised.
    """

    log = logger or _LOGGER
    try:
        outcome = _convert_file(
            source,
            output_dir=output_dir,
            defaults=defaults,
            destination_name=destination_name,
            title=title,
            log=log,
        )
    except ConversionError as exc:
        log.error(
            "Failed to convert document",
            extra={"source": str(source), "reason": str(exc)},
        )
        return ConversionOutcome(
            source=source,
            status=ConversionStatus.FAILED,
            reason=str(exc),
            error=exc,
        )

    log.info(
        "Converted document",
        extra={
            "source": str(outcome.source),
            "output_path": str(outcome.output_path),
            "unit_count": outcome.unit_count,
        },
    )
    return outcome


def _convert_file(
    source: Path,
    *,
    output_dir: Path,
    defaults: DocumentDefaults,
    destination_name: Optional[str],
    title: Optional[str],
    log: logging.Logger,
) -> ConversionOutcome:
    units = parse_file(source)
    log.debug(
        "Parsed Markdown source",
        extra={"source": str(source), "unit_count": len(units)},
    )

    document = build(units, destination_name, title, defaults=defaults)
    try:
        target = output_dir / document.destination_name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise DestinationOpenError(
                f"Unable to create output directory '{target.parent}': "
                f"{exc.strerror or exc}"
            ) from exc
        serialize(document, target)
        unit_count = len(document)
    finally:
        release(document)

    return ConversionOutcome(
        source=source,
        status=ConversionStatus.SUCCESS,
        output_path=target,
        unit_count=unit_count,
    )


__all__ = [
    "ConversionOutcome",
    "ConversionStatus",
    "convert_file",
]
