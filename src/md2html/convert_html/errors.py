"""Exceptions raised by the Markdown-to-HTML pipeline."""

from __future__ import annotations


class ConversionError(RuntimeError):
    """Raised when a document fails to convert."""


class AllocationError(ConversionError):
    """Raised when memory for the document or its units runs out."""


class SourceError(ConversionError):
    """Raised when the Markdown input cannot be read."""


class DestinationOpenError(ConversionError):
    """Raised when the HTML destination cannot be opened for writing."""


class DestinationWriteError(ConversionError):
    """Raised when writing to an opened HTML destination fails."""


class UnitConsumedError(ConversionError):
    """Raised when a source unit's payload is taken a second time."""


class DocumentReleasedError(ConversionError):
    """Raised when a released document is used again."""


__all__ = [
    "ConversionError",
    "AllocationError",
    "SourceError",
    "DestinationOpenError",
    "DestinationWriteError",
    "UnitConsumedError",
    "DocumentReleasedError",
]
