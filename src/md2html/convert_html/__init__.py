"""Markdown unit sequence to HTML document conversion."""

from __future__ import annotations

from .config import (
    ConfigOverrides,
    ConvertHtmlConfig,
    ConvertHtmlConfigError,
    LoadResult,
    load_config,
)
from .converter import ConversionOutcome, ConversionStatus, convert_file
from .document import (
    DocumentDefaults,
    HTMLDocument,
    build,
    convert,
    release,
)
from .errors import (
    AllocationError,
    ConversionError,
    DestinationOpenError,
    DestinationWriteError,
    DocumentReleasedError,
    SourceError,
    UnitConsumedError,
)
from .output import iter_html, serialize
from .parser import parse_file, parse_markdown
from .units import (
    HTMLTag,
    RenderableUnit,
    SourceUnit,
    UnitKind,
    tag_of,
    transform,
)

__all__ = [
    "ConfigOverrides",
    "ConvertHtmlConfig",
    "ConvertHtmlConfigError",
    "LoadResult",
    "load_config",
    "ConversionOutcome",
    "ConversionStatus",
    "convert_file",
    "DocumentDefaults",
    "HTMLDocument",
    "build",
    "convert",
    "release",
    "AllocationError",
    "ConversionError",
    "DestinationOpenError",
    "DestinationWriteError",
    "DocumentReleasedError",
    "SourceError",
    "UnitConsumedError",
    "iter_html",
    "serialize",
    "parse_file",
    "parse_markdown",
    "HTMLTag",
    "RenderableUnit",
    "SourceUnit",
    "UnitKind",
    "tag_of",
    "transform",
]
