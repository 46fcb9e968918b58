"""Configuration loader for Markdown-to-HTML runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from md2html.core import config as core_config
from md2html.core import workspace as workspace_mod

from .document import (
    DEFAULT_DESTINATION_NAME,
    DEFAULT_TITLE,
    DocumentDefaults,
)

CONFIG_FILENAME = "md2html.toml"
CONFIG_ENV = "MD2HTML_CONFIG"
ENV_PREFIX = "MD2HTML_"

_DEFAULT_LOG_LEVEL = "INFO"


class ConvertHtmlConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class ConvertHtmlConfig:
    """Fully resolved settings for one conversion."""

    defaults: DocumentDefaults
    output_dir: Path
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """Values taken from the command line; ``None`` means not given."""

    destination_name: Optional[str] = None
    title: Optional[str] = None
    output_dir: Optional[Path] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: ConvertHtmlConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
    cwd: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence CLI > env > TOML > defaults.

    A config file that was asked for explicitly (argument or
    ``MD2HTML_CONFIG``) must exist; the workspace default is optional.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested_path.exists():
        try:
            core_config.merge_defaults(
                table, core_config.load_toml(requested_path)
            )
        except core_config.TomlConfigError as exc:
            raise ConvertHtmlConfigError(str(exc)) from exc
        loaded_path = requested_path
    elif config_path is not None or _env_string(env_map, "CONFIG"):
        raise ConvertHtmlConfigError(
            f"Config file not found: {requested_path}"
        )

    document = table["document"]
    destination_name = _resolve_string(
        "document.destination_name",
        overrides.destination_name,
        _env_string(env_map, "DESTINATION_NAME"),
        document["destination_name"],
    )
    if Path(destination_name).name != destination_name:
        raise ConvertHtmlConfigError(
            "document.destination_name must be a file name, not a path: "
            f"{destination_name}"
        )
    title = _resolve_string(
        "document.title",
        overrides.title,
        _env_string(env_map, "TITLE"),
        document["title"],
    )

    output_dir = _resolve_output_dir(
        _first(
            overrides.output_dir,
            _env_path(env_map, "OUTPUT_DIR"),
            _coerce_optional_path(table["paths"]["output_dir"]),
        ),
        cwd=cwd or Path.cwd(),
    )

    log_level = _resolve_string(
        "logging.level",
        overrides.log_level,
        _env_string(env_map, "LOG_LEVEL"),
        table["logging"]["level"],
    ).strip().upper()

    config = ConvertHtmlConfig(
        defaults=DocumentDefaults(
            destination_name=destination_name,
            title=title,
        ),
        output_dir=output_dir,
        log_level=log_level,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "document": {
            "destination_name": DEFAULT_DESTINATION_NAME,
            "title": DEFAULT_TITLE,
        },
        "paths": {"output_dir": None},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = _env_string(env_map, "CONFIG")
    if env_candidate:
        return Path(env_candidate.strip()).expanduser()
    return default_path


def _resolve_string(key: str, *candidates: object) -> str:
    for candidate in candidates:
        if candidate is None:
            continue
        if not isinstance(candidate, str):
            raise ConvertHtmlConfigError(f"{key} must be a string.")
        if candidate.strip():
            return candidate
    raise ConvertHtmlConfigError(f"{key} must be a non-empty string.")


def _coerce_optional_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConvertHtmlConfigError(
            "paths.output_dir must be a string when provided."
        )
    raw = value.strip()
    return Path(raw) if raw else None


def _resolve_output_dir(candidate: Optional[Path], *, cwd: Path) -> Path:
    if candidate is None:
        return cwd.resolve()
    candidate = candidate.expanduser()
    if not candidate.is_absolute():
        candidate = cwd / candidate
    return candidate.resolve()


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env_string(env_map, key)
    return Path(raw.strip()) if raw is not None else None


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    return raw if raw.strip() else None


def _first(*candidates: Optional[Path]) -> Optional[Path]:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


__all__ = [
    "CONFIG_ENV",
    "CONFIG_FILENAME",
    "ConfigOverrides",
    "ConvertHtmlConfig",
    "ConvertHtmlConfigError",
    "LoadResult",
    "load_config",
]
