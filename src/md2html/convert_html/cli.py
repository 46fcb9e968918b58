"""CLI entry point for the Markdown-to-HTML converter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from md2html.core import workspace as workspace_mod
from md2html.core.config_templates import (
    CONVERT_HTML_TEMPLATE,
    ConfigTemplateError,
)
from md2html.core.logging import configure_logger
from md2html.core.workspace import WorkspaceError

from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    ConvertHtmlConfigError,
    load_config,
)
from .converter import ConversionOutcome, ConversionStatus, convert_file

PROG = "md2html convert"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=(
            "Render a Markdown file (headings, bullet lists, images and "
            "plain lines) as a standalone HTML page."
        ),
        epilog=(
            "Run `md2html convert config init` to scaffold the default "
            f"{CONFIG_FILENAME} template."
        ),
    )
    parser.add_argument("source", type=Path, help="Markdown file to convert.")
    parser.add_argument(
        "output_name",
        nargs="?",
        help="Name of the HTML file to write (defaults to index.html).",
    )
    parser.add_argument(
        "document_title",
        nargs="?",
        help="Text for the <title> element (defaults to Document).",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Same as the positional output name; takes precedence.",
    )
    parser.add_argument(
        "--title",
        help="Same as the positional title; takes precedence.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the HTML file (defaults to the current one).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to a TOML config file (defaults to the workspace config "
            "directory)."
        ),
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for config and logs.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo log records to stderr.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return _handle_config(args_list[1:])

    parser = _build_parser()
    args = parser.parse_args(args_list)

    overrides = ConfigOverrides(
        destination_name=args.output or args.output_name,
        title=args.title or args.document_title,
        output_dir=args.output_dir,
        log_level=args.log_level,
    )

    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except (ConvertHtmlConfigError, WorkspaceError) as exc:
        parser.error(str(exc))

    config = load_result.config
    logger, log_path = configure_logger(
        "md2html.convert_html",
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
    )
    logger.debug(
        "convert CLI invoked",
        extra={
            "source": str(args.source),
            "config_path": (
                str(load_result.config_path)
                if load_result.config_path
                else None
            ),
        },
    )

    outcome = convert_file(
        args.source,
        output_dir=config.output_dir,
        defaults=config.defaults,
        logger=logger,
    )

    if outcome.status is ConversionStatus.FAILED:
        sys.stderr.write(f"{PROG}: {outcome.reason}\n")
        return 1

    _print_summary(outcome, log_path)
    return 0


def _print_summary(outcome: ConversionOutcome, log_path: Path) -> None:
    lines = [
        "convert summary:",
        "  source:   {0}".format(outcome.source),
        "  output:   {0}".format(outcome.output_path),
        "  units:    {0}".format(outcome.unit_count),
        "  log file: {0}".format(log_path),
    ]
    sys.stdout.write("\n".join(lines) + "\n")


def _handle_config(argv: Sequence[str]) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(argv)
    return _handle_config_init(args)


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=f"{PROG} config",
        description="Manage configuration files for the HTML converter.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help=f"Write the default {CONFIG_FILENAME} template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination for the config TOML (defaults to the workspace "
            "config directory)."
        ),
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used when resolving the default config path.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


def _handle_config_init(args: argparse.Namespace) -> int:
    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    try:
        written = CONVERT_HTML_TEMPLATE.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote {CONFIG_FILENAME} config to {written}\n")
    return 0


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate

    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
