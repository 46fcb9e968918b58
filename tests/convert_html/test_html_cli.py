from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterator

import pytest

from md2html.convert_html import cli
from md2html.convert_html import config as cfg
from md2html.convert_html import converter
from md2html.convert_html.document import DocumentDefaults
from md2html.core.config_templates import CONVERT_HTML_TEMPLATE
from md2html.core.workspace import WorkspaceError, WorkspaceLayout


class DummyLogger:
    def __init__(self) -> None:
        self.messages: list[tuple[str, tuple[object, ...]]] = []

    def debug(self, *args, **_kwargs) -> None:
        self.messages.append(("debug", args))


@pytest.fixture(autouse=True)
def _drop_cli_handlers() -> Iterator[None]:
    yield
    logger = logging.getLogger("md2html.convert_html")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True


def _load_result() -> cfg.LoadResult:
    layout = WorkspaceLayout(
        home=Path("/tmp/ws"),
        directories={
            "config": Path("/tmp/ws/config"),
            "logs": Path("/tmp/ws/logs"),
        },
        created={"home": True, "config": True, "logs": True},
    )
    return cfg.LoadResult(
        config=cfg.ConvertHtmlConfig(
            defaults=DocumentDefaults("page.html", "Page"),
            output_dir=Path("/tmp/ws/out"),
            log_level="DEBUG",
        ),
        layout=layout,
        config_path=None,
    )


def test_cli_passes_overrides_and_prints_summary(monkeypatch, capsys):
    captured: dict[str, object] = {}
    load_result = _load_result()
    dummy_logger = DummyLogger()

    def fake_load_config(**kwargs):
        captured.update(kwargs)
        return load_result

    def fake_configure_logger(name, *, log_dir, level, verbose):
        captured["logger_call"] = (name, log_dir, level, verbose)
        return dummy_logger, Path("/tmp/ws/logs/convert_html.log")

    def fake_convert_file(source, *, output_dir, defaults, logger):
        captured["convert"] = (source, output_dir, defaults, logger)
        return converter.ConversionOutcome(
            source=source,
            status=converter.ConversionStatus.SUCCESS,
            output_path=output_dir / defaults.destination_name,
            unit_count=4,
        )

    monkeypatch.setattr(cli, "load_config", fake_load_config)
    monkeypatch.setattr(cli, "configure_logger", fake_configure_logger)
    monkeypatch.setattr(cli, "convert_file", fake_convert_file)

    code = cli.main(
        [
            "notes.md",
            "positional.html",
            "Positional",
            "--title",
            "Flag title",
            "--output-dir",
            "site",
            "--config",
            "config.toml",
            "--workspace",
            "ws",
            "--log-level",
            "debug",
            "--verbose",
        ]
    )

    assert code == 0
    overrides = captured["overrides"]
    assert isinstance(overrides, cfg.ConfigOverrides)
    assert overrides.destination_name == "positional.html"
    assert overrides.title == "Flag title"
    assert overrides.output_dir == Path("site")
    assert overrides.log_level == "debug"
    assert captured["config_path"] == Path("config.toml")
    assert captured["workspace_path"] == Path("ws")
    assert captured["logger_call"] == (
        "md2html.convert_html",
        Path("/tmp/ws/logs"),
        "DEBUG",
        True,
    )
    assert captured["convert"] == (
        Path("notes.md"),
        Path("/tmp/ws/out"),
        load_result.config.defaults,
        dummy_logger,
    )

    out = capsys.readouterr().out
    assert "output:   /tmp/ws/out/page.html" in out
    assert "units:    4" in out
    assert "log file: /tmp/ws/logs/convert_html.log" in out


def test_cli_end_to_end(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "doc.md"
    source.write_text("# Hello\n\n- one\n- two\n\nbye\n", encoding="utf-8")

    code = cli.main(["doc.md", "-o", "hello.html", "--title", "Greeting"])

    assert code == 0
    html = (tmp_path / "hello.html").read_text(encoding="utf-8")
    assert "<title>Greeting</title>" in html
    assert (
        "\n\t<ul>\n\t\t<li>one</li><br>\n\t\t<li>two</li><br>\n\t</ul>\n"
    ) in html

    log_path = tmp_path / "md2html-home" / "logs" / "convert_html.log"
    for handler in logging.getLogger("md2html.convert_html").handlers:
        handler.flush()
    messages = [
        json.loads(entry)["message"]
        for entry in log_path.read_text(encoding="utf-8").splitlines()
    ]
    assert "Converted document" in messages
    assert str(tmp_path / "hello.html") in capsys.readouterr().out


def test_cli_missing_source_exits_with_error(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    code = cli.main(["absent.md"])

    assert code == 1
    err = capsys.readouterr().err
    assert err.startswith("md2html convert: ")
    assert "absent.md: No such file or directory" in err
    assert not (tmp_path / "index.html").exists()


def test_cli_surfaces_config_errors(monkeypatch, capsys):
    def fake_load_config(**_):
        raise cfg.ConvertHtmlConfigError("boom")

    monkeypatch.setattr(cli, "load_config", fake_load_config)

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["input.md"])

    assert exc_info.value.code == 2
    assert "boom" in capsys.readouterr().err


def test_cli_config_init_writes_template(tmp_path: Path, capsys):
    template = CONVERT_HTML_TEMPLATE

    code = cli.main(["config", "init", "--workspace", str(tmp_path)])

    assert code == 0
    target = tmp_path / "config" / cfg.CONFIG_FILENAME
    assert target.read_text(encoding="utf-8") == template.read_text()
    captured = capsys.readouterr()
    assert str(target) in captured.out
    assert captured.err == ""


def test_cli_config_init_requires_force(tmp_path: Path, capsys):
    template = CONVERT_HTML_TEMPLATE
    custom = tmp_path / "custom.toml"
    custom.write_text("existing", encoding="utf-8")

    code = cli.main(["config", "init", "--path", str(custom)])

    assert code == 1
    assert "Config already exists" in capsys.readouterr().err
    assert custom.read_text(encoding="utf-8") == "existing"

    code = cli.main(["config", "init", "--path", str(custom), "--force"])

    assert code == 0
    assert custom.read_text(encoding="utf-8") == template.read_text()


def test_cli_config_init_relative_path(monkeypatch, tmp_path: Path, capsys):
    monkeypatch.chdir(tmp_path)

    code = cli.main(["config", "init", "--path", "local.toml"])

    assert code == 0
    target = tmp_path / "local.toml"
    assert target.exists()
    assert str(target.resolve()) in capsys.readouterr().out


def test_cli_config_init_workspace_error(monkeypatch, capsys):
    def fail_workspace(*_args, **_kwargs):
        raise WorkspaceError("workspace boom")

    monkeypatch.setattr(cli.workspace_mod, "ensure_workspace", fail_workspace)

    code = cli.main(["config", "init"])

    assert code == 1
    assert "workspace boom" in capsys.readouterr().err


def test_written_template_loads_as_config(tmp_path: Path):
    code = cli.main(["config", "init", "--workspace", str(tmp_path)])
    assert code == 0

    result = cfg.load_config(env={}, workspace_path=tmp_path, cwd=tmp_path)

    assert result.config_path == tmp_path / "config" / cfg.CONFIG_FILENAME
    assert result.config.defaults == DocumentDefaults()
    assert result.config.output_dir == tmp_path.resolve()


def test_cli_positional_title_is_written_verbatim(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "doc.md").write_text("hello\n", encoding="utf-8")

    code = cli.main(
        [
            "doc.md",
            "out.html",
            "  My Title  ",
            "--workspace",
            str(tmp_path / "ws"),
        ]
    )

    assert code == 0
    html = (tmp_path / "out.html").read_text(encoding="utf-8")
    assert "\t<title>  My Title  </title>\n" in html
