"""Tests for the ``inkpress`` command functions.

The command functions are called directly rather than through the Cyclopts
app so that exit handling stays under the test's control.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from inkpress import cli


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def site(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Lay out a one-page site and run from its root."""
    _write(tmp_path / "templates" / "page.html", "<body>{{ page.content }}</body>")
    _write(tmp_path / "pages" / "index.md", "---\ntemplate: page.html\n---\nHi.\n")
    _write(tmp_path / "static" / "site.css", "p {}\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.mark.parametrize(
    ("templates", "pages"),
    [(None, None), (Path("templates"), None), (None, Path("pages"))],
)
def test_missing_positionals_print_usage(
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    templates: Path | None,
    pages: Path | None,
) -> None:
    monkeypatch.chdir(tmp_path)
    cli.build(templates, pages)
    assert capsys.readouterr().out.strip() == cli.USAGE
    assert list(tmp_path.iterdir()) == [], "nothing may be built"


def test_build_reports_written_and_copied_files(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build(site / "templates", site / "pages", site / "static")

    out = capsys.readouterr().out.splitlines()
    assert out == ["wrote output/index.html", "copied output/site.css"]
    assert (site / "output" / "index.html").read_text(encoding="utf-8") == (
        "<body><p>Hi.</p></body>"
    )


def test_output_dir_option_overrides_config(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(site / "inkpress.yaml", "output_dir: public\n")
    cli.build(
        Path("templates"),
        Path("pages"),
        config=Path("inkpress.yaml"),
        output_dir=Path("dist"),
    )
    assert (site / "dist" / "index.html").exists()
    assert not (site / "public").exists()
    assert "wrote dist/index.html" in capsys.readouterr().out


def test_fatal_error_exits_with_status_one(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(site / "pages" / "broken.md", "---\ntemplate: page.html\n---\n*open\n")

    with pytest.raises(SystemExit) as excinfo:
        cli.build(Path("templates"), Path("pages"))

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert err.startswith("error: pages/broken.md:")
    assert not (site / "output").exists()


def test_keep_going_renders_other_pages_then_fails(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(site / "pages" / "broken.md", "---\ntemplate: page.html\n---\n*open\n")

    with pytest.raises(SystemExit) as excinfo:
        cli.build(Path("templates"), Path("pages"), keep_going=True)

    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "wrote output/index.html" in captured.out
    assert "failed pages/broken.md (parse)" in captured.err


def test_invalid_config_is_fatal(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(site / "inkpress.yaml", "on_conflict: shrug\n")
    with pytest.raises(SystemExit):
        cli.build(Path("templates"), Path("pages"), config=Path("inkpress.yaml"))
    assert "Unknown on_conflict policy" in capsys.readouterr().err


def test_convert_prints_html(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path / "doc.md", "---\ntitle: x\n---\n# Title\n\n*Bold*\n")
    cli.convert(source)
    assert capsys.readouterr().out == (
        '<h1>Title</h1><p><span class="bold">Bold</span></p>\n'
    )


def test_convert_blocks_treats_rule_as_text(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path / "doc.md", "---\nplain\n")
    cli.convert(source, blocks=True)
    assert capsys.readouterr().out == "<p>---\nplain</p>\n"


def test_convert_reports_parse_errors(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path / "doc.md", "^[never closed\n")
    with pytest.raises(SystemExit) as excinfo:
        cli.convert(source)
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith(f"error: {source}:1:")


def test_help_command_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    cli.help_command()
    assert capsys.readouterr().out.startswith(cli.USAGE)


def test_config_in_working_directory_is_picked_up(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(site / "inkpress.yaml", "output_dir: public\n")
    cli.build(Path("templates"), Path("pages"))
    assert (site / "public" / "index.html").exists()
    assert "wrote public/index.html" in capsys.readouterr().out


def test_unusable_output_directory_is_fatal(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(site / "blocked", "not a directory")
    with pytest.raises(SystemExit) as excinfo:
        cli.build(Path("templates"), Path("pages"), output_dir=Path("blocked"))
    assert excinfo.value.code == 1
    assert capsys.readouterr().err.startswith("error: ")


def test_convert_honours_configured_tags(
    site: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write(site / "inkpress.yaml", "tags:\n  heading: h2\n  text_block: null\n")
    source = _write(site / "doc.md", "# Title\n\nplain\n")
    cli.convert(source)
    assert capsys.readouterr().out == "<h2>Title</h2>plain\n"


def test_convert_accepts_an_explicit_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = _write(tmp_path / "site.yaml", "tags:\n  bold: strong\n")
    source = _write(tmp_path / "doc.md", "*loud*\n")
    cli.convert(source, config=config)
    assert capsys.readouterr().out == "<p><strong>loud</strong></p>\n"
