"""Tests for the command line interface."""

import tempfile
from pathlib import Path

import yaml
from click.testing import CliRunner

from skeletor import __version__
from skeletor.cli import main


DOCUMENT = """\
directories:
  src:
    main.py: |
      print("hi")
  README.md: '# Demo'
"""


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


# --- apply ---


def test_apply_creates_tree():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = Path(tmpdir) / "tree.yml"
        config.write_text(DOCUMENT)
        target = Path(tmpdir) / "out"
        target.mkdir()

        result = CliRunner().invoke(main, ["apply", "-i", str(config), "-t", str(target)])

        assert result.exit_code == 0, result.output
        assert (target / "src" / "main.py").read_text() == 'print("hi")\n'
        assert "Apply Result" in result.output


def test_apply_uses_default_config_file():
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path(".skeletorrc").write_text(DOCUMENT)
        result = runner.invoke(main, ["apply"])
        assert result.exit_code == 0, result.output
        assert Path("README.md").read_text() == "# Demo"


def test_apply_missing_default_config_file():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(main, ["apply"])
        assert result.exit_code == 1
        assert "file not found: '.skeletorrc'" in result.output
        assert "directory not found" not in result.output


def test_apply_dry_run_writes_nothing():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = Path(tmpdir) / "tree.yml"
        config.write_text(DOCUMENT)
        target = Path(tmpdir) / "out"
        target.mkdir()

        result = CliRunner().invoke(main, ["apply", "-i", str(config), "-t", str(target), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert list(target.iterdir()) == []
        assert "Dry run" in result.output


def test_apply_missing_target_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = Path(tmpdir) / "tree.yml"
        config.write_text(DOCUMENT)
        result = CliRunner().invoke(main, ["apply", "-i", str(config), "-t", str(Path(tmpdir) / "nope")])
        assert result.exit_code == 1
        assert "directory not found" in result.output
        assert "tip:" in result.output


def test_apply_invalid_document_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = Path(tmpdir) / "tree.yml"
        config.write_text("stats: {}\n")
        result = CliRunner().invoke(main, ["apply", "-i", str(config), "-t", tmpdir])
        assert result.exit_code == 1
        assert "directories" in result.output


# --- snapshot ---


def _make_source(root: Path) -> Path:
    source = root / "source"
    (source / "pkg").mkdir(parents=True)
    (source / "pkg" / "mod.py").write_text("x = 1\n")
    (source / "notes.log").write_text("log")
    return source


def test_snapshot_writes_output_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = _make_source(Path(tmpdir))
        output = Path(tmpdir) / "snap.yml"

        result = CliRunner().invoke(
            main,
            ["snapshot", str(source), "-o", str(output), "-I", "*.log", "-n", "first"],
        )

        assert result.exit_code == 0, result.output
        data = yaml.safe_load(output.read_text())
        assert data["directories"] == {"pkg": {"mod.py": "x = 1\n"}}
        assert data["blacklist"] == ["*.log"]
        assert data["notes"] == ["first"]
        assert data["stats"] == {"files": 1, "dirs": 1}


def test_snapshot_preserves_created_on_rewrite():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = _make_source(Path(tmpdir))
        output = Path(tmpdir) / "snap.yml"
        output.write_text("created: '2001-02-03T04:05:06Z'\ndirectories: {}\n")

        result = CliRunner().invoke(main, ["snapshot", str(source), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert yaml.safe_load(output.read_text())["created"] == "2001-02-03T04:05:06Z"


def test_snapshot_to_stdout():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = _make_source(Path(tmpdir))
        result = CliRunner().invoke(main, ["snapshot", str(source), "--exclude-contents"])
        assert result.exit_code == 0, result.output
        assert "directories:" in result.output
        assert "mod.py: ''" in result.output


def test_snapshot_dry_run_writes_nothing():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = _make_source(Path(tmpdir))
        output = Path(tmpdir) / "snap.yml"
        result = CliRunner().invoke(main, ["snapshot", str(source), "-o", str(output), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert not output.exists()
        assert "Dry run" in result.output


def test_snapshot_invalid_direct_pattern_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = _make_source(Path(tmpdir))
        result = CliRunner().invoke(main, ["snapshot", str(source), "-I", "[bad"])
        assert result.exit_code == 1
        assert "invalid ignore pattern" in result.output


def test_snapshot_missing_source_fails():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = CliRunner().invoke(main, ["snapshot", str(Path(tmpdir) / "missing")])
        assert result.exit_code == 1
        assert "directory not found" in result.output


def test_snapshot_then_apply_round_trip():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = _make_source(Path(tmpdir))
        output = Path(tmpdir) / "snap.yml"
        target = Path(tmpdir) / "copy"
        target.mkdir()
        runner = CliRunner()

        assert runner.invoke(main, ["snapshot", str(source), "-o", str(output)]).exit_code == 0
        result = runner.invoke(main, ["apply", "-i", str(output), "-t", str(target)])

        assert result.exit_code == 0, result.output
        assert (target / "pkg" / "mod.py").read_text() == "x = 1\n"
        assert (target / "notes.log").read_text() == "log"


# --- info ---


def test_info_shows_metadata():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "snap.yml"
        path.write_text(
            "created: '2024-01-01T00:00:00Z'\nstats:\n  files: 0\n  dirs: 0\ndirectories: {}\n"
        )
        result = CliRunner().invoke(main, ["info", "-i", str(path)])
        assert result.exit_code == 0, result.output
        assert "2024-01-01T00:00:00Z" in result.output
        assert "Created" in result.output


def test_info_missing_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = CliRunner().invoke(main, ["info", "-i", str(Path(tmpdir) / "missing.yml")])
        assert result.exit_code == 1
        assert "file not found" in result.output
