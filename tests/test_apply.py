"""Tests for the apply operation and apply/snapshot round trips."""

import tempfile
from pathlib import Path

import pytest

from skeletor.engine.apply import apply, apply_file
from skeletor.errors import ConfigError, FilesystemError
from skeletor.models.tree import ConfigTree
from skeletor.reporting.reporter import RecordingReporter
from skeletor.snapshot.capture import snapshot
from skeletor.snapshot.ignore import PatternSpec, compile_rules


def _tree() -> ConfigTree:
    return ConfigTree.from_mapping(
        {
            "app": {
                "__init__.py": "",
                "core": {"engine.py": "def run():\n    return 42\n"},
            },
            "docs": {"index.md": "# Docs\n"},
            "setup.cfg": "[metadata]\nname = app\n",
            "empty": {},
        }
    )


def test_apply_then_snapshot_round_trip():
    with tempfile.TemporaryDirectory() as tmpdir:
        apply(_tree(), tmpdir)
        captured = snapshot(tmpdir).tree
        # Snapshot orders siblings by name
        assert captured.to_mapping() == _tree().to_mapping()
        assert list(captured) == ["app", "docs", "empty", "setup.cfg"]


def test_leading_bom_survives_round_trip():
    with tempfile.TemporaryDirectory() as tmpdir:
        tree = ConfigTree.from_mapping({"a.txt": "\ufeffhello\n"})
        apply(tree, tmpdir)
        assert (Path(tmpdir) / "a.txt").read_bytes() == b"\xef\xbb\xbfhello\n"
        assert snapshot(tmpdir).tree.to_mapping() == {"a.txt": "\ufeffhello\n"}


def test_apply_missing_target_root():
    with tempfile.TemporaryDirectory() as tmpdir:
        target = Path(tmpdir) / "missing"
        with pytest.raises(FilesystemError):
            apply(_tree(), target)
        assert not target.exists()


def test_apply_target_is_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        target = Path(tmpdir) / "file"
        target.write_text("")
        with pytest.raises(FilesystemError):
            apply(_tree(), target)


def test_apply_idempotent():
    with tempfile.TemporaryDirectory() as tmpdir:
        apply(_tree(), tmpdir)
        again = apply(_tree(), tmpdir)
        assert again.dirs_created == 0
        assert again.files_created == 0
        assert again.files_skipped == 4


def test_dry_run_parity_and_preview():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "setup.cfg").write_text("custom")
        reporter = RecordingReporter()
        preview = apply(_tree(), tmpdir, dry_run=True, reporter=reporter)
        assert [p.name for p in Path(tmpdir).iterdir()] == ["setup.cfg"]

        real = apply(_tree(), tmpdir)
        assert preview.outcomes == real.outcomes
        assert preview.files_skipped == real.files_skipped == 1

        (outcomes, verb, _binary, _patterns), = reporter.of("dry_run_preview")
        assert verb == "applied"
        assert outcomes == preview.outcomes
        assert reporter.names()[0] == "operation_start"
        assert reporter.names()[-1] == "apply_complete"


def test_apply_overwrite():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "setup.cfg").write_text("custom")
        result = apply(_tree(), tmpdir, overwrite=True)
        assert result.files_overwritten == 1
        assert (Path(tmpdir) / "setup.cfg").read_text() == "[metadata]\nname = app\n"


def test_apply_ignore_rules_exclude_subtree():
    with tempfile.TemporaryDirectory() as tmpdir:
        rules = compile_rules([PatternSpec("docs/"), PatternSpec("*.cfg")])
        reporter = RecordingReporter()
        result = apply(_tree(), tmpdir, ignore_rules=rules, reporter=reporter)
        root = Path(tmpdir)
        assert not (root / "docs").exists()
        assert not (root / "setup.cfg").exists()
        assert (root / "app" / "core" / "engine.py").exists()
        assert all(not o.path.startswith("docs") for o in result.outcomes)
        assert ("docs", True) in reporter.of("path_ignored")


def test_ignored_snapshot_round_trip_only_contains_kept_entries():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = Path(tmpdir) / "source"
        source.mkdir()
        apply(_tree(), source)
        rules = compile_rules([PatternSpec("core/"), PatternSpec("*.md")])
        captured = snapshot(source, ignore_rules=rules)

        paths = {p.as_posix() for p, _ in captured.tree.walk()}
        assert "app/core" not in paths
        assert "docs/index.md" not in paths
        assert "docs" in paths

        target = Path(tmpdir) / "target"
        target.mkdir()
        apply(captured.tree, target)
        assert not (target / "app" / "core").exists()
        assert (target / "app" / "__init__.py").exists()


def test_binary_files_recreated_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        source = Path(tmpdir) / "source"
        source.mkdir()
        (source / "image.bin").write_bytes(b"\x00\x01\x02\x03")
        captured = snapshot(source)
        assert captured.metadata.binary_files == ("image.bin",)

        target = Path(tmpdir) / "target"
        target.mkdir()
        apply(captured.tree, target)
        assert (target / "image.bin").read_bytes() == b""


# --- Document entry point ---


def test_apply_file_honours_ignore_patterns():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = Path(tmpdir) / ".skeletorrc"
        config.write_text(
            "ignore_patterns:\n- '*.log'\n- '[broken'\n"
            "directories:\n  keep.txt: kept\n  drop.log: dropped\n"
        )
        target = Path(tmpdir) / "out"
        target.mkdir()
        reporter = RecordingReporter()
        result = apply_file(config, target, reporter=reporter)

        assert (target / "keep.txt").read_text() == "kept"
        assert not (target / "drop.log").exists()
        assert result.files_created == 1
        assert len(reporter.of("warning")) == 1


def test_apply_file_missing_directories():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = Path(tmpdir) / "bad.yml"
        config.write_text("created: now\n")
        with pytest.raises(ConfigError):
            apply_file(config, tmpdir)


def test_apply_file_missing_document():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(FilesystemError):
            apply_file(Path(tmpdir) / "nope.yml", tmpdir)
