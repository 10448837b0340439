"""Tests for the tree model."""

from pathlib import PurePosixPath

import pytest

from skeletor.errors import ConfigError, ValidationError
from skeletor.models.tree import (
    ConfigTree,
    Directory,
    File,
    validate_entry_name,
    validate_relative_path,
)


def _sample_tree() -> ConfigTree:
    return ConfigTree.from_mapping(
        {
            "src": {"main.py": "print('hi')\n", "lib": {"util.py": ""}},
            "README.md": "# Demo\n",
            "empty": {},
        }
    )


# --- Names ---


def test_valid_names_pass_through():
    assert validate_entry_name("main.py") == "main.py"
    assert validate_entry_name(".gitignore") == ".gitignore"
    assert validate_entry_name("with space") == "with space"


@pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b", "nul\x00byte"])
def test_illegal_names_rejected(name):
    with pytest.raises(ValidationError):
        validate_entry_name(name)


def test_non_string_name_rejected():
    with pytest.raises(ValidationError):
        validate_entry_name(42)


def test_relative_path_checks_each_part():
    assert validate_relative_path(PurePosixPath("a/b/c.txt")) == PurePosixPath("a/b/c.txt")
    with pytest.raises(ValidationError):
        validate_relative_path(PurePosixPath("/etc/passwd"))
    with pytest.raises(ValidationError):
        validate_relative_path(PurePosixPath("a/../../b"))


def test_setitem_validates_name():
    tree = ConfigTree()
    with pytest.raises(ValidationError):
        tree[".."] = File("x")
    with pytest.raises(ValidationError):
        tree.add_dir("a/b")
    assert len(tree) == 0


# --- Construction ---


def test_from_mapping_builds_entries():
    tree = _sample_tree()
    assert list(tree) == ["src", "README.md", "empty"]
    assert isinstance(tree["src"], Directory)
    assert tree["README.md"] == File("# Demo\n")
    assert isinstance(tree["empty"], Directory)
    assert len(tree["empty"].tree) == 0


def test_from_mapping_null_is_empty_file():
    tree = ConfigTree.from_mapping({"blank.txt": None})
    assert tree["blank.txt"].text == ""


def test_from_mapping_rejects_lists_and_numbers():
    with pytest.raises(ConfigError) as exc:
        ConfigTree.from_mapping({"src": {"count": 3}})
    assert "src/count" in str(exc.value)
    with pytest.raises(ConfigError):
        ConfigTree.from_mapping({"items": ["a", "b"]})


def test_from_mapping_rejects_non_string_keys():
    with pytest.raises(ConfigError):
        ConfigTree.from_mapping({1: "x"})


def test_to_mapping_round_trips():
    mapping = {"a": {"b": {"c.txt": "deep"}}, "z.txt": ""}
    assert ConfigTree.from_mapping(mapping).to_mapping() == mapping


def test_add_dir_returns_existing_subtree():
    tree = ConfigTree()
    first = tree.add_dir("pkg")
    first.add_file("x.py", "")
    assert tree.add_dir("pkg") is first
    assert "x.py" in tree["pkg"].tree


def test_equality_is_order_sensitive():
    a = ConfigTree.from_mapping({"x": "", "y": ""})
    b = ConfigTree.from_mapping({"y": "", "x": ""})
    assert a != b
    assert a == ConfigTree.from_mapping({"x": "", "y": ""})


# --- Traversal ---


def test_walk_depth_first_is_preorder():
    paths = [p.as_posix() for p, _ in _sample_tree().walk(order="depth")]
    assert paths == [
        "src",
        "src/main.py",
        "src/lib",
        "src/lib/util.py",
        "README.md",
        "empty",
    ]


def test_walk_breadth_first_by_level():
    paths = [p.as_posix() for p, _ in _sample_tree().walk(order="breadth")]
    assert paths == [
        "src",
        "README.md",
        "empty",
        "src/main.py",
        "src/lib",
        "src/lib/util.py",
    ]


def test_walk_unknown_order():
    with pytest.raises(ValueError):
        list(ConfigTree().walk(order="sideways"))


def test_count():
    assert _sample_tree().count() == (3, 3)
    assert ConfigTree().count() == (0, 0)
