"""
Filesystem Helper Tests
=======================
Unit tests for dirindex.utils.filesystem.
"""

import os
import shutil
from pathlib import Path

import pytest

from dirindex.errors import ConfigurationError, InvalidIdError
from dirindex.utils.filesystem import (
    canonical_base_dir,
    is_within,
    join_within,
    remove_tree,
    validate_id,
    validate_path_segment,
)


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, 123, b"bytes", ["a"]])
def test_validate_id_rejects_non_strings(value):
    with pytest.raises(InvalidIdError) as exc:
        validate_id(value)
    assert exc.value.id == value


@pytest.mark.unit
def test_validate_id_rejects_empty_and_nul():
    with pytest.raises(InvalidIdError):
        validate_id("")
    with pytest.raises(InvalidIdError):
        validate_id("a\x00b")


@pytest.mark.unit
@pytest.mark.parametrize("value", ["..", ".", "../escape", "a/b", "a\\b", "/abs"])
def test_validate_path_segment_rejects_traversal(value):
    with pytest.raises(InvalidIdError):
        validate_path_segment(value)


@pytest.mark.unit
@pytest.mark.parametrize("value", ["abc", "a..b", ".hidden", "id with spaces", "ünïcode", "12345"])
def test_validate_path_segment_accepts_plain_names(value):
    assert validate_path_segment(value) == value


@pytest.mark.unit
def test_is_within(tmp_path):
    assert is_within(tmp_path, tmp_path / "a")
    assert is_within(tmp_path, tmp_path / "a" / "b")
    assert not is_within(tmp_path, tmp_path)
    assert not is_within(tmp_path, tmp_path.parent)
    assert not is_within(tmp_path, str(tmp_path) + "-sibling")


@pytest.mark.unit
def test_join_within_rejects_escape(tmp_path):
    assert join_within(tmp_path, "a") == tmp_path / "a"
    with pytest.raises(InvalidIdError):
        join_within(tmp_path, "../a")
    with pytest.raises(InvalidIdError):
        join_within(tmp_path, "a/../..")
    with pytest.raises(InvalidIdError):
        join_within(tmp_path, ".")
    with pytest.raises(InvalidIdError):
        join_within(tmp_path, str(tmp_path / "a"))


@pytest.mark.unit
def test_canonical_base_dir_resolves_relative(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = canonical_base_dir("store/../store")
    assert result == Path(os.path.realpath(tmp_path)) / "store"
    assert result.is_absolute()


@pytest.mark.unit
def test_canonical_base_dir_accepts_pathlike(tmp_path):
    assert canonical_base_dir(tmp_path) == Path(os.path.realpath(tmp_path))


@pytest.mark.unit
@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_canonical_base_dir_resolves_symlinks(tmp_path):
    target = tmp_path / "target"
    target.mkdir()
    link = tmp_path / "link"
    try:
        link.symlink_to(target, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")
    assert canonical_base_dir(str(link)) == Path(os.path.realpath(target))


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "   ", 42, "a\x00b"])
def test_canonical_base_dir_rejects_invalid(value):
    with pytest.raises(ConfigurationError):
        canonical_base_dir(value)


@pytest.mark.unit
def test_remove_tree_removes_nested(tmp_path):
    root = tmp_path / "victim"
    (root / "a" / "b").mkdir(parents=True)
    (root / "a" / "b" / "f.txt").write_text("x")

    remove_tree(root)

    assert not root.exists()
    assert tmp_path.exists()


@pytest.mark.unit
def test_remove_tree_tolerates_vanishing_entries(tmp_path, monkeypatch):
    root = tmp_path / "victim"
    root.mkdir()
    real_rmtree = shutil.rmtree
    calls = []

    def flaky_rmtree(path, *args, **kwargs):
        calls.append(path)
        if len(calls) == 1:
            raise FileNotFoundError("entry vanished")
        return real_rmtree(path, *args, **kwargs)

    monkeypatch.setattr(shutil, "rmtree", flaky_rmtree)
    remove_tree(root)

    assert len(calls) == 2
    assert not root.exists()


@pytest.mark.unit
def test_remove_tree_propagates_other_errors(tmp_path, monkeypatch):
    root = tmp_path / "victim"
    root.mkdir()

    def boom(path, *args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(shutil, "rmtree", boom)

    with pytest.raises(PermissionError):
        remove_tree(root)
