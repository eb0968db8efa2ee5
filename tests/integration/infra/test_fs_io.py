from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates the real attribute probe and directory enumerator against the
host filesystem, plus path joining and data directory resolution.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from ckdu.domain.tree_models import FileType
from ckdu.infra.fs import (
    DirectoryEnumerator,
    get_user_data_dir,
    join_path,
    normalize_path,
    probe_entry,
)

# -----------------------------------------------------------------------------
# PATH UTILITIES
# -----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "dirname, basename, expected",
    [
        ("a", "b", "a/b"),
        ("a/", "b", "a/b"),
        ("/", "etc", "/etc"),
        ("", "x", "x"),
        (".", ".", "./."),
    ],
)
def test_join_path(dirname, basename, expected):
    assert join_path(dirname, basename) == expected


def test_get_user_data_dir_unix() -> None:
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value="/home/testuser"):
            path = get_user_data_dir()
    assert path.replace("\\", "/").endswith("/home/testuser/.ckdu")


def test_normalize_path_expansion() -> None:
    with patch.dict(os.environ, {"CKDU_TEST_VAR": "my_folder"}):
        path = normalize_path("$CKDU_TEST_VAR/sub", fallback=".")
    assert path.endswith(os.path.join("my_folder", "sub"))
    assert normalize_path("", fallback="/tmp") == os.path.abspath("/tmp")

# -----------------------------------------------------------------------------
# ATTRIBUTE PROBE
# -----------------------------------------------------------------------------

def test_probe_regular_file(tmp_path: Path) -> None:
    f = tmp_path / "data.bin"
    f.write_bytes(b"\0" * 123)

    attrs = probe_entry(str(f))

    st = os.lstat(f)
    assert attrs.size == 123
    assert attrs.file_type is FileType.FILE
    assert (attrs.device, attrs.inode) == (st.st_dev, st.st_ino)


def test_probe_hard_links_share_identity(tmp_path: Path) -> None:
    f = tmp_path / "x"
    f.write_bytes(b"1234567890")
    os.link(f, tmp_path / "y")

    a = probe_entry(str(f))
    b = probe_entry(str(tmp_path / "y"))

    assert (a.device, a.inode) == (b.device, b.inode)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_probe_does_not_follow_symlinks(tmp_path: Path) -> None:
    target = tmp_path / "dir"
    target.mkdir()
    link = tmp_path / "link"
    link.symlink_to(target)

    attrs = probe_entry(str(link))

    assert attrs.file_type is FileType.SYMLINK
    assert attrs.inode != os.stat(target).st_ino


def test_probe_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        probe_entry(str(tmp_path / "missing"))

# -----------------------------------------------------------------------------
# DIRECTORY ENUMERATOR
# -----------------------------------------------------------------------------

def test_enumerator_lists_names_without_pseudo_entries(tmp_path: Path) -> None:
    (tmp_path / "f").write_text("x", encoding="utf-8")
    (tmp_path / "d").mkdir()

    with DirectoryEnumerator(str(tmp_path)) as listing:
        names = sorted(listing)

    assert names == ["d", "f"]


def test_enumerator_open_failure_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        DirectoryEnumerator(str(tmp_path / "missing"))


def test_enumerator_closes_stream(tmp_path: Path) -> None:
    listing = DirectoryEnumerator(str(tmp_path))
    with listing:
        pass

    # A closed scandir iterator yields nothing further
    assert list(listing) == []
