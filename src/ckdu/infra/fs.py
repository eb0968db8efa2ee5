from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Wraps the platform primitives the crawler depends on: the non-following
attribute probe, the directory enumerator, and path joining. Also resolves
the per-user data directory where configuration is persisted.
"""

import os
from typing import Iterator, Optional

from ckdu.domain.constants import APP_NAME
from ckdu.domain.tree_models import EntryAttributes, FileType

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = APP_NAME
UNIX_APP_DIR_NAME = f".{APP_NAME}"

_PSEUDO_ENTRIES = (".", "..")

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Standards:
    - Windows: %LOCALAPPDATA%/ckdu
    - Linux/Mac: ~/.ckdu

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        home = os.path.expanduser("~")
        path = os.path.join(home, UNIX_APP_DIR_NAME)

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Expands environment variables and the user home shortcut. Reverts
    to fallback if the input is empty.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def join_path(dirname: str, basename: str) -> str:
    """Combine a directory path and an entry name into a child path."""
    if not dirname:
        return basename
    if dirname.endswith(os.sep):
        return dirname + basename
    return dirname + os.sep + basename

# -----------------------------------------------------------------------------
# COLLABORATOR PRIMITIVES
# -----------------------------------------------------------------------------

def probe_entry(path: str) -> EntryAttributes:
    """
    Read identity, size and type of a path without following symlinks.

    Raises:
        OSError: If the attributes cannot be read.
    """
    st = os.lstat(path)
    return EntryAttributes(
        device=st.st_dev,
        inode=st.st_ino,
        size=st.st_size,
        file_type=FileType.from_mode(st.st_mode),
    )


class DirectoryEnumerator:
    """
    Scoped handle over one open directory stream.

    Opening happens in the constructor so an unopenable directory fails
    before any handle exists. Iteration yields basenames and skips the
    self/parent pseudo-entries. A failure while reading the stream surfaces
    as OSError from the iterator.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._stream = os.scandir(path)

    def __enter__(self) -> "DirectoryEnumerator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __iter__(self) -> Iterator[str]:
        for entry in self._stream:
            if entry.name in _PSEUDO_ENTRIES:
                continue
            yield entry.name

    def close(self) -> None:
        self._stream.close()
