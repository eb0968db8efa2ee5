from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. An in-memory filesystem double that plays the attribute probe and
   directory enumerator collaborators, so errno scenarios can be
   reproduced regardless of the privileges the suite runs with.
3. Logging teardown so handlers never outlive the test that installed them.
"""

import errno
import os
import sys
from typing import Dict, Iterator, List, Optional, Tuple

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from ckdu.domain.tree_models import EntryAttributes, FileType  # noqa: E402
from ckdu.infra.logging import shutdown_logging  # noqa: E402


# -----------------------------------------------------------------------------
# Filesystem Double
# -----------------------------------------------------------------------------
class _FakeListing:
    """Directory handle double that can fail after a number of entries."""

    def __init__(self, fs: "FakeFilesystem", path: str) -> None:
        self._fs = fs
        self.path = path

    def __enter__(self) -> "_FakeListing":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._fs.closed.append(self.path)

    def __iter__(self) -> Iterator[str]:
        fail_after: Optional[Tuple[int, int]] = self._fs.read_errors.get(self.path)
        for index, name in enumerate(self._fs.listings[self.path]):
            if fail_after is not None and index == fail_after[0]:
                raise OSError(fail_after[1], os.strerror(fail_after[1]), self.path)
            yield name
        if fail_after is not None and fail_after[0] >= len(self._fs.listings[self.path]):
            raise OSError(fail_after[1], os.strerror(fail_after[1]), self.path)


class FakeFilesystem:
    """
    Minimal in-memory tree keyed by '/'-joined paths.

    Listings keep insertion order, which stands in for enumeration order.
    """

    def __init__(self, device: int = 1) -> None:
        self.device = device
        self.attrs: Dict[str, EntryAttributes] = {}
        self.listings: Dict[str, List[str]] = {}
        self.stat_errors: Dict[str, int] = {}
        self.open_errors: Dict[str, int] = {}
        self.read_errors: Dict[str, Tuple[int, int]] = {}
        self.opened: List[str] = []
        self.closed: List[str] = []
        self._next_inode = 100

    # --- construction -------------------------------------------------------

    def _register(self, path: str, attrs: EntryAttributes) -> None:
        self.attrs[path] = attrs
        parent, _, name = path.rpartition("/")
        if parent:
            self.listings.setdefault(parent, []).append(name)

    def _inode(self, inode: Optional[int]) -> int:
        if inode is not None:
            return inode
        self._next_inode += 1
        return self._next_inode

    def add_dir(self, path: str, size: int = 0, inode: Optional[int] = None) -> None:
        self._register(path, EntryAttributes(self.device, self._inode(inode), size, FileType.DIRECTORY))
        self.listings.setdefault(path, [])

    def add_file(
            self,
            path: str,
            size: int,
            inode: Optional[int] = None,
            device: Optional[int] = None,
            file_type: FileType = FileType.FILE,
    ) -> None:
        dev = self.device if device is None else device
        self._register(path, EntryAttributes(dev, self._inode(inode), size, file_type))

    def add_link(self, target: str, path: str) -> None:
        """Create a hard link: a second name for the same attributes."""
        self._register(path, self.attrs[target])

    def add_unstattable(self, path: str, code: int = errno.ENOENT) -> None:
        parent, _, name = path.rpartition("/")
        self.listings.setdefault(parent, []).append(name)
        self.stat_errors[path] = code

    # --- collaborator API ---------------------------------------------------

    def probe(self, path: str) -> EntryAttributes:
        if path.endswith("/."):
            path = path[:-2]
        if path in self.stat_errors:
            code = self.stat_errors[path]
            raise OSError(code, os.strerror(code), path)
        if path not in self.attrs:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
        return self.attrs[path]

    def open_directory(self, path: str) -> _FakeListing:
        if path in self.open_errors:
            code = self.open_errors[path]
            raise OSError(code, os.strerror(code), path)
        self.opened.append(path)
        return _FakeListing(self, path)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def fake_fs() -> FakeFilesystem:
    """Return an empty in-memory filesystem with a root directory 'root'."""
    fs = FakeFilesystem()
    fs.add_dir("root", size=0, inode=2)
    return fs


@pytest.fixture(autouse=True)
def _reset_ckdu_logging() -> Iterator[None]:
    yield
    shutdown_logging()


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Redirect the user data directory into a temporary home."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("LOCALAPPDATA", str(home))
    return home
