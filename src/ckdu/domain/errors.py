from __future__ import annotations

"""
Domain Error Taxonomy.

Recoverable crawl failures carry the operation kind, the offending path
split into directory and basename, and the underlying errno so the
diagnostic reporter can reproduce the stderr line format exactly.
"""

import errno
from typing import Optional, Type, TypeVar

from ckdu.domain.constants import (
    ACTION_OPENING,
    ACTION_READING,
    ACTION_STATTING,
    ERROR_DESCRIPTIONS,
    UNKNOWN_ERRNO_NAME,
    UNKNOWN_ERROR_DESCRIPTION,
)
from ckdu.infra.fs import join_path

_E = TypeVar("_E", bound="CrawlError")


class DiskUsageError(Exception):
    """Base class for all ckdu errors."""


class CrawlError(DiskUsageError):
    """
    A filesystem failure scoped to one directory or one entry.

    Attributes:
        action: Verb describing the failed operation.
        dirname: Directory part of the offending path.
        basename: Entry name part of the offending path.
        code: Underlying errno value (0 when unknown).
    """
    action: str = ""

    def __init__(self, dirname: str, basename: str, code: Optional[int]) -> None:
        self.dirname = dirname
        self.basename = basename
        self.code = int(code or 0)
        super().__init__(
            f"{self.errno_name}({self.code}) while {self.action} {self.path!r}"
        )

    @classmethod
    def from_os_error(cls: Type[_E], dirname: str, basename: str, exc: OSError) -> _E:
        return cls(dirname, basename, exc.errno)

    @property
    def path(self) -> str:
        return join_path(self.dirname, self.basename)

    @property
    def errno_name(self) -> str:
        return errno.errorcode.get(self.code, UNKNOWN_ERRNO_NAME)

    @property
    def description(self) -> str:
        return ERROR_DESCRIPTIONS.get(self.code, UNKNOWN_ERROR_DESCRIPTION)


class OpenError(CrawlError):
    """Directory could not be opened; its subtree stays empty."""
    action = ACTION_OPENING


class EnumerationError(CrawlError):
    """Directory stream failed mid-listing; partial results are kept."""
    action = ACTION_READING


class ProbeError(CrawlError):
    """Attribute lookup failed; the entry is left out of the tree."""
    action = ACTION_STATTING


class RootProbeError(ProbeError):
    """The scan root itself cannot be probed. Fatal."""
