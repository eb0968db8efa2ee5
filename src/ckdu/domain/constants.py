from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the report layout values, size units, default boring directory
names, and the errno rationale table used by the diagnostic reporter.
"""

import errno
from typing import Dict, List, Tuple

APP_NAME = "ckdu"
CURRENT_CONFIG_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# REPORT LAYOUT
# -----------------------------------------------------------------------------

SIZE_UNITS: Tuple[str, ...] = ("B", "kiB", "MiB", "GiB", "TiB", "PiB", "EiB")
UNIT_BASE = 1024

# "1024.0 kiB" -> six digits for the value, three for the unit
SIZE_FIELD_WIDTH = 10
INDENT_STEP = "  "
COLLAPSED_MARKER = "..."

DEFAULT_BORING_DIRS: List[str] = [".git", ".svn", ".hg", ".bzr", "CVS", "_darcs"]

# -----------------------------------------------------------------------------
# DIAGNOSTICS
# -----------------------------------------------------------------------------

ACTION_OPENING = "opening"
ACTION_READING = "reading"
ACTION_STATTING = "statting"

UNKNOWN_ERRNO_NAME = "UNKNOWN"
UNKNOWN_ERROR_DESCRIPTION = "An unexpected error occurred."

ERROR_DESCRIPTIONS: Dict[int, str] = {
    errno.EACCES: "Permission denied.",
    errno.EBADF: "Invalid directory stream descriptor.",
    errno.EFAULT: "Bad address.",
    errno.EIO: "Input/output error while accessing the filesystem.",
    errno.ELOOP: "Too many symbolic links encountered while resolving the path.",
    errno.EMFILE: "Too many file descriptors in use by the process.",
    errno.ENAMETOOLONG: "File name too long.",
    errno.ENFILE: "Too many files are currently open in the system.",
    errno.ENOENT: "No such file or directory.",
    errno.ENOMEM: "Insufficient memory to complete the operation.",
    errno.ENOTDIR: "A component of the path is not a directory.",
    errno.EOVERFLOW: "File size or inode number cannot be represented.",
    errno.EPERM: "Operation not permitted.",
}
