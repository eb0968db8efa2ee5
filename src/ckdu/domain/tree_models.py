from __future__ import annotations

"""
Disk Usage Tree Data Models.

Provides the node and attribute types used by the crawler to build the
hierarchical usage map, plus the file type classification derived from
stat mode bits.
"""

import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

# -----------------------------------------------------------------------------
# CLASSIFICATION
# -----------------------------------------------------------------------------

class FileType(Enum):
    """Coarse entry classification derived from mode bits."""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"

    @classmethod
    def from_mode(cls, mode: int) -> "FileType":
        """Map an ``st_mode`` value to its FileType."""
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.FILE
        return cls.OTHER

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class EntryAttributes:
    """
    Result of probing a single path without following symlinks.

    Attributes:
        device: Device id of the containing filesystem.
        inode: Inode number, unique per device.
        size: Raw content size in bytes.
        file_type: Classification of the entry.
    """
    device: int
    inode: int
    size: int
    file_type: FileType


@dataclass
class TreeNode:
    """
    One filesystem entry in the usage tree.

    Attributes:
        name: Basename of the entry (the root carries the supplied path).
        device: Device id from the probe.
        inode: Inode number from the probe.
        content_size: Size reported by the probe for this entry alone.
        file_type: Classification fixed at creation time.
        children: Ordered child list, crawl order until sorted.
        aggregate_size: Deduplicated size of all descendants (directories only).
    """
    name: str
    device: int
    inode: int
    content_size: int
    file_type: FileType
    children: List["TreeNode"] = field(default_factory=list)
    aggregate_size: int = 0

    @classmethod
    def from_attributes(cls, name: str, attrs: EntryAttributes) -> "TreeNode":
        return cls(
            name=name,
            device=attrs.device,
            inode=attrs.inode,
            content_size=attrs.size,
            file_type=attrs.file_type,
        )

    @property
    def is_dir(self) -> bool:
        return self.file_type is FileType.DIRECTORY

    @property
    def identity(self) -> Tuple[int, int]:
        return self.device, self.inode

    @property
    def total_size(self) -> int:
        """Own size plus, for directories, the aggregate of the subtree."""
        if self.is_dir:
            return self.content_size + self.aggregate_size
        return self.content_size
