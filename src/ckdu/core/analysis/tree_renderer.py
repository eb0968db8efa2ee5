from __future__ import annotations

"""
Tree Renderer.

Converts the sorted usage tree into report lines: a fixed-width,
human-readable size column followed by the indented entry name.
Directories listed as "boring" keep their size but have their contents
replaced by a single ellipsis line.
"""

import os
from typing import Any, Collection, Dict, List

from ckdu.domain.constants import (
    COLLAPSED_MARKER,
    DEFAULT_BORING_DIRS,
    INDENT_STEP,
    SIZE_FIELD_WIDTH,
    SIZE_UNITS,
    UNIT_BASE,
)
from ckdu.domain.tree_models import TreeNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def humanize_size(num_bytes: int) -> str:
    """
    Format a byte count with the largest binary unit keeping it <= 1024.

    Examples:
        >>> humanize_size(15)
        '  15.0 B  '
        >>> humanize_size(1536)
        '   1.5 kiB'
    """
    value = float(num_bytes)
    unit_index = 0
    while value > UNIT_BASE and unit_index < len(SIZE_UNITS) - 1:
        value /= UNIT_BASE
        unit_index += 1
    return f"{value:6.1f} {SIZE_UNITS[unit_index]:<3}"


def render_tree(
        node: TreeNode,
        lines: List[str],
        indent: str = "",
        boring_dirs: Collection[str] = DEFAULT_BORING_DIRS,
        collapse_boring: bool = True,
) -> None:
    """
    Recursively append report lines for ``node`` and its subtree.

    Args:
        node: Current node, whose children must already be sorted.
        lines: Accumulator list for output strings.
        indent: Indentation for the current nesting level.
        boring_dirs: Directory basenames whose contents are collapsed.
        collapse_boring: Disable to list boring directories in full.
    """
    name = node.name
    if node.is_dir and not name.endswith("/"):
        name += "/"
    lines.append(f"{humanize_size(node.total_size)} {indent}{name}")

    if not node.is_dir or not node.children:
        return

    child_indent = indent + INDENT_STEP

    if collapse_boring and _basename(node.name) in boring_dirs:
        lines.append(f"{' ' * SIZE_FIELD_WIDTH} {child_indent}{COLLAPSED_MARKER}")
        return

    for child in node.children:
        render_tree(
            child,
            lines,
            indent=child_indent,
            boring_dirs=boring_dirs,
            collapse_boring=collapse_boring,
        )


def tree_to_dict(node: TreeNode) -> Dict[str, Any]:
    """Convert a node and its subtree into a JSON-serializable dict."""
    data: Dict[str, Any] = {
        "name": node.name,
        "type": node.file_type.value,
        "content_size": node.content_size,
        "total_size": node.total_size,
    }
    if node.is_dir:
        data["children"] = [tree_to_dict(child) for child in node.children]
    return data


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _basename(name: str) -> str:
    """Last component of a node name, which for the root is a whole path."""
    return os.path.basename(name.rstrip(os.sep)) or name
