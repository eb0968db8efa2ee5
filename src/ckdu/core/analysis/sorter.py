from __future__ import annotations

"""
Sibling Sorter.

Orders one directory's children: directories first, then by descending
total size, then by byte-wise name.
"""

import os
from typing import Iterable, List, Tuple

from ckdu.domain.tree_models import TreeNode


def sibling_sort_key(node: TreeNode) -> Tuple[bool, int, bytes]:
    # Negated size keeps the order descending without subtraction
    return not node.is_dir, -node.total_size, os.fsencode(node.name)


def sort_siblings(children: Iterable[TreeNode]) -> List[TreeNode]:
    """
    Return the children in deterministic report order.

    Names are unique within one directory, so the key never ties.
    """
    return sorted(children, key=sibling_sort_key)
