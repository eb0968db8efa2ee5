from __future__ import annotations

"""
Hard-Link Identity Pool.

Run-scoped record of every (device, inode) pair already accounted for.
The crawler asks it once per node whether the content behind that node
has been counted yet.
"""

from typing import Set, Tuple

Identity = Tuple[int, int]


class IdentityPool:
    """
    Monotonically growing set of (device, inode) identities.

    Tuples compare device first, then inode, which is the ordering the
    identity requires. Nodes are never stored, only their identities.
    """

    def __init__(self) -> None:
        self._seen: Set[Identity] = set()

    def register_if_new(self, device: int, inode: int) -> bool:
        """
        Record an identity.

        Returns:
            bool: True the first time the pair is seen, False afterwards.
        """
        key = (device, inode)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def __contains__(self, identity: object) -> bool:
        return identity in self._seen

    def __len__(self) -> int:
        return len(self._seen)
