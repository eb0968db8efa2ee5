from __future__ import annotations

"""
Disk Usage Tree Builder.

Recursively crawls a directory, creating one TreeNode per entry and
aggregating sizes bottom-up. Every node is checked against the identity
pool after its own subtree is complete, so hard-link aliases show up in
the tree without being counted twice.

Recursion depth follows the depth of the scanned tree and is limited by
the interpreter recursion limit.
"""

import logging
import os
from typing import Callable, ContextManager, Iterable, Optional

from ckdu.core.analysis.identity_pool import IdentityPool
from ckdu.core.analysis.sorter import sort_siblings
from ckdu.domain.errors import EnumerationError, OpenError, ProbeError, RootProbeError
from ckdu.domain.tree_models import EntryAttributes, FileType, TreeNode
from ckdu.infra.fs import DirectoryEnumerator, join_path, probe_entry
from ckdu.infra.reporting import ErrorReporter

logger = logging.getLogger(__name__)

ProbeFunc = Callable[[str], EntryAttributes]
OpenDirectoryFunc = Callable[[str], ContextManager[Iterable[str]]]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_tree(
        root_path: str,
        *,
        pool: Optional[IdentityPool] = None,
        reporter: Optional[ErrorReporter] = None,
        probe: ProbeFunc = probe_entry,
        open_directory: OpenDirectoryFunc = DirectoryEnumerator,
) -> TreeNode:
    """
    Probe the root path and build the full, sorted usage tree beneath it.

    Args:
        root_path: Directory to scan, kept verbatim as the root node name.
        pool: Identity pool for this run (a fresh one if omitted).
        reporter: Sink for recoverable errors (stderr if omitted).
        probe: Attribute probe collaborator.
        open_directory: Directory enumerator collaborator.

    Returns:
        TreeNode: The root node.

    Raises:
        RootProbeError: If the root itself cannot be probed.
    """
    builder = TreeBuilder(
        pool if pool is not None else IdentityPool(),
        reporter if reporter is not None else ErrorReporter(),
        probe=probe,
        open_directory=open_directory,
    )
    root = builder.probe_root(root_path)
    if root.is_dir:
        builder.crawl(root_path, root)
    builder.pool.register_if_new(root.device, root.inode)
    return root


class TreeBuilder:
    """
    Depth-first crawler with post-order size aggregation.

    Attributes:
        pool: Identity pool consulted once per created node.
        reporter: Receives every recoverable crawl error.
    """

    def __init__(
            self,
            pool: IdentityPool,
            reporter: ErrorReporter,
            *,
            probe: ProbeFunc = probe_entry,
            open_directory: OpenDirectoryFunc = DirectoryEnumerator,
    ) -> None:
        self.pool = pool
        self.reporter = reporter
        self._probe = probe
        self._open_directory = open_directory

    def probe_root(self, root_path: str) -> TreeNode:
        """
        Probe the scan root.

        A root given as a symlink to a directory is resolved through
        "<root>/." so the directory behind it is scanned. Any other
        symlink root is reported as the link itself.
        """
        try:
            attrs = self._probe(root_path)
        except OSError as exc:
            dirname, basename = os.path.split(root_path)
            raise RootProbeError.from_os_error(dirname, basename, exc) from exc

        if attrs.file_type is FileType.SYMLINK:
            try:
                attrs = self._probe(join_path(root_path, "."))
            except OSError:
                logger.debug(f"Root '{root_path}' is a symlink to a non-directory.")

        return TreeNode.from_attributes(root_path, attrs)

    def crawl(self, path: str, node: TreeNode) -> None:
        """
        Populate ``node.children`` and ``node.aggregate_size`` from ``path``.

        Open and read failures are reported and leave the node with
        whatever children were discovered before the failure.
        """
        logger.debug(f"Crawling directory: {path}")
        dirname, basename = os.path.split(path)

        try:
            listing = self._open_directory(path)
        except OSError as exc:
            self.reporter.report(OpenError.from_os_error(dirname, basename, exc))
            return

        with listing:
            names = iter(listing)
            while True:
                try:
                    name = next(names)
                except StopIteration:
                    break
                except OSError as exc:
                    self.reporter.report(EnumerationError.from_os_error(dirname, basename, exc))
                    break
                self._visit_entry(path, name, node)

            node.children = sort_siblings(node.children)

    # -------------------------------------------------------------------------
    # INTERNAL HELPERS
    # -------------------------------------------------------------------------

    def _visit_entry(self, dirname: str, name: str, parent: TreeNode) -> None:
        child_path = join_path(dirname, name)
        try:
            attrs = self._probe(child_path)
        except OSError as exc:
            self.reporter.report(ProbeError.from_os_error(dirname, name, exc))
            return

        child = TreeNode.from_attributes(name, attrs)
        parent.children.append(child)

        if child.is_dir:
            self.crawl(child_path, child)

        # Subtree is final here; only the first alias contributes its bytes
        if self.pool.register_if_new(child.device, child.inode):
            parent.aggregate_size += child.total_size
