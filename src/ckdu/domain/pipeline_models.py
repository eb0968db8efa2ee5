from __future__ import annotations

"""
Scan Result Data Models.

Defines the result object passed from the scan engine to the interface
layer, and the factory functions that build it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ckdu.domain.tree_models import TreeNode

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ScanResult:
    """
    Unified outcome of one disk usage scan.

    Attributes:
        ok: Whether the scan produced a report.
        error: Failure description when ``ok`` is False.
        base_path: Absolute form of the scanned root.
        root: Root of the usage tree (None on failure).
        lines: Rendered report lines.
        output_path: File the report was saved to, if any.
        error_count: Number of recoverable errors reported during the crawl.
        unique_identities: Distinct (device, inode) pairs encountered.
        summary: Technical execution summary.
    """
    ok: bool
    error: str
    base_path: str

    root: Optional[TreeNode] = None
    lines: List[str] = field(default_factory=list)
    output_path: str = ""

    error_count: int = 0
    unique_identities: int = 0

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        base_path: str,
        error_count: int = 0,
) -> ScanResult:
    return ScanResult(
        ok=False,
        error=error,
        base_path=base_path,
        error_count=error_count,
        summary={"errors": error_count},
    )


def create_success_result(
        base_path: str,
        root: TreeNode,
        lines: List[str],
        output_path: str = "",
        error_count: int = 0,
        unique_identities: int = 0,
) -> ScanResult:
    summary: Dict[str, Any] = {
        "total_size": root.total_size,
        "lines": len(lines),
        "errors": error_count,
        "unique_identities": unique_identities,
    }
    return ScanResult(
        ok=True,
        error="",
        base_path=base_path,
        root=root,
        lines=lines,
        output_path=output_path,
        error_count=error_count,
        unique_identities=unique_identities,
        summary=summary,
    )
