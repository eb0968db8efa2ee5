from __future__ import annotations

"""
Scan orchestration pipeline.

Coordinates one disk usage run:
1. Validates the configuration.
2. Probes the root and crawls the tree with a fresh identity pool.
3. Renders the report lines.
4. Optionally persists the report to disk.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from ckdu.core.analysis.identity_pool import IdentityPool
from ckdu.core.analysis.tree_builder import OpenDirectoryFunc, ProbeFunc, build_tree
from ckdu.core.analysis.tree_renderer import render_tree
from ckdu.core.pipeline.validator import validate_config
from ckdu.domain.errors import RootProbeError
from ckdu.domain.pipeline_models import ScanResult, create_error_result, create_success_result
from ckdu.infra.fs import DirectoryEnumerator, normalize_path, probe_entry
from ckdu.infra.reporting import ErrorReporter, format_error_line

logger = logging.getLogger(__name__)


def run_scan(
        config: Optional[Dict[str, Any]],
        *,
        reporter: Optional[ErrorReporter] = None,
        probe: ProbeFunc = probe_entry,
        open_directory: OpenDirectoryFunc = DirectoryEnumerator,
) -> ScanResult:
    """
    Execute a full scan and produce the rendered report.

    Args:
        config: The configuration dictionary (raw or partial).
        reporter: Sink for recoverable errors (stderr if omitted).
        probe: Attribute probe collaborator.
        open_directory: Directory enumerator collaborator.

    Returns:
        ScanResult: Report lines, tree and statistics, or the fatal error.
    """
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    reporter = reporter if reporter is not None else ErrorReporter()
    root_path = cfg["input_path"]
    base_path = os.path.abspath(root_path)
    logger.info(f"Scan started for: {root_path}")

    # -------------------------------------------------------------------------
    # 1) Crawl
    # -------------------------------------------------------------------------
    pool = IdentityPool()
    try:
        root = build_tree(
            root_path,
            pool=pool,
            reporter=reporter,
            probe=probe,
            open_directory=open_directory,
        )
    except RootProbeError as e:
        reporter.report(e)
        logger.error(f"Cannot probe scan root '{root_path}'.")
        return create_error_result(format_error_line(e), base_path, error_count=reporter.count)

    # -------------------------------------------------------------------------
    # 2) Render
    # -------------------------------------------------------------------------
    lines: List[str] = []
    render_tree(
        root,
        lines,
        boring_dirs=frozenset(cfg["boring_dirs"]),
        collapse_boring=cfg["collapse_boring"],
    )

    # -------------------------------------------------------------------------
    # 3) Persist
    # -------------------------------------------------------------------------
    output_path = ""
    if cfg["output_path"]:
        target = normalize_path(cfg["output_path"], base_path)
        if _save_report_to_disk(target, lines):
            output_path = target

    logger.info(
        f"Scan finished: {root.total_size} bytes, {len(pool)} unique identities, "
        f"{reporter.count} errors."
    )
    return create_success_result(
        base_path,
        root,
        lines,
        output_path=output_path,
        error_count=reporter.count,
        unique_identities=len(pool),
    )


def _save_report_to_disk(save_path: str, lines: List[str]) -> bool:
    """Write report lines to a file, creating parent directories."""
    try:
        out_dir = os.path.dirname(os.path.abspath(save_path))
        os.makedirs(out_dir, exist_ok=True)
        # Undecodable entry names round-trip as their original bytes
        with open(save_path, "w", encoding="utf-8", errors="surrogateescape") as f:
            f.write("\n".join(lines) + "\n")
    except OSError as e:
        logger.error(f"Failed to save report to '{save_path}': {e}")
        return False

    logger.info(f"Report saved to file: {save_path}")
    return True
