from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed argparse
namespace into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from ckdu.infra.logging import get_default_log_path

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the ckdu CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="ckdu",
        description=(
            "Report per-directory disk usage, counting hard-linked "
            "content only once."
        ),
    )

    p.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Directory to scan (default: configured input path, usually '.').",
    )

    # --- Report Layout ---
    p.add_argument(
        "--boring",
        dest="boring_dirs",
        default=None,
        help="Comma-separated directory names whose contents are collapsed.",
    )
    p.add_argument(
        "--no-collapse",
        action="store_true",
        help="List boring directories in full instead of collapsing them.",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Also save the text report to this file.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the usage tree as JSON instead of the text report.",
    )

    # --- Configuration ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration for future runs.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--log-file",
        nargs="?",
        const=get_default_log_path(),
        default=None,
        help="Write a rotating debug log (default location if no path given).",
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress at INFO level.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Unset options map to None (or are omitted) so they never mask the
    persisted configuration.
    """
    overrides: Dict[str, Any] = {}

    overrides["input_path"] = args.path
    overrides["output_path"] = args.output_path
    overrides["boring_dirs"] = _split_csv(args.boring_dirs)

    if args.no_collapse:
        overrides["collapse_boring"] = False
    if args.json_output:
        overrides["json_output"] = True

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of stripped strings."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
