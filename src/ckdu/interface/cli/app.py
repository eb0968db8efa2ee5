from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of the
configuration layers (defaults, persisted file, command-line overrides),
scan execution, report output, and exit status mapping.
"""

import json
import sys
from typing import Any, Dict, List, Optional

from ckdu.core.analysis.tree_renderer import tree_to_dict
from ckdu.core.pipeline.engine import run_scan
from ckdu.core.pipeline.validator import validate_config
from ckdu.domain.config import get_default_config, load_config, save_config
from ckdu.domain.pipeline_models import ScanResult
from ckdu.infra.logging import LoggingConfig, configure_logging, get_logger
from ckdu.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

_MERGEABLE_KEYS = ("input_path", "boring_dirs", "collapse_boring", "output_path", "json_output")

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on completion (even with reported subtree errors), 1 when
             the root cannot be probed or a fatal error occurs.
    """
    # Entry names that are not valid UTF-8 must not abort printing
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(errors="surrogateescape")

    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        log_level = "DEBUG"
    elif args.verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"
    configure_logging(
        LoggingConfig(level=log_level, console=True, log_file=args.log_file),
        force=True,
    )

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        save_config(clean_conf)

    try:
        result = run_scan(clean_conf)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except (MemoryError, RecursionError) as e:
        logger.critical(f"Scan aborted: {type(e).__name__}", exc_info=True)
        print(f"ERROR: Scan aborted ({type(e).__name__}).", file=sys.stderr)
        return EXIT_FAILURE

    if not result.ok:
        return EXIT_FAILURE

    if clean_conf["json_output"]:
        _print_json_report(result)
    else:
        _print_text_report(result)

    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge known, non-None override values into the base config."""
    out = dict(base)
    for k in _MERGEABLE_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _print_text_report(result: ScanResult) -> None:
    for line in result.lines:
        print(line)


def _print_json_report(result: ScanResult) -> None:
    assert result.root is not None
    payload = {
        "root": tree_to_dict(result.root),
        "summary": result.summary,
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    sys.exit(main())
