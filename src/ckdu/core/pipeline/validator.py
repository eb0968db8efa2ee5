from __future__ import annotations

"""
Configuration Validation Service.

Normalizes untrusted configuration (persisted file, CLI overrides) into
strictly typed values, filling gaps with domain defaults.
"""

import logging
from typing import Any, Dict, List, Tuple

from ckdu.domain.config import get_default_config

logger = logging.getLogger(__name__)

_STRING_FIELDS = ("input_path", "output_path")
_BOOL_FIELDS = ("collapse_boring", "json_output")
_LIST_FIELDS = ("boring_dirs",)

# Fields where an empty value is legitimate
_OPTIONAL_STRING_FIELDS = ("output_path",)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data.
        strict: Raise TypeError on type mismatch instead of coercing.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized config and warnings.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update({k: v for k, v in config.items() if k in defaults})

    for field in _STRING_FIELDS:
        merged[field] = _as_str(
            merged.get(field), defaults[field], field, warnings, strict,
            allow_empty=field in _OPTIONAL_STRING_FIELDS,
        )

    for field in _BOOL_FIELDS:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field in _LIST_FIELDS:
        merged[field] = _as_list_str(merged.get(field), defaults[field], field, warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(
        value: Any,
        fallback: str,
        field: str,
        warnings: List[str],
        strict: bool,
        allow_empty: bool = False,
) -> str:
    if value is None:
        return fallback
    if isinstance(value, str):
        # Paths are used verbatim; whitespace only decides blankness
        if value.strip():
            return value
        return "" if allow_empty else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce human-friendly inputs into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """
    Ensure input is a list of non-blank strings, kept as spelled.

    An explicit empty list is kept, so a user can disable collapsing by
    clearing the boring directory list.
    """
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        warnings.append(f"Field '{field}' converted from CSV string to list.")
        return [x for x in value.split(",") if x.strip()]

    if isinstance(value, (list, tuple)):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                if item.strip():
                    out.append(item)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)
