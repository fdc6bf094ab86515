from __future__ import annotations

import os
from typing import Optional

DEBUG_PY_TRACE_VAR = "MSDSCRIPT_DEBUG_PY_TRACE"
ROUNDTRIP_CASES_VAR = "MSDSCRIPT_ROUNDTRIP_CASES"

_TRUTHY = ("1", "true", "yes", "on")


def envvar_value_by_name(name: str) -> Optional[str]:
    """Get the current value of an env var by name, or None if missing."""
    return os.environ.get(name)


def envvar_flag(name: str) -> bool:
    value = envvar_value_by_name(name)
    return value is not None and value.strip().lower() in _TRUTHY


def debug_py_trace_enabled() -> bool:
    """Whether caught errors should also print their Python traceback."""
    return envvar_flag(DEBUG_PY_TRACE_VAR)


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        os.environ[DEBUG_PY_TRACE_VAR] = "1"
    else:
        os.environ.pop(DEBUG_PY_TRACE_VAR, None)


def roundtrip_cases(default: int) -> int:
    """Sample size for randomized round-trip checks.

    Unset, empty or non-numeric values fall back to default; negative
    values clamp to zero.
    """
    raw = envvar_value_by_name(ROUNDTRIP_CASES_VAR)
    if raw is None or not raw.strip():
        return default

    try:
        return max(int(raw), 0)
    except ValueError:
        return default
