"""Environment-driven defaults for engine options."""

from __future__ import annotations

import logging
import os


logger = logging.getLogger(__name__)

WORKERS_ENV = "PYAUCTION_WORKERS"
HISTORY_YEARS_ENV = "PYAUCTION_HISTORY_YEARS"
STRICT_ENV = "PYAUCTION_STRICT"
REFERENCE_SPEND_ENV = "PYAUCTION_REFERENCE_SPEND"

_WORKERS_DEFAULT = 1


def _env_float(name: str, default: float | None, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %s", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    text = raw.strip().lower()
    if text in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "f", "no", "n", "off"}:
        return False
    logger.warning("Invalid boolean for %s: %s; using default %s", name, raw, default)
    return default


def default_workers() -> int:
    return _env_int(WORKERS_ENV, _WORKERS_DEFAULT, min_value=1)


def default_history_years(fallback: int) -> int:
    return _env_int(HISTORY_YEARS_ENV, fallback, min_value=1)


def default_strict() -> bool:
    return _env_bool(STRICT_ENV, False)


def default_reference_spend() -> int | None:
    value = _env_float(REFERENCE_SPEND_ENV, None, clamp_min=0.0)
    if value is None:
        return None
    return int(value)
