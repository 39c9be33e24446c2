"""
Centralized Configuration
=========================
Settings read once from the environment at import time.

Modules import the ready-made objects::

    from dirindex.config import TRACING, INDEX

The ``load_*`` factories accept an explicit mapping so callers (and tests)
can build settings without touching ``os.environ``. The base directory of an
index is never configured here; the host application passes it in.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dirindex.errors import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(value: Optional[str], default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class TracingConfig:
    """OpenTelemetry export settings."""
    SERVICE_NAME: str = "dirindex"
    OTLP_ENDPOINT: str = "http://localhost:4318/v1/traces"
    ENABLED: bool = False


@dataclass(frozen=True)
class IndexConfig:
    """Defaults applied by directory index strategies."""
    DIR_MODE: int = 0o777  # masked by the process umask


def load_tracing_config(environ: Optional[Mapping[str, str]] = None) -> TracingConfig:
    env = os.environ if environ is None else environ
    return TracingConfig(
        SERVICE_NAME=env.get("DIRINDEX_SERVICE_NAME") or TracingConfig.SERVICE_NAME,
        OTLP_ENDPOINT=env.get("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT") or TracingConfig.OTLP_ENDPOINT,
        ENABLED=_env_flag(env.get("DIRINDEX_TRACING"), TracingConfig.ENABLED),
    )


def load_index_config(environ: Optional[Mapping[str, str]] = None) -> IndexConfig:
    """Build index settings from ``environ``.

    Raises:
        ConfigurationError: if ``DIRINDEX_DIR_MODE`` is not an octal mode.
    """
    env = os.environ if environ is None else environ
    raw_mode = env.get("DIRINDEX_DIR_MODE")
    if raw_mode is None or not raw_mode.strip():
        return IndexConfig()

    try:
        mode = int(raw_mode.strip(), 8)
    except ValueError as e:
        raise ConfigurationError(f"DIRINDEX_DIR_MODE must be an octal mode, got {raw_mode!r}") from e
    if not 0 <= mode <= 0o7777:
        raise ConfigurationError(f"DIRINDEX_DIR_MODE out of range: {raw_mode!r}")
    return IndexConfig(DIR_MODE=mode)


TRACING = load_tracing_config()
INDEX = load_index_config()
