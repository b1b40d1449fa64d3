"""Environment-driven settings and adapter bootstrap.

Recognised variables:

- ``SIGVEC_VECTOR_DIR``: directory holding the JSON vector files.
- ``SIGVEC_PROVIDER``: registered provider name (default ``pyca``).
- ``SIGVEC_LOG_LEVEL``: logging level name (default ``WARNING``).
- ``SIGVEC_ALLOW_SKIPPING``: when set, overrides every suite's skip policy.
"""
from __future__ import annotations

import importlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError
from .registry import registry

log = logging.getLogger(__name__)

ADAPTER_MODULES = ("sigvec_pyca",)
DEFAULT_PROVIDER = "pyca"
_DEFAULT_VECTOR_DIRS = ("testvectors", "testvectors_v1")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

_PROVIDER_CACHE: Dict[str, Any] = {}


@dataclass(frozen=True)
class Settings:
    vector_dir: Path
    provider: str = DEFAULT_PROVIDER
    log_level: int = logging.WARNING
    allow_skipping: Optional[bool] = None


def _parse_bool(name: str, value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ConfigError(f"{name} must be one of {sorted(_TRUE | _FALSE)}")


def _parse_level(name: str, value: str) -> int:
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"{name} must be a logging level name, got {value!r}")
    return level


def _default_vector_dir(cwd: Path) -> Path:
    for candidate in _DEFAULT_VECTOR_DIRS:
        if (cwd / candidate).is_dir():
            return cwd / candidate
    return cwd / _DEFAULT_VECTOR_DIRS[0]


def load_settings(env: Optional[Mapping[str, str]] = None, cwd: Optional[Path] = None) -> Settings:
    env_map = env if env is not None else os.environ
    base = cwd or Path.cwd()
    vector_dir = env_map.get("SIGVEC_VECTOR_DIR")
    level = env_map.get("SIGVEC_LOG_LEVEL")
    allow = env_map.get("SIGVEC_ALLOW_SKIPPING")
    return Settings(
        vector_dir=Path(vector_dir) if vector_dir else _default_vector_dir(base),
        provider=env_map.get("SIGVEC_PROVIDER") or DEFAULT_PROVIDER,
        log_level=_parse_level("SIGVEC_LOG_LEVEL", level) if level else logging.WARNING,
        allow_skipping=_parse_bool("SIGVEC_ALLOW_SKIPPING", allow) if allow else None,
    )


def configure_logging(level: int | str = logging.WARNING) -> None:
    if isinstance(level, str):
        level = _parse_level("log level", level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def load_adapters() -> None:
    """Import adapter packages so they register their providers."""
    for mod in ADAPTER_MODULES:
        try:
            importlib.import_module(mod)
        except ImportError as exc:
            log.warning("adapter %s unavailable: %s", mod, exc)


def get_provider(name: str) -> Any:
    if name not in _PROVIDER_CACHE:
        load_adapters()
        _PROVIDER_CACHE[name] = registry.create(name)
    return _PROVIDER_CACHE[name]


def default_provider() -> Any:
    return get_provider(load_settings().provider)


def reset_provider_cache(name: Optional[str] = None) -> None:
    """Drop cached provider instances so env-driven overrides take effect."""
    if name is None:
        _PROVIDER_CACHE.clear()
        return
    _PROVIDER_CACHE.pop(name, None)


__all__ = [
    "Settings",
    "load_settings",
    "configure_logging",
    "load_adapters",
    "get_provider",
    "default_provider",
    "reset_provider_cache",
]
