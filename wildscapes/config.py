"""Environment-driven configuration.

All settings come from ``WILDSCAPES_*`` environment variables:

- ``WILDSCAPES_API_BASE_URL``: persistence service root; unset disables
  persistence.
- ``WILDSCAPES_API_TIMEOUT_SEC``: per-request timeout (default 5).
- ``WILDSCAPES_FINISH_ROUND``: play out the round after the end trigger.
- ``WILDSCAPES_LOG_LEVEL``: level for :func:`setup_logging` (default INFO).
- ``WILDSCAPES_CATALOG_PATH``: alternative animal card catalog file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

ENV_PREFIX = "WILDSCAPES_"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class WildscapesConfig:
    """Runtime configuration.

    Attributes
    ----------
    api_base_url : Optional[str]
        Root URL of the persistence service, without trailing slash.
    api_timeout_sec : float
        Timeout for each persistence request.
    finish_round : bool
        Default for START_GAME's ``finish_round`` option.
    log_level : str
        Logging level name.
    catalog_path : Optional[str]
        Catalog file to use instead of the bundled one.
    """

    api_base_url: Optional[str] = None
    api_timeout_sec: float = 5.0
    finish_round: bool = False
    log_level: str = "INFO"
    catalog_path: Optional[str] = None

    @property
    def persistence_enabled(self) -> bool:
        return self.api_base_url is not None

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


def _parse_flag(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"Expected a boolean flag, got {raw!r}", key=key)


def load_config(env: Optional[Mapping[str, str]] = None) -> WildscapesConfig:
    """Build a :class:`WildscapesConfig` from ``env`` (default ``os.environ``).

    Raises:
        ConfigurationError: If a variable is present but malformed.
    """
    source = os.environ if env is None else env

    def get(name: str) -> Optional[str]:
        return source.get(ENV_PREFIX + name)

    base_url = get("API_BASE_URL")
    if base_url is not None:
        base_url = base_url.strip().rstrip("/") or None
    if base_url is not None and not base_url.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"API base URL must start with http:// or https://, got {base_url!r}",
            key=ENV_PREFIX + "API_BASE_URL",
        )

    timeout = 5.0
    raw_timeout = get("API_TIMEOUT_SEC")
    if raw_timeout is not None:
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(
                f"Timeout must be a number, got {raw_timeout!r}",
                key=ENV_PREFIX + "API_TIMEOUT_SEC",
            ) from exc
        if timeout <= 0:
            raise ConfigurationError(
                "Timeout must be positive", key=ENV_PREFIX + "API_TIMEOUT_SEC"
            )

    finish_round = False
    raw_finish = get("FINISH_ROUND")
    if raw_finish is not None:
        finish_round = _parse_flag(ENV_PREFIX + "FINISH_ROUND", raw_finish)

    log_level = (get("LOG_LEVEL") or "INFO").strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ConfigurationError(
            f"Unknown log level {log_level!r}", key=ENV_PREFIX + "LOG_LEVEL"
        )

    catalog_path = get("CATALOG_PATH") or None

    return WildscapesConfig(
        api_base_url=base_url,
        api_timeout_sec=timeout,
        finish_round=finish_round,
        log_level=log_level,
        catalog_path=catalog_path,
    )


__all__ = ["WildscapesConfig", "load_config"]
