"""Configuration loading for the security monitor."""

import json
import logging
import os
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from .detector import DEFAULT_MAX_FILE_BYTES
from .errors import InvalidConfiguration
from .file_walker import DEFAULT_EXTENSIONS, DEFAULT_IGNORE_DIRS
from .history import DEFAULT_DEDUP_WINDOW, DEFAULT_HISTORY_LIMIT
from .models import Severity
from .patterns import DEFAULT_KEYWORDS

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SECURITY_MONITOR_CONFIG"
LOG_LEVEL_ENV_VAR = "SECURITY_MONITOR_LOG_LEVEL"


class MonitorConfig(BaseModel):
    """Settings for one monitor instance."""

    target_root: str = Field(default=".", description="Directory to scan")
    interval_seconds: int = Field(default=60, ge=1, description="Seconds between recurring scans")
    ignore_dirs: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_IGNORE_DIRS),
        description="Directory base names that are never descended into",
    )
    extensions: list[str] = Field(
        default_factory=lambda: sorted(DEFAULT_EXTENSIONS),
        description="Only files with these suffixes are read",
    )
    keywords: list[str] = Field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    keyword_severity: dict[str, Severity] = Field(
        default_factory=dict, description="Per-keyword severity overrides"
    )
    dedup_window: int = Field(default=DEFAULT_DEDUP_WINDOW, ge=1, description="Recent findings checked for repeats")
    history_limit: int = Field(default=DEFAULT_HISTORY_LIMIT, ge=2, description="Maximum findings retained")
    max_file_bytes: int = Field(default=DEFAULT_MAX_FILE_BYTES, ge=1)
    voice_enabled: bool = Field(default=True)
    sms_enabled: bool = Field(default=True)


def _read_config_file(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise InvalidConfiguration(f"Config file not found: {path}")
    except json.JSONDecodeError as e:
        raise InvalidConfiguration(f"Malformed JSON in config file {path}: {e}")
    except OSError as e:
        raise InvalidConfiguration(f"Error reading config file {path}: {e}")

    if not isinstance(data, dict):
        raise InvalidConfiguration(
            f"Config file must be a JSON object, got {type(data).__name__}: {path}"
        )
    return data


def load_config(path: Optional[str] = None, **overrides: Any) -> MonitorConfig:
    """Load configuration from a JSON file and keyword overrides.

    The file path defaults to $SECURITY_MONITOR_CONFIG. Overrides that are None
    are ignored, so CLI arguments can be passed straight through.

    Raises:
        InvalidConfiguration: If the file cannot be read or values are invalid.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    data: dict[str, Any] = {}
    if path:
        logger.info(f"Loading config from {path}")
        data = _read_config_file(path)

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return MonitorConfig(**data)
    except ValidationError as e:
        raise InvalidConfiguration(f"Invalid configuration: {e}")


def resolve_log_level(name: Optional[str] = None) -> int:
    """Map a level name (or $SECURITY_MONITOR_LOG_LEVEL) to a logging level."""
    name = (name or os.environ.get(LOG_LEVEL_ENV_VAR) or "INFO").upper()
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO
