"""
Environment-driven settings.

Load order: .env.local (local dev, highest priority), then .env, then the
process environment only. Variables:

    SEARCH_INDEX_CACHE      JSON index cache path        (~/.ac/index.json)
    SEARCH_MAX_RESULTS      default result limit         (20)
    SEARCH_THRESHOLD        default inclusion threshold  (-10000)
    SEARCH_ENABLE_PINYIN    pinyin fallback on/off       (true)
    SEARCH_WEIGHT_ID        id field weight              (4)
    SEARCH_WEIGHT_NAME      name field weight            (3)
    SEARCH_WEIGHT_TAGS      tags field weight            (2)
    SEARCH_WEIGHT_SUMMARY   summary field weight         (2)
    LOG_LEVEL               console log level            (INFO)
    LOG_FILE                log file base path           (logs/template-search.log)
    LOG_KEEP_SESSIONS       session log files kept       (5)
    PORT                    HTTP port                    (8080)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv

from .models import DEFAULT_FIELD_WEIGHTS, DEFAULT_LIMIT, DEFAULT_THRESHOLD

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}


@dataclass(frozen=True)
class Settings:
    index_cache: Path = Path("~/.ac/index.json").expanduser()
    max_results: int = DEFAULT_LIMIT
    threshold: float = DEFAULT_THRESHOLD
    enable_pinyin: bool = True
    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_FIELD_WEIGHTS))
    log_level: str = "INFO"
    log_file: str = "logs/template-search.log"
    log_keep_sessions: int = 5
    port: int = 8080


def load_env_files(root: Path = PROJECT_ROOT) -> Optional[Path]:
    """Load .env.local or .env from root; returns the loaded file, if any."""
    for candidate in (root / ".env.local", root / ".env"):
        if candidate.exists():
            load_dotenv(candidate, override=True)
            logger.debug(f"Loaded environment from: {candidate}")
            return candidate
    return None


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _parse_positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = _parse_int(env, name, default)
    if value < 1:
        raise ValueError(f"{name} must be at least 1, got {value}")
    return value


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    value = env.get(name)
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"{name} must be true or false, got {value!r}")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env: Mapping to read from (default: os.environ)

    Raises:
        ValueError: a variable is set but cannot be parsed
    """
    if env is None:
        env = os.environ

    weights = {
        key: _parse_float(env, f"SEARCH_WEIGHT_{key.upper()}", default)
        for key, default in DEFAULT_FIELD_WEIGHTS.items()
    }

    return Settings(
        index_cache=Path(env.get("SEARCH_INDEX_CACHE") or "~/.ac/index.json").expanduser(),
        max_results=_parse_int(env, "SEARCH_MAX_RESULTS", DEFAULT_LIMIT),
        threshold=_parse_float(env, "SEARCH_THRESHOLD", DEFAULT_THRESHOLD),
        enable_pinyin=_parse_bool(env, "SEARCH_ENABLE_PINYIN", True),
        weights=weights,
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        log_file=env.get("LOG_FILE") or "logs/template-search.log",
        log_keep_sessions=_parse_positive_int(env, "LOG_KEEP_SESSIONS", 5),
        port=_parse_int(env, "PORT", 8080),
    )
