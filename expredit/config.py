"""Editor configuration with environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

log = logging.getLogger(__name__)

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    if raw:
        log.warning("Ignoring %s=%r: not a boolean", name, raw)
    return default


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring %s=%r: not an integer", name, raw)
        return default


@dataclass
class EditorConfig:
    """Configuration for the reorder session and the CLI."""

    log_level: str = "WARNING"
    reparse_on_commit: bool = True
    show_indented: bool = False
    max_preview: int = 20

    @classmethod
    def from_env(cls) -> EditorConfig:
        defaults = cls()
        return cls(
            log_level=os.getenv("EXPREDIT_LOG_LEVEL", "").strip().upper() or defaults.log_level,
            reparse_on_commit=_get_bool("EXPREDIT_REPARSE_ON_COMMIT", defaults.reparse_on_commit),
            show_indented=_get_bool("EXPREDIT_SHOW_INDENTED", defaults.show_indented),
            max_preview=max(1, _get_int("EXPREDIT_MAX_PREVIEW", defaults.max_preview)),
        )
