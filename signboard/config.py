"""
Signboard configuration.

Timing and matching knobs for the transcript-to-sign pipeline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


# Still images and textual fallbacks have no natural end event.
DEFAULT_DWELL_SECONDS = 1.5

# Longest phrase window tried by the matcher.
DEFAULT_MAX_PHRASE_WINDOW = 3

# Debounce before restarting an ended recognition source.
DEFAULT_RESTART_DELAY_SECONDS = 0.3

DEFAULT_LIBRARY_DIR = "signs"

LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}


def _getenv_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return float(value)


def _getenv_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


@dataclass
class SignboardConfig:
    """Signboard configuration.

    Args:
        dwell_seconds: How long an image or fallback stays on screen.
        max_phrase_window: Largest multi-word window the matcher tries.
        restart_delay_seconds: Debounce before recognition restarts.
        library_dir: Directory of the file-backed sign library.
        log_level: Minimum structured log level.
        json_logs: Emit JSON log lines instead of human-readable ones.

    Example:
        config = SignboardConfig(dwell_seconds=1.0)
        session = SignSession(store, config=config)
    """

    dwell_seconds: float = DEFAULT_DWELL_SECONDS
    max_phrase_window: int = DEFAULT_MAX_PHRASE_WINDOW
    restart_delay_seconds: float = DEFAULT_RESTART_DELAY_SECONDS
    library_dir: Path = field(default_factory=lambda: Path(DEFAULT_LIBRARY_DIR))
    log_level: str = "info"
    json_logs: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.library_dir = Path(self.library_dir)
        self.log_level = self.log_level.lower()
        if self.dwell_seconds < 0:
            raise ValueError("dwell_seconds must be >= 0")
        if self.max_phrase_window < 1:
            raise ValueError("max_phrase_window must be >= 1")
        if self.restart_delay_seconds < 0:
            raise ValueError("restart_delay_seconds must be >= 0")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}")

    @classmethod
    def from_env(cls, **overrides) -> "SignboardConfig":
        """Build a config from SIGNBOARD_* environment variables.

        Args:
            **overrides: Values that win over the environment.
        """
        values = {
            "dwell_seconds": _getenv_float("SIGNBOARD_DWELL_SECONDS", DEFAULT_DWELL_SECONDS),
            "restart_delay_seconds": _getenv_float(
                "SIGNBOARD_RESTART_DELAY_SECONDS", DEFAULT_RESTART_DELAY_SECONDS
            ),
            "library_dir": Path(os.environ.get("SIGNBOARD_LIBRARY_DIR", DEFAULT_LIBRARY_DIR)),
            "log_level": os.environ.get("SIGNBOARD_LOG_LEVEL", "info"),
            "json_logs": _getenv_bool("SIGNBOARD_JSON_LOGS", False),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
