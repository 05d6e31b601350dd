"""
Runtime settings for coauthor.

Values come from, in increasing priority: built-in defaults, a `.env` file in
the repository root, the process environment, and finally CLI flags passed
through `Settings.with_overrides`.
"""

import math
import os
from dataclasses import dataclass, fields, replace
from datetime import timedelta
from pathlib import Path
from typing import Mapping, Optional

from dotenv import dotenv_values

DEFAULT_THRESHOLD = 0.85
DEFAULT_SNAPSHOT_LIMIT = 5
DEFAULT_RETENTION_HOURS = 4.0
DEFAULT_CHANGES_DIR = ".cursor-changes"
DEFAULT_CO_AUTHOR = "ai-assistant <ai-assistant@users.noreply.github.com>"
# A century; anything wider cannot be subtracted from the current date
MAX_RETENTION_HOURS = 24 * 365 * 100.0

_ENV_PREFIX = "COAUTHOR_"


class ConfigError(ValueError):
    """Raised when a configuration value cannot be used."""


@dataclass(frozen=True)
class Settings:
    threshold: float = DEFAULT_THRESHOLD
    snapshot_limit: int = DEFAULT_SNAPSHOT_LIMIT
    retention_hours: float = DEFAULT_RETENTION_HOURS
    changes_dir: str = DEFAULT_CHANGES_DIR
    co_author: str = DEFAULT_CO_AUTHOR

    def __post_init__(self):
        if not 0.0 < self.threshold <= 1.0:
            raise ConfigError(f"threshold must be in (0, 1], got {self.threshold}")
        if self.snapshot_limit < 1:
            raise ConfigError(f"snapshot limit must be at least 1, got {self.snapshot_limit}")
        if not math.isfinite(self.retention_hours) or not 0 < self.retention_hours <= MAX_RETENTION_HOURS:
            raise ConfigError(
                f"retention window must be between 0 and {MAX_RETENTION_HOURS:g} hours, got {self.retention_hours}h"
            )
        if not self.changes_dir.strip():
            raise ConfigError("changes directory must not be empty")
        if not self.co_author.strip():
            raise ConfigError("co-author identity must not be empty")

    @property
    def retention_window(self) -> timedelta:
        return timedelta(hours=self.retention_hours)

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        applied = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **applied)

    @classmethod
    def from_env(cls, repo_root: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from `COAUTHOR_*` variables.

        When `env` is omitted the process environment is used, layered over
        `<repo_root>/.env` if that file exists. Variables already present in
        the environment take precedence over the file.
        """
        if env is None:
            merged = {}
            if repo_root is not None:
                dotenv_file = Path(repo_root) / ".env"
                if dotenv_file.is_file():
                    merged.update({k: v for k, v in dotenv_values(dotenv_file).items() if v is not None})
            merged.update(os.environ)
            env = merged

        values = {}
        for f in fields(cls):
            raw = env.get(_ENV_PREFIX + f.name.upper())
            if raw is None or not raw.strip():
                continue
            values[f.name] = _coerce(f.name, raw.strip(), type(getattr(_DEFAULTS, f.name)))
        return cls(**values)


def _coerce(name: str, raw: str, kind: type):
    try:
        return kind(raw)
    except ValueError:
        raise ConfigError(f"{_ENV_PREFIX}{name.upper()}={raw!r} is not a valid {kind.__name__}") from None


_DEFAULTS = Settings()
