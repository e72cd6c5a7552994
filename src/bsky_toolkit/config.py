"""Runtime configuration for the bsky toolkit."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_TMP_ARENA_CAPACITY = 8 * 1024 * 1024

ARENA_CAPACITY_ENV = "BSKY_TMP_ARENA_CAPACITY"
LOG_LEVEL_ENV = "BSKY_LOG_LEVEL"


@dataclass
class ToolkitConfig:
    """
    Settings shared by the arena, parser and command-line interface.

    Attributes:
        arena_capacity: Size in bytes of each temporary arena
        log_level: Name of the logging level used by the CLI
    """

    arena_capacity: int = DEFAULT_TMP_ARENA_CAPACITY
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.arena_capacity <= 0:
            raise ValueError("arena_capacity must be positive")

        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        self.log_level = self.log_level.upper()

    @property
    def logging_level(self) -> int:
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ToolkitConfig':
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            ToolkitConfig with defaults for unset variables

        Raises:
            ValueError: If a variable holds a malformed value
        """
        environ = os.environ if environ is None else environ

        capacity = DEFAULT_TMP_ARENA_CAPACITY
        raw_capacity = environ.get(ARENA_CAPACITY_ENV)
        if raw_capacity:
            try:
                capacity = int(raw_capacity, 0)
            except ValueError:
                raise ValueError(f"{ARENA_CAPACITY_ENV} must be an integer, got {raw_capacity!r}")

        return cls(
            arena_capacity=capacity,
            log_level=environ.get(LOG_LEVEL_ENV) or "INFO",
        )
