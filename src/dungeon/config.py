"""Configuration for Dungeon Explorer."""

import os
from dataclasses import dataclass
from pathlib import Path

from .engine.rules import DEFAULT_RULES, Rules


@dataclass
class Config:
    """Application configuration.

    Game balance lives in ``Rules``; this only holds how the process runs.
    """

    player_name: str = ""
    seed: int | None = None
    unlock_delay: float = 0.0
    levels_file: Path | None = None
    log_level: str = "WARNING"
    log_file: Path | None = None
    json_logs: bool = False
    hash_names: bool = True

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        seed = os.getenv("DUNGEON_SEED")
        levels_file = os.getenv("DUNGEON_LEVELS_FILE")
        log_file = os.getenv("DUNGEON_LOG_FILE")

        return cls(
            player_name=os.getenv("DUNGEON_PLAYER_NAME", cls.player_name),
            seed=int(seed) if seed else None,
            unlock_delay=float(os.getenv("DUNGEON_UNLOCK_DELAY", str(cls.unlock_delay))),
            levels_file=Path(levels_file) if levels_file else None,
            log_level=os.getenv("DUNGEON_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=os.getenv("DUNGEON_JSON_LOGS", "").lower()
            in ("true", "1", "yes"),
            hash_names=os.getenv("DUNGEON_HASH_NAMES", "true").lower()
            not in ("false", "0", "no"),
        )

    def rules(self) -> Rules:
        """Default game rules with the configured unlock pause."""
        if self.unlock_delay == DEFAULT_RULES.unlock_delay:
            return DEFAULT_RULES
        return Rules(unlock_delay=max(0.0, self.unlock_delay))
