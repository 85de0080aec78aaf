"""Dungeon Explorer: a quiz-combat dungeon crawler for learning to program."""

from . import console
from .config import Config
from .logging import configure_logging, get_logger
from .session import DungeonSession

__all__ = ["main", "Config", "DungeonSession"]


def main() -> None:
    """Entry point for the dungeon application."""
    config = Config.from_env()

    configure_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        json_logs=config.json_logs,
        hash_names=config.hash_names,
    )

    logger = get_logger(__name__)
    logger.info(
        "application_starting",
        seed=config.seed,
        log_level=config.log_level,
    )

    console.run(config)
