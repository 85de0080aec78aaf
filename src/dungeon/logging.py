"""Structured logging for Dungeon Explorer.

stdout belongs to the game text, so log lines go to stderr (or a file).
Every event logged during a game carries the game id and the player's tier
once ``bind_game_context`` has been called.
"""

import hashlib
import sys
from enum import Enum
from pathlib import Path
from typing import Any, TextIO

import structlog

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}


def hash_player_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace the ``player`` name with a short stable hash."""
    name = event_dict.pop("player", None)
    if name:
        event_dict["player_hash"] = hashlib.sha256(str(name).encode()).hexdigest()[:12]
    return event_dict


def enum_value_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Log enum members (tiers, states, outcomes) by name."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.name.lower()
    return event_dict


def configure_logging(
    log_level: str = "WARNING",
    log_file: Path | None = None,
    json_logs: bool = False,
    hash_names: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog once at startup."""
    if stream is None:
        stream = open(log_file, "a", encoding="utf-8") if log_file else sys.stderr

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        enum_value_processor,
    ]
    if hash_names:
        processors.append(hash_player_processor)

    if json_logs:
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=stream.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            _LEVELS.get(log_level.upper(), _LEVELS["WARNING"])
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def bind_game_context(**values: Any) -> None:
    """Attach values (game id, tier) to every following log event."""
    structlog.contextvars.bind_contextvars(**values)


def clear_game_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance for a module."""
    return structlog.get_logger(name)
