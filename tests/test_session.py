"""Tests for configuration, logging and the console loop."""

import io
import json
from pathlib import Path

import structlog

from dungeon.config import Config
from dungeon.console import run
from dungeon.engine.actor import Tier
from dungeon.engine.state import GameStatus
from dungeon.logging import (
    bind_game_context,
    clear_game_context,
    configure_logging,
    enum_value_processor,
    get_logger,
    hash_player_processor,
)
from dungeon.session import DungeonSession


def test_config_defaults(monkeypatch):
    for name in (
        "DUNGEON_PLAYER_NAME",
        "DUNGEON_SEED",
        "DUNGEON_UNLOCK_DELAY",
        "DUNGEON_LEVELS_FILE",
        "DUNGEON_LOG_LEVEL",
        "DUNGEON_LOG_FILE",
        "DUNGEON_JSON_LOGS",
        "DUNGEON_HASH_NAMES",
    ):
        monkeypatch.delenv(name, raising=False)
    config = Config.from_env()
    assert config.player_name == ""
    assert config.seed is None
    assert config.log_level == "WARNING"
    assert not config.json_logs
    assert config.hash_names
    assert config.rules().unlock_delay == 0.0


def test_config_from_env(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("DUNGEON_PLAYER_NAME", "Grace")
    monkeypatch.setenv("DUNGEON_SEED", "7")
    monkeypatch.setenv("DUNGEON_UNLOCK_DELAY", "0.5")
    monkeypatch.setenv("DUNGEON_LOG_FILE", str(tmp_path / "game.log"))
    monkeypatch.setenv("DUNGEON_JSON_LOGS", "true")
    monkeypatch.setenv("DUNGEON_HASH_NAMES", "false")
    config = Config.from_env()
    assert config.player_name == "Grace"
    assert config.seed == 7
    assert config.log_file == tmp_path / "game.log"
    assert config.json_logs
    assert not config.hash_names
    assert config.rules().unlock_delay == 0.5


def test_hash_player_processor():
    event = hash_player_processor(None, "info", {"event": "x", "player": "Ada"})
    assert "player" not in event
    assert len(event["player_hash"]) == 12

    untouched = hash_player_processor(None, "info", {"event": "x"})
    assert untouched == {"event": "x"}


def test_enum_values_are_logged_by_name():
    event = enum_value_processor(None, "info", {"event": "x", "tier": Tier.JUNIOR, "turns": 3})
    assert event == {"event": "x", "tier": "junior", "turns": 3}


def test_json_logs_carry_game_context():
    stream = io.StringIO()
    configure_logging(log_level="INFO", json_logs=True, stream=stream)
    try:
        bind_game_context(game_id="abc12345", tier=Tier.SENIOR)
        get_logger("tests").info("door_opened", player="Ada", room="Gate")
        get_logger("tests").debug("too_quiet")
    finally:
        clear_game_context()
        structlog.reset_defaults()

    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["event"] == "door_opened"
    assert record["game_id"] == "abc12345"
    assert record["tier"] == "senior"
    assert record["level"] == "info"
    assert "player" not in record
    assert len(record["player_hash"]) == 12


def test_session_start_uses_config():
    session = DungeonSession.start(Config(player_name="Grace", seed=3))
    assert session.state.actor.name == "Grace"
    assert "Welcome to Dungeon Explorer!" in session.intro()
    assert "Find the Trainee Treasure of Knowledge to advance." in session.intro()


def test_console_plays_until_quit():
    stdin = io.StringIO("Ada\nh\nd\nq\n")
    stdout = io.StringIO()
    session = run(Config(seed=1), stdin, stdout)
    output = stdout.getvalue()
    assert "What is your name, developer?" in output
    assert "Location: Main Hall" in output
    assert "You move east." in output
    assert "Thanks for playing!" in output
    assert session.state.status is GameStatus.QUIT
    assert session.state.actor.name == "Ada"


def test_console_stops_at_end_of_input():
    stdout = io.StringIO()
    session = run(Config(player_name="Bob"), io.StringIO("v\n"), stdout)
    assert "What is your name" not in stdout.getvalue()
    assert "Goodbye!" in stdout.getvalue()
    assert not session.is_finished
