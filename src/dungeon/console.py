"""Interactive terminal loop."""

import sys
from typing import TextIO

from .config import Config
from .logging import clear_game_context, get_logger
from .session import DungeonSession

logger = get_logger(__name__)

PROMPT = "> "


def _read_line(stdin: TextIO, stdout: TextIO, prompt: str) -> str | None:
    stdout.write(prompt)
    stdout.flush()
    line = stdin.readline()
    if not line:
        return None
    return line.rstrip("\n")


def run(
    config: Config,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> DungeonSession:
    """Play one game on the given streams until it ends or input runs out."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    name = config.player_name
    if not name:
        name = (_read_line(stdin, stdout, "What is your name, developer? ") or "").strip()

    session = DungeonSession.start(config, name)
    print(session.intro(), file=stdout)

    try:
        while not session.is_finished:
            line = _read_line(stdin, stdout, PROMPT)
            if line is None:
                print("\nGoodbye!", file=stdout)
                break
            print(session.process_command(line), file=stdout)
    except KeyboardInterrupt:
        print("\nGoodbye!", file=stdout)

    logger.info(
        "session_ended",
        player=session.state.actor.name,
        status=session.state.status.value,
        turns=session.state.turns,
    )
    clear_game_context()
    return session
