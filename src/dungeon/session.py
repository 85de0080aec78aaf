"""Session layer bridging the game engine and the console."""

import random

from .config import Config
from .engine.commands import describe_location, handle_command
from .engine.loader import Campaign, load_campaign
from .engine.state import GameState, new_game_state
from .logging import bind_game_context, get_logger

logger = get_logger(__name__)

WELCOME = """\
Welcome to Dungeon Explorer!
Defeat programming bugs by answering questions, collect the Treasure of
Knowledge on each tier, and rise from Trainee to Senior developer.
Type 'h' for help."""


class DungeonSession:
    """Wraps a loaded Campaign and one player's GameState."""

    def __init__(self, campaign: Campaign, state: GameState):
        self.campaign = campaign
        self.state = state

    @classmethod
    def start(cls, config: Config, name: str | None = None) -> "DungeonSession":
        """Load the levels and create a fresh game for ``name``."""
        if config.seed is not None:
            random.seed(config.seed)
            logger.debug("random_seeded", seed=config.seed)

        campaign = load_campaign(config.levels_file)
        player_name = name if name is not None else config.player_name
        state = new_game_state(campaign, player_name, config.rules())
        bind_game_context(game_id=state.actor.id[:8], tier=state.tier)
        return cls(campaign, state)

    @property
    def is_finished(self) -> bool:
        return self.state.is_finished

    def intro(self) -> str:
        level = self.campaign.level(self.state.tier)
        lines = [WELCOME, "", f"Level: {level.name}"]
        if level.description:
            lines.append(level.description)
        lines.append(f"Find the {level.goal} to advance.")
        lines.append("")
        lines.append(describe_location(self.state))
        return "\n".join(lines)

    def process_command(self, raw_input: str) -> str:
        """Delegate to the engine and return response text."""
        return handle_command(self.campaign, self.state, raw_input)
