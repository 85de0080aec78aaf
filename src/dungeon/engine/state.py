"""Mutable per-game state and tier progression."""

from dataclasses import dataclass
from enum import Enum

from ..logging import bind_game_context, get_logger
from .actor import Actor, ActorState, Tier
from .loader import Campaign, build_map
from .rooms import Room
from .rules import DEFAULT_RULES, Rules
from .world import GameMap

logger = get_logger(__name__)


class GameStatus(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"
    VICTORY = "victory"
    QUIT = "quit"


@dataclass
class GameState:
    """One player's game: the actor, the map of their current tier, and counters."""

    actor: Actor
    game_map: GameMap
    status: GameStatus = GameStatus.PLAYING
    turns: int = 0

    @property
    def is_finished(self) -> bool:
        return self.status is not GameStatus.PLAYING

    @property
    def tier(self) -> Tier:
        return self.actor.tier

    def current_room(self) -> Room | None:
        pos = self.actor.position
        return self.game_map.room_at(pos.x, pos.y)


def new_game_state(
    campaign: Campaign, name: str = "", rules: Rules = DEFAULT_RULES
) -> GameState:
    """Create a player at the start of the first tier."""
    level = campaign.first
    actor = Actor(name=name, rules=rules, tier=level.tier)
    actor.move_to(level.start.x, level.start.y)
    state = GameState(actor=actor, game_map=build_map(level, rules))
    logger.info("game_started", player=actor.name, level=level.name)
    return state


def advance_level(campaign: Campaign, state: GameState) -> list[str]:
    """Move the player up one tier onto a freshly built map."""
    actor = state.actor
    finished = campaign.level(actor.tier)
    if not actor.advance_tier():
        return []

    level = campaign.level(actor.tier)
    actor.stats.full_heal()
    actor.state = ActorState.ACTIVE
    state.game_map = build_map(level, actor.rules)
    actor.move_to(level.start.x, level.start.y)
    bind_game_context(tier=actor.tier)
    logger.info(
        "level_advanced",
        player=actor.name,
        tier=actor.tier,
        level=level.name,
        turns=state.turns,
    )
    lines = [
        f"You have completed the {finished.tier.label} tier!",
        f"Congratulations! You are now a {actor.tier.label} developer.",
        f"Your power rises to {actor.stats.power} and your health is fully restored.",
        f"Welcome to {level.name}.",
    ]
    if level.description:
        lines.append(level.description)
    return lines
