"""Game balance tunables.

A single frozen Rules instance is created at startup and handed to every
constructor that needs a number. Nothing mutates it at runtime.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rules:
    """Every tunable the engine reads."""

    # Player
    initial_health: int = 100
    initial_power: int = 10
    initial_defense: int = 5
    initial_experience_to_next: int = 100
    inventory_capacity: int = 10

    # Leveling curve
    level_experience_multiplier: float = 1.5
    level_up_health_bonus: int = 20
    level_up_power_bonus: int = 5
    level_up_defense_bonus: int = 3
    tier_up_power_bonus: int = 10
    critical_health_ratio: float = 0.25

    # Experience awards
    experience_per_room: int = 10
    experience_per_enemy: int = 25
    experience_per_treasure: int = 15
    experience_per_unlock: int = 30
    experience_for_revisit: int = 5
    experience_for_exploring: int = 5
    experience_for_secret: int = 25

    # Combat
    max_question_attempts: int = 5
    max_combat_turns: int = 10
    victory_heal: int = 10

    # Empty rooms
    max_search_attempts: int = 3
    search_base_chance: float = 0.3
    search_chance_step: float = 0.2
    secret_heal: int = 10
    rest_heal_cap: int = 20

    # Seconds of dramatic pause while a locked door opens (0 disables it)
    unlock_delay: float = 0.0


DEFAULT_RULES = Rules()
