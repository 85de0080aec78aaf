"""The player character."""

import uuid
from dataclasses import dataclass, field
from enum import Enum

from .inventory import Inventory
from .items import Item
from .rules import DEFAULT_RULES, Rules
from .stats import StatBlock

DEFAULT_NAME = "Developer"


class Tier(Enum):
    """Difficulty tiers, in progression order."""

    TRAINEE = 1
    JUNIOR = 2
    SENIOR = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def next(self) -> "Tier | None":
        members = list(Tier)
        index = members.index(self)
        return members[index + 1] if index + 1 < len(members) else None


class ActorState(Enum):
    ACTIVE = "active"
    IN_COMBAT = "in_combat"
    RESTING = "resting"
    DEAD = "dead"
    LEVEL_TRANSITION = "level_transition"


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass
class Actor:
    """Stats, inventory, position and state of the player."""

    name: str = DEFAULT_NAME
    rules: Rules = DEFAULT_RULES
    tier: Tier = Tier.TRAINEE
    state: ActorState = ActorState.ACTIVE
    position: Position = Position(1, 1)
    stats: StatBlock = field(init=False)
    inventory: Inventory = field(init=False)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip() or DEFAULT_NAME
        self.stats = StatBlock.from_rules(self.rules)
        self.inventory = Inventory(self.rules.inventory_capacity)

    def is_alive(self) -> bool:
        return self.stats.health > 0 and self.state is not ActorState.DEAD

    def can_move(self) -> bool:
        return self.is_alive() and self.state is ActorState.ACTIVE

    def can_interact(self) -> bool:
        return self.is_alive() and self.state in (
            ActorState.ACTIVE,
            ActorState.IN_COMBAT,
        )

    def take_damage(self, damage: int) -> int:
        """Apply ``damage`` reduced by defense (minimum 1). Returns damage taken."""
        if damage <= 0:
            return 0
        actual = max(1, damage - self.stats.defense)
        self.stats.reduce_health(actual)
        if self.stats.health <= 0:
            self.state = ActorState.DEAD
        return actual

    def heal(self, amount: int) -> int:
        return self.stats.heal(amount)

    def add_to_inventory(self, item: Item) -> bool:
        return self.inventory.add_item(item)

    def has_item(self, name: str) -> bool:
        return self.inventory.has_item(name)

    def remove_item(self, name: str) -> bool:
        return self.inventory.remove_item(name)

    def move_to(self, x: int, y: int) -> None:
        self.position = Position(x, y)

    def advance_tier(self) -> bool:
        """Move up one tier, gaining power. False when already at the top."""
        nxt = self.tier.next
        if nxt is None:
            return False
        self.tier = nxt
        self.stats.increase_power(self.rules.tier_up_power_bonus)
        return True

    def status_lines(self) -> list[str]:
        stats = self.stats
        return [
            f"Player: {self.name} ({self.tier.label})",
            f"Health: {stats.health}/{stats.max_health}",
            f"Power: {stats.power}",
            f"Defense: {stats.defense}",
            f"Experience: {stats.experience}/{stats.experience_to_next}",
            f"Position: {self.position}",
            f"Inventory: {self.inventory.size}/{self.inventory.capacity} items",
        ]
