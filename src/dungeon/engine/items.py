"""Inventory items: healing treasures and keys.

Every item shares one usage pipeline (``Item.use``); the type-specific effect
is picked with a ``match`` on the concrete item type.
"""

import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..logging import get_logger
from .outcome import Kind, Outcome

if TYPE_CHECKING:
    from .actor import Actor

logger = get_logger(__name__)

UNLIMITED_USES = -1


class ObjectType(Enum):
    TREASURE = 1
    KEY = 2
    TOOL = 3
    WEAPON = 4
    CONSUMABLE = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Rarity(Enum):
    COMMON = 1
    UNCOMMON = 2
    RARE = 3
    EPIC = 4
    LEGENDARY = 5

    @property
    def symbol(self) -> str:
        return {1: "(C)", 2: "(U)", 3: "(R)", 4: "(E)", 5: "(L)"}[self.value]


class TreasureEffect(Enum):
    NONE = "No special effect"
    POWER_BOOST = "Raises power"
    DEFENSE_BOOST = "Raises defense"
    EXPERIENCE_BONUS = "Grants bonus experience"
    FULL_RESTORE = "Full restore"
    LUCK_BLESSING = "Blessing of luck"


class KeyType(Enum):
    """Key subtypes: (base power, unlock success chance)."""

    STANDARD = (10, 1.0)
    MASTER = (50, 1.0)
    MAGICAL = (25, 0.9)
    ANCIENT = (30, 0.95)
    SKELETON = (15, 0.8)

    @property
    def base_power(self) -> int:
        return self.value[0]

    @property
    def success_chance(self) -> float:
        return self.value[1]


@dataclass(eq=False)
class Item:
    """Fields and usage bookkeeping shared by every item.

    ``max_usages`` of -1 means unlimited; 0 or 1 means a single use.
    Items compare by identity.
    """

    name: str
    description: str = ""
    value: int = 0
    rarity: Rarity = Rarity.COMMON
    consumable: bool = True
    max_usages: int = 1
    used: bool = False
    usage_count: int = 0
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    object_type = ObjectType.TREASURE
    # Whether using the item from the inventory counts against its uses
    spent_on_use = True

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip() or "Unnamed Item"
        self.description = (self.description or "").strip() or "No description."
        self.value = max(0, self.value)

    def can_be_used(self) -> bool:
        if self.used and self.consumable:
            return False
        if self.max_usages > 0 and self.usage_count >= self.max_usages:
            return False
        return True

    def should_be_consumed(self) -> bool:
        if not self.consumable:
            return False
        if self.max_usages > 0:
            return self.usage_count >= self.max_usages
        return True

    @property
    def remaining_uses(self) -> int | None:
        """Uses left, or None when unlimited."""
        if self.max_usages < 0:
            return None
        return max(0, self.max_usages - self.usage_count)

    def reset(self) -> None:
        self.used = False
        self.usage_count = 0

    def use(self, actor: "Actor") -> Outcome:
        """Apply the item's effect to ``actor``.

        Failed effects leave the usage counter untouched.
        """
        if not self.can_be_used():
            return Outcome.fail(self._cannot_use_message())

        lines: list[str] = []
        match self:
            case Treasure():
                success = self._treasure_effect(actor, lines)
            case Key():
                success = self._key_effect(actor, lines)
            case _:
                success = False

        if not success:
            logger.debug("item_use_failed", item=self.name)
            return Outcome.fail(f"Could not use {self.name}.", lines)

        self._on_successful_use(actor, lines)
        if not self.spent_on_use:
            logger.debug("item_inspected", item=self.name)
            return Outcome.ok(f"{self.name} used.", Kind.USE, lines)
        self.usage_count += 1
        if self.should_be_consumed():
            self.used = True
            lines.append(f"{self.name} has been consumed.")
        logger.debug("item_used", item=self.name, consumed=self.used)
        return Outcome.ok(f"{self.name} used.", Kind.USE, lines)

    def _cannot_use_message(self) -> str:
        if self.used:
            return f"{self.name} has already been used."
        if self.max_usages > 0 and self.usage_count >= self.max_usages:
            return f"{self.name} has reached its usage limit."
        return f"{self.name} cannot be used right now."

    def _on_successful_use(self, actor: "Actor", lines: list[str]) -> None:
        pass

    def detailed_info(self) -> list[str]:
        if self.max_usages > 0:
            uses = f"Uses: {self.usage_count}/{self.max_usages}"
        elif self.max_usages == 0:
            uses = "Single use"
        else:
            uses = "Unlimited uses"
        return [
            self.name,
            self.description,
            f"Type: {self.object_type.label}",
            f"Rarity: {self.rarity.symbol} {self.rarity.name.capitalize()}",
            f"Value: {self.value}",
            f"Consumable: {'yes' if self.consumable else 'no'}",
            uses,
        ]

    def __str__(self) -> str:
        return f"{self.rarity.symbol} {self.name} [{self.object_type.label}]"


@dataclass(eq=False)
class Treasure(Item):
    """A consumable that heals and may carry one secondary effect."""

    healing_power: int = 10
    can_overheal: bool = False
    effect: TreasureEffect = TreasureEffect.NONE

    object_type = ObjectType.TREASURE

    def __post_init__(self) -> None:
        self.healing_power = max(1, self.healing_power)
        if not self.value:
            self.value = self.healing_power
        super().__post_init__()

    def _treasure_effect(self, actor: "Actor", lines: list[str]) -> bool:
        stats = actor.stats
        if not actor.is_alive():
            return False
        if not self.can_overheal and stats.health >= stats.max_health:
            lines.append("Your health is already at its maximum.")
            return False

        if self.can_overheal:
            bonus = self.healing_power // 2
            stats.increase_max_health(bonus)
            healed = bonus + stats.heal(self.healing_power)
        else:
            healed = stats.heal(self.healing_power)
        lines.append(f"{self.name} restores {healed} health.")

        match self.effect:
            case TreasureEffect.POWER_BOOST:
                stats.increase_power(5)
                lines.append("Your power has increased!")
            case TreasureEffect.DEFENSE_BOOST:
                stats.increase_defense(3)
                lines.append("Your defense has increased!")
            case TreasureEffect.EXPERIENCE_BONUS:
                stats.add_experience(50)
                lines.append("You gain bonus experience!")
            case TreasureEffect.FULL_RESTORE:
                stats.full_heal()
                lines.append("Full restore!")
            case TreasureEffect.LUCK_BLESSING:
                lines.append("You feel a blessing of luck.")
        return True

    def _on_successful_use(self, actor: "Actor", lines: list[str]) -> None:
        actor.stats.record_treasure_found()
        if self.rarity is Rarity.LEGENDARY:
            lines.append("You used a legendary treasure. This moment will be remembered.")

    def effectiveness(self, actor: "Actor") -> float:
        """Fraction of the healing power that would actually land."""
        stats = actor.stats
        if not actor.is_alive():
            return 0.0
        if not self.can_overheal and stats.health >= stats.max_health:
            return 0.0
        potential = min(self.healing_power, stats.max_health - stats.health)
        return potential / self.healing_power


@dataclass
class UnlockResult:
    success: bool
    message: str
    key: "Key | None" = None


@dataclass(eq=False)
class Key(Item):
    """Opens the doors named in ``targets``."""

    key_type: KeyType = KeyType.STANDARD
    targets: frozenset[str] = frozenset()
    single_use: bool = True

    object_type = ObjectType.KEY
    # Only a successful unlock wears a key out
    spent_on_use = False

    def __post_init__(self) -> None:
        self.targets = frozenset(self.targets)
        self.consumable = self.single_use
        self.max_usages = 1 if self.single_use else UNLIMITED_USES
        super().__post_init__()

    @property
    def unlock_power(self) -> int:
        return self.key_type.base_power * max(1, len(self.targets))

    def can_unlock(self, target: str | None) -> bool:
        if not target or not target.strip():
            return False
        if target in self.targets:
            return True
        if self.key_type is KeyType.MASTER:
            wanted = target.lower()
            return any(
                wanted in known.lower() or known.lower() in wanted
                for known in self.targets
            )
        return False

    def attempt_unlock(self, target: str, actor: "Actor | None") -> UnlockResult:
        """Try to open ``target``.

        A failed roll consumes nothing, so the key can be tried again.
        """
        if not self.can_unlock(target):
            return UnlockResult(False, f"This key cannot unlock: {target}", self)
        if not self.can_be_used():
            return UnlockResult(False, "This key can no longer be used.", self)

        if random.random() >= self.key_type.success_chance:
            logger.info("unlock_failed", key=self.name, target=target)
            return UnlockResult(False, f"Failed to unlock: {target}", self)

        if self.single_use:
            self.usage_count += 1
            self.used = True
            if actor is not None:
                actor.inventory.remove_item(self)
        if actor is not None:
            actor.stats.add_experience(self.unlock_power * 2)
        logger.info("unlock_succeeded", key=self.name, target=target)
        return UnlockResult(True, self._success_message(target), self)

    def _success_message(self, target: str) -> str:
        match self.key_type:
            case KeyType.MASTER:
                return f"The master key {self.name} unlocks {target} with authority."
            case KeyType.MAGICAL:
                return f"{self.name} glows and {target} opens by magic."
            case KeyType.ANCIENT:
                return f"The ancient mechanisms of {target} recognise {self.name}."
            case KeyType.SKELETON:
                return f"{self.name} deftly works the mechanisms of {target}."
            case _:
                return f"{self.name} opens {target} without trouble."

    def _key_effect(self, actor: "Actor", lines: list[str]) -> bool:
        # Keys do nothing on their own; doors check for them.
        lines.append(f"{self.name} is ready to use.")
        lines.append(f"It can unlock: {', '.join(sorted(self.targets)) or 'nothing'}")
        if self.key_type is KeyType.MASTER:
            lines.append("This is a master key with special powers.")
        return True

    def _on_successful_use(self, actor: "Actor", lines: list[str]) -> None:
        lines.append(f"{self.name} is prepared to open locks.")


# --- presets ---


def git_treasure() -> Treasure:
    return Treasure(
        "Git - Version Control",
        "The essential version control tool. Lets you go back when everything breaks.",
        healing_power=25,
        rarity=Rarity.UNCOMMON,
        effect=TreasureEffect.EXPERIENCE_BONUS,
    )


def intellij_treasure() -> Treasure:
    return Treasure(
        "IntelliJ IDEA",
        "The IDE that makes programming a pleasure. Magic autocomplete included.",
        healing_power=30,
        rarity=Rarity.RARE,
        effect=TreasureEffect.POWER_BOOST,
    )


def maven_treasure() -> Treasure:
    return Treasure(
        "Maven",
        "Dependency management without the headache.",
        healing_power=20,
    )


def docker_treasure() -> Treasure:
    return Treasure(
        "Docker",
        "Containers that run anywhere. 'Works on my machine' is no excuse anymore.",
        healing_power=35,
        rarity=Rarity.EPIC,
        effect=TreasureEffect.DEFENSE_BOOST,
    )


def stack_overflow_treasure() -> Treasure:
    return Treasure(
        "Stack Overflow",
        "The source of all wisdom. Someone already had your problem.",
        healing_power=50,
        rarity=Rarity.LEGENDARY,
        can_overheal=True,
        effect=TreasureEffect.FULL_RESTORE,
    )


def coffee_treasure() -> Treasure:
    return Treasure(
        "Premium Coffee",
        "Developer fuel. Nothing works without it.",
        healing_power=15,
        effect=TreasureEffect.LUCK_BLESSING,
    )


def secret_key() -> Key:
    return Key(
        "Secret Key",
        "An old key glowing with ancestral wisdom.",
        rarity=Rarity.UNCOMMON,
        key_type=KeyType.ANCIENT,
        targets=frozenset({"Secret Room", "Secret Door"}),
    )


def knowledge_key() -> Key:
    return Key(
        "Key of Knowledge",
        "The key that opens the doors of understanding.",
        rarity=Rarity.EPIC,
        key_type=KeyType.MASTER,
        targets=frozenset({"Door of Knowledge", "Sanctum of Learning"}),
    )


def snippet_key() -> Key:
    return Key(
        "Snippet Key",
        "A key holding fragments of powerful code.",
        rarity=Rarity.RARE,
        key_type=KeyType.MAGICAL,
        targets=frozenset({"Snippet Door", "Code Room"}),
        single_use=False,
    )


def master_key() -> Key:
    return Key(
        "Master Key",
        "A key that can open any lock.",
        rarity=Rarity.LEGENDARY,
        key_type=KeyType.MASTER,
        targets=frozenset({"Any Door", "Universal Access"}),
        single_use=False,
    )


def debug_key() -> Key:
    return Key(
        "Debug Key",
        "Grants access to secret debugging areas.",
        rarity=Rarity.RARE,
        key_type=KeyType.SKELETON,
        targets=frozenset({"Debug Console", "Developer Mode"}),
    )


PRESETS = {
    "git": git_treasure,
    "intellij": intellij_treasure,
    "maven": maven_treasure,
    "docker": docker_treasure,
    "stack_overflow": stack_overflow_treasure,
    "coffee": coffee_treasure,
    "secret_key": secret_key,
    "knowledge_key": knowledge_key,
    "snippet_key": snippet_key,
    "master_key": master_key,
    "debug_key": debug_key,
}
