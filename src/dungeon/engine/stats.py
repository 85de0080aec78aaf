"""Bounded stat arithmetic for the player."""

from dataclasses import dataclass

from .rules import DEFAULT_RULES, Rules


@dataclass
class StatBlock:
    """Health, combat and experience counters.

    All mutators ignore non-positive input instead of raising.
    """

    health: int
    max_health: int
    power: int
    defense: int
    experience: int = 0
    experience_to_next: int = 100
    rooms_explored: int = 0
    enemies_defeated: int = 0
    treasures_found: int = 0
    rules: Rules = DEFAULT_RULES

    @classmethod
    def from_rules(cls, rules: Rules = DEFAULT_RULES) -> "StatBlock":
        max_health = max(1, rules.initial_health)
        return cls(
            health=max_health,
            max_health=max_health,
            power=rules.initial_power,
            defense=rules.initial_defense,
            experience_to_next=rules.initial_experience_to_next,
            rules=rules,
        )

    # --- health ---

    def reduce_health(self, amount: int) -> None:
        if amount > 0:
            self.health = max(0, self.health - amount)

    def heal(self, amount: int) -> int:
        """Heal up to max_health and return the amount actually restored."""
        if amount <= 0:
            return 0
        before = self.health
        self.health = min(self.max_health, self.health + amount)
        return self.health - before

    def full_heal(self) -> None:
        self.health = self.max_health

    def is_critical(self) -> bool:
        return self.health <= self.max_health * self.rules.critical_health_ratio

    @property
    def health_percentage(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return self.health / self.max_health * 100

    # --- growth ---

    def increase_max_health(self, amount: int) -> None:
        """Raise max_health; current health rises by the same amount."""
        if amount > 0:
            self.max_health += amount
            self.health += amount

    def increase_power(self, amount: int) -> None:
        if amount > 0:
            self.power += amount

    def increase_defense(self, amount: int) -> None:
        if amount > 0:
            self.defense += amount

    def add_experience(self, amount: int) -> bool:
        """Accumulate experience. Returns True when a level-up happened.

        At most one level-up is applied per call, even when ``amount`` would
        cross several thresholds; the surplus stays in ``experience``.
        """
        if amount <= 0:
            return False
        self.experience += amount
        if self.experience < self.experience_to_next:
            return False
        self.experience -= self.experience_to_next
        self.experience_to_next = int(
            self.experience_to_next * self.rules.level_experience_multiplier
        )
        self.increase_max_health(self.rules.level_up_health_bonus)
        self.increase_power(self.rules.level_up_power_bonus)
        self.increase_defense(self.rules.level_up_defense_bonus)
        return True

    # --- game counters ---

    def record_room_explored(self) -> bool:
        self.rooms_explored += 1
        return self.add_experience(self.rules.experience_per_room)

    def record_enemy_defeated(self) -> bool:
        self.enemies_defeated += 1
        return self.add_experience(self.rules.experience_per_enemy)

    def record_treasure_found(self) -> bool:
        self.treasures_found += 1
        return self.add_experience(self.rules.experience_per_treasure)

    def summary(self) -> list[str]:
        return [
            f"Power: {self.power}",
            f"Defense: {self.defense}",
            f"Experience: {self.experience}/{self.experience_to_next}",
            f"Rooms explored: {self.rooms_explored}",
            f"Enemies defeated: {self.enemies_defeated}",
            f"Treasures found: {self.treasures_found}",
        ]
