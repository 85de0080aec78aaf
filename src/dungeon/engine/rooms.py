"""Rooms and the interaction pipeline.

A Room carries the fields every room shares plus one payload describing what
kind of room it is. ``interact`` runs the same steps for every room and
dispatches on the payload for the room-specific part:

    can interact? -> first / repeat visit hook -> payload interaction -> done

Enemy rooms never block on input. Each interaction presents one question and
leaves it pending; ``answer_lair`` (or ``Decisions.answer``) resolves it.
"""

import random
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..logging import get_logger
from .actor import Actor, ActorState, Position
from .combat import CombatType, Enemy, Question
from .items import Item
from .outcome import Kind, Outcome
from .world import Direction

logger = get_logger(__name__)


class RoomKind(Enum):
    EMPTY = "Empty room"
    TREASURE = "Treasure room"
    ENEMY = "Enemy room"
    LOCKED = "Locked room"
    SECRET = "Secret room"


@dataclass
class Decisions:
    """Choices the player made up front for this interaction."""

    search: bool = False
    rest: bool = False
    answer: str | None = None


# --- payloads ---


@dataclass
class EmptyArea:
    has_secret: bool = False
    secret_revealed: bool = False
    search_attempts: int = 0
    flavor: list[str] = field(default_factory=list)
    ambience: list[str] = field(default_factory=list)


@dataclass
class TreasureCache:
    items: list[Item] = field(default_factory=list)
    # Names, not identities: two items sharing a name count as one collectible
    collected: set[str] = field(default_factory=set)

    def available(self) -> list[Item]:
        return [item for item in self.items if item.name not in self.collected]


@dataclass(eq=False)
class EnemyLair:
    enemy: Enemy
    respawn: bool = False
    combat_active: bool = False
    enemy_defeated: bool = False
    turns: int = 0
    pending: Question | None = None


@dataclass(eq=False)
class LockedGate:
    required_key: str
    inner: "Room | None" = None
    unlocked: bool = False


Payload = EmptyArea | TreasureCache | EnemyLair | LockedGate

_KIND_BY_PAYLOAD = {
    EmptyArea: RoomKind.EMPTY,
    TreasureCache: RoomKind.TREASURE,
    EnemyLair: RoomKind.ENEMY,
    LockedGate: RoomKind.LOCKED,
}


@dataclass(eq=False)
class Room:
    name: str
    description: str = ""
    payload: Payload = field(default_factory=EmptyArea)
    kind: RoomKind | None = None
    visited: bool = False
    accessible: bool = True
    visit_count: int = 0
    exits: dict[Direction, Position] = field(default_factory=dict)
    id: str = field(default_factory=lambda: f"room-{uuid.uuid4().hex[:8]}")

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip() or "Unnamed Room"
        self.description = (self.description or "").strip() or "A mysterious room."
        if self.kind is None:
            self.kind = _KIND_BY_PAYLOAD[type(self.payload)]

    def __str__(self) -> str:
        seen = "visited" if self.visited else "not visited"
        return f"{self.kind.value}[{self.name}] - {seen}"

    def mark_visited(self) -> None:
        self.visited = True
        self.visit_count += 1

    def reset(self) -> None:
        self.visited = False
        self.visit_count = 0
        self.accessible = True

    def detailed_info(self) -> list[str]:
        lines = [
            self.name,
            self.description,
            f"Type: {self.kind.value}",
            f"Visited: {'yes' if self.visited else 'no'} ({self.visit_count} visits)",
            f"Exits: {', '.join(d.label for d in self.exits) or 'none'}",
        ]
        match self.payload:
            case EmptyArea(has_secret=True, secret_revealed=revealed, search_attempts=tries):
                lines.append(f"Secret revealed: {'yes' if revealed else 'no'} ({tries} searches)")
            case TreasureCache() as cache:
                lines.append(f"Treasures left: {len(cache.available())}/{len(cache.items)}")
            case EnemyLair() as lair:
                lines.append(f"Enemy: {lair.enemy.name}")
                lines.append(f"Defeated: {'yes' if lair.enemy_defeated else 'no'}")
                lines.append(f"Respawns: {'yes' if lair.respawn else 'no'}")
            case LockedGate() as gate:
                lines.append(f"Requires: {gate.required_key}")
                lines.append(f"Unlocked: {'yes' if gate.unlocked else 'no'}")
        return lines


# --- flavor ---

SECRET_MESSAGES = (
    "You find a note with a valuable programming tip!",
    "You discover an elegant code fragment written on the wall!",
    "You find a motivational message from a previous developer!",
    "You find a reference to a useful design pattern!",
    "You discover a hint about clean code best practices!",
    "You find an easter egg left by the system architect!",
    "You find a message about the importance of unit tests!",
    "You discover a reflection on how software development evolves!",
)

DEFAULT_FLAVOR = (
    "The silence here feels different, as if algorithms were whispering secrets.",
    "This room smells like long debugging sessions.",
    "You can feel the presence of code that once lived here.",
    "The walls seem to hold memories of epic refactorings.",
    "There is something comforting about the simplicity of this space.",
    "The air hums with the energy of unexplored possibilities.",
    "This place reminds you that sometimes less is more.",
    "You feel something important happened here, but you can't recall what.",
)

DEFAULT_AMBIENCE = (
    "dust floating in beams of light",
    "distant echoes of activity",
    "the soft hum of faraway servers",
    "cables snaking across the floor",
    "abandoned programming books",
    "empty, forgotten coffee mugs",
    "Post-it notes with scribbled code",
    "the ghost of commits past",
)

KEY_HINTS = {
    "Secret Key": "Hint: secret keys are usually kept in treasure rooms.",
    "Key of Knowledge": "Hint: knowledge is earned by overcoming challenges.",
    "Junior Key of Knowledge": "Hint: true treasures reveal keys of knowledge.",
    "Snippet Key": "Hint: code fragments turn up in unexpected places.",
}
DEFAULT_KEY_HINT = "Hint: explore every room and defeat the enemies."


# --- pipeline ---


def can_interact(room: Room, actor: Actor | None) -> bool:
    return room.accessible and actor is not None and actor.can_interact()


def interact(room: Room, actor: Actor | None, decisions: Decisions | None = None) -> Outcome:
    """Run one interaction between ``actor`` and ``room``."""
    if not can_interact(room, actor):
        if not room.accessible:
            return Outcome.fail("This room is not available right now.")
        return Outcome.fail("You cannot interact in your current state.")

    decisions = decisions or Decisions()
    lines: list[str] = []
    if not room.visited:
        lines.extend(_first_visit(room, actor))
        room.mark_visited()
        actor.stats.record_room_explored()
    else:
        lines.extend(_subsequent_visit(room, actor))

    match room.payload:
        case EmptyArea() as area:
            outcome = _explore_empty(room, area, actor, decisions)
        case TreasureCache() as cache:
            outcome = _loot_treasure(cache, actor)
        case EnemyLair() as lair:
            outcome = _engage_lair(room, lair, actor, decisions)
        case LockedGate() as gate:
            outcome = _open_gate(room, gate, actor, decisions)
        case _:
            logger.error("unknown_room_payload", room=room.name)
            outcome = Outcome.fail("Nothing happens.")

    outcome.lines[:0] = lines
    _on_complete(room, actor, outcome)
    return outcome


def _first_visit(room: Room, actor: Actor) -> list[str]:
    lines = [f"First time exploring: {room.name}"]
    match room.payload:
        case EmptyArea():
            lines.append("You cautiously enter this seemingly empty room...")
        case TreasureCache():
            lines.append("You enter a room glittering with the promise of treasure...")
        case EnemyLair(enemy_defeated=False):
            lines.append("You sense a hostile presence in this room...")
            lines.append("An enemy lurks in the shadows, ready to challenge you.")
        case LockedGate(unlocked=False, required_key=key):
            lines.append("You examine the sealed entrance looking for clues...")
            lines.append(KEY_HINTS.get(key, DEFAULT_KEY_HINT))
    return lines


def _subsequent_visit(room: Room, actor: Actor) -> list[str]:
    lines = [f"You have returned to: {room.name}"]
    match room.payload:
        case EmptyArea(secret_revealed=True):
            lines.append("The secret you found still echoes in your mind.")
        case EmptyArea(has_secret=True):
            lines.append("You still feel there is more to discover here...")
        case TreasureCache() as cache:
            if not cache.collected:
                lines.append("The treasures are still waiting to be found...")
            elif not cache.available():
                lines.append("You have claimed every treasure in this room.")
            else:
                lines.append("There are still treasures to collect here.")
        case EnemyLair(enemy_defeated=True, respawn=False):
            lines.append("This room has already been cleared of bugs.")
        case EnemyLair(enemy_defeated=True):
            lines.append("The enemy might have come back...")
        case EnemyLair():
            lines.append("The enemy is still waiting for a challenger.")
        case LockedGate(unlocked=True):
            lines.append("The door stays open, revealing the secrets behind it.")
        case LockedGate(required_key=key):
            lines.append("The door is still locked, waiting for the right key.")
            if actor.has_item(key):
                lines.append(f"You now have the {key}! Interact again to open the door.")
    return lines


def _on_complete(room: Room, actor: Actor, outcome: Outcome) -> None:
    logger.debug(
        "room_interaction",
        room=room.name,
        kind=room.kind.name,
        success=outcome.success,
        outcome=outcome.kind.value,
    )


def interaction_prompt(room: Room) -> str:
    match room.payload:
        case EmptyArea(has_secret=True, secret_revealed=False):
            return f"Press F to explore {room.name} (there may be secrets)"
        case TreasureCache() as cache if cache.available():
            return f"Press F to explore {room.name} ({len(cache.available())} treasure(s) available)"
        case EnemyLair(combat_active=True, enemy=enemy):
            return f"Combat in progress with {enemy.name}"
        case EnemyLair(enemy_defeated=True, respawn=False):
            return f"Press F to examine {room.name} (enemy defeated)"
        case EnemyLair(enemy=enemy):
            return f"Press F to face {enemy.name} in {room.name}"
        case LockedGate(unlocked=True):
            return f"Press F to explore {room.name} (UNLOCKED)"
        case LockedGate(required_key=key):
            return f"Press F to examine {room.name} (requires: {key})"
    return f"Press F to explore {room.name}"


# --- empty rooms ---


def _explore_empty(room: Room, area: EmptyArea, actor: Actor, decisions: Decisions) -> Outcome:
    rules = actor.rules
    stats = actor.stats
    lines = [room.description, random.choice(area.flavor or DEFAULT_FLAVOR)]
    if random.random() < 0.5:
        lines.append(f"You notice: {random.choice(area.ambience or DEFAULT_AMBIENCE)}")

    if area.has_secret and not area.secret_revealed:
        lines.append("Something in this room catches your eye...")
        if not decisions.search:
            lines.append("(interact with 'search' to look more closely)")
            return Outcome.ok("You decide it is not worth a closer look for now.", Kind.DIALOGUE, lines)
        area.search_attempts += 1
        lines.append("You search the room carefully...")
        chance = rules.search_base_chance + area.search_attempts * rules.search_chance_step
        if random.random() < chance or area.search_attempts >= rules.max_search_attempts:
            return _reveal_secret(room, area, actor, lines)
        return Outcome.ok(
            "You find nothing special this time. Perhaps with more perseverance...",
            Kind.DIALOGUE,
            lines,
        )

    if stats.health < stats.max_health:
        lines.append("This peaceful room looks like a good place to rest.")
        if not decisions.rest:
            lines.append("(interact with 'rest' to recover)")
            return Outcome.ok("You decide to carry on without resting.", Kind.DIALOGUE, lines)
        healed = actor.heal(min(rules.rest_heal_cap, stats.max_health - stats.health))
        lines.append("You take a moment to rest and reflect...")
        return Outcome.ok(f"You feel rested. You recovered {healed} health.", Kind.HEAL, lines)

    stats.add_experience(rules.experience_for_exploring)
    return Outcome.ok("You have fully explored this area.", Kind.DIALOGUE, lines)


def _reveal_secret(room: Room, area: EmptyArea, actor: Actor, lines: list[str]) -> Outcome:
    rules = actor.rules
    area.secret_revealed = True
    lines.append(random.choice(SECRET_MESSAGES))
    actor.stats.add_experience(rules.experience_for_secret)
    actor.heal(rules.secret_heal)
    logger.info("secret_revealed", room=room.name, searches=area.search_attempts)
    return Outcome.ok(
        f"You discovered a hidden secret! You gain {rules.experience_for_secret} experience.",
        Kind.LOOT,
        lines,
    )


# --- treasure rooms ---


def _loot_treasure(cache: TreasureCache, actor: Actor) -> Outcome:
    if not cache.items:
        return Outcome.ok(
            "This room once held great treasures, but now it is empty.", Kind.DIALOGUE
        )
    if not cache.available():
        return Outcome.ok("There are no more treasures to collect here.", Kind.DIALOGUE)

    lines = ["Available treasures:"]
    for number, item in enumerate(cache.items, start=1):
        status = " (already collected)" if item.name in cache.collected else ""
        lines.append(f"   {number}. {item.rarity.symbol} {item.name} - {item.description}{status}")

    collected = 0
    for item in cache.items:
        if item.name in cache.collected:
            continue
        if actor.inventory.is_full():
            lines.append(f"Your inventory is full. You cannot pick up {item.name}.")
            continue
        if actor.add_to_inventory(item):
            cache.collected.add(item.name)
            actor.stats.record_treasure_found()
            collected += 1
            lines.append(f"You obtained: {item.name}!")

    if not collected:
        return Outcome.fail("You could not collect any treasure this time.", lines)
    logger.info("treasure_collected", count=collected, player=actor.name)
    return Outcome.ok(
        f"You collected {collected} treasure(s)! Your inventory has been updated.",
        Kind.LOOT,
        lines,
    )


# --- enemy rooms ---


def _engage_lair(room: Room, lair: EnemyLair, actor: Actor, decisions: Decisions) -> Outcome:
    enemy = lair.enemy
    if lair.enemy_defeated and not lair.respawn:
        actor.stats.add_experience(actor.rules.experience_for_revisit)
        return Outcome.ok(
            f"You inspected the area where you defeated {enemy.name}.",
            Kind.DIALOGUE,
            [
                f"The remains of {enemy.name} lie defeated here.",
                "You have already proven yourself against this bug.",
            ],
        )

    lines: list[str] = []
    if not lair.combat_active:
        if lair.respawn and lair.enemy_defeated:
            enemy.reset()
            lair.enemy_defeated = False
        result = enemy.start_combat(actor)
        if not result.success:
            return Outcome.fail(f"Could not start combat: {result.message}")
        lair.combat_active = True
        lair.turns = 0
        lair.pending = None
        actor.state = ActorState.IN_COMBAT
        lines.append(f"{enemy.name} blocks your way!")
        lines.extend(result.lines)
        lines.append(f"Enemy health: {enemy.health}/{enemy.max_health}")
        lines.append("Answer to fight, or 'flee' to get away.")

    outcome = _present_question(room, lair, actor)
    outcome.lines[:0] = lines
    if decisions.answer is not None and lair.pending is not None:
        resolved = answer_lair(room, actor, decisions.answer)
        resolved.lines[:0] = outcome.lines
        return resolved
    return outcome


def _present_question(room: Room, lair: EnemyLair, actor: Actor) -> Outcome:
    enemy = lair.enemy
    rules = actor.rules
    if lair.pending is None:
        if lair.turns >= rules.max_combat_turns:
            return _combat_timeout(lair, actor)
        if not enemy.can_continue_combat():
            return _combat_over(room, lair, actor)
        lair.pending = enemy.current_question()
        lair.turns += 1

    lines = [
        f"Turn {lair.turns}/{rules.max_combat_turns}",
        f"{enemy.name} challenges you:",
        *lair.pending.display(),
        "Answer with the letter (A, B, C, D) or type the full answer.",
    ]
    outcome = Outcome.ok(f"{enemy.name} awaits your answer.", Kind.COMBAT, lines)
    outcome.detail["question"] = lair.pending
    return outcome


def continue_combat(room: Room, actor: Actor) -> Outcome:
    """Present the next question of the fight running in ``room``."""
    lair = room.payload
    if not isinstance(lair, EnemyLair) or not lair.combat_active:
        return Outcome.fail("There is no combat in progress here.")
    return _present_question(room, lair, actor)


def answer_lair(room: Room, actor: Actor, raw_answer: str | None) -> Outcome:
    """Resolve the question pending in ``room`` with ``raw_answer``."""
    lair = room.payload
    if not isinstance(lair, EnemyLair) or not lair.combat_active or lair.pending is None:
        return Outcome.fail("There is no question waiting for an answer.")

    question, lair.pending = lair.pending, None
    result = lair.enemy.process_answer(raw_answer, question, actor)
    lines = list(result.lines)

    match result.type:
        case CombatType.ENEMY_DEFEATED:
            outcome = _enemy_defeated(room, lair, actor)
        case CombatType.PLAYER_DEFEATED:
            outcome = _player_defeated(lair)
        case CombatType.ATTEMPTS_EXHAUSTED:
            outcome = _attempts_exhausted(lair, actor)
        case CombatType.DAMAGE_DEALT | CombatType.INCORRECT_ANSWER:
            outcome = Outcome.ok(
                "The fight goes on. Get ready for the next question.", Kind.COMBAT
            )
        case _:
            outcome = _combat_error(room, lair, actor, result.message)

    outcome.lines[:0] = lines
    outcome.detail["combat"] = result
    return outcome


def _enemy_defeated(room: Room, lair: EnemyLair, actor: Actor) -> Outcome:
    lair.enemy_defeated = True
    lair.combat_active = False
    lair.pending = None
    actor.state = ActorState.ACTIVE
    actor.stats.record_enemy_defeated()
    healed = actor.heal(actor.rules.victory_heal)
    logger.info("lair_cleared", room=room.name, enemy=lair.enemy.name)
    return Outcome.ok(
        f"Victory! You defeated {lair.enemy.name}.",
        Kind.COMBAT,
        [
            "Your programming knowledge prevailed over the bug.",
            f"You recover {healed} health.",
        ],
    )


def _player_defeated(lair: EnemyLair) -> Outcome:
    lair.combat_active = False
    lair.pending = None
    return Outcome.fail(
        "You have been defeated in combat.",
        [
            f"You were defeated by {lair.enemy.name}...",
            "But a good developer learns from their mistakes.",
        ],
    )


def _attempts_exhausted(lair: EnemyLair, actor: Actor) -> Outcome:
    lair.combat_active = False
    lair.pending = None
    lair.enemy.reset()
    actor.state = ActorState.ACTIVE
    return Outcome.ok(
        "The combat ended without a clear winner.",
        Kind.COMBAT,
        [
            "You have run out of combat attempts.",
            f"{lair.enemy.name} retreats for now, but it will be back...",
        ],
    )


def _combat_timeout(lair: EnemyLair, actor: Actor) -> Outcome:
    lair.combat_active = False
    lair.pending = None
    lair.enemy.force_end_combat()
    taken = actor.take_damage(lair.enemy.damage // 2)
    if actor.is_alive():
        actor.state = ActorState.ACTIVE
    logger.warning("combat_timeout", enemy=lair.enemy.name, turns=lair.turns)
    return Outcome.fail(
        "The combat ended because it took too long.",
        [
            "The fight has dragged on for too long!",
            f"You make a strategic retreat... (-{taken} HP)",
        ],
    )


def _combat_over(room: Room, lair: EnemyLair, actor: Actor) -> Outcome:
    if lair.enemy.defeated:
        return _enemy_defeated(room, lair, actor)
    if not actor.is_alive():
        return _player_defeated(lair)
    lair.combat_active = False
    lair.enemy.force_end_combat()
    actor.state = ActorState.ACTIVE
    return Outcome.ok(
        "The combat ended in a draw.",
        Kind.COMBAT,
        ["Both fighters withdraw to regroup."],
    )


def _combat_error(room: Room, lair: EnemyLair, actor: Actor, reason: str) -> Outcome:
    logger.error("combat_error", room=room.name, enemy=lair.enemy.name, reason=reason)
    end_combat(room, actor)
    return Outcome.fail("Combat system error.", ["The system is recovering..."])


def end_combat(room: Room, actor: Actor | None = None) -> bool:
    """Force-end any combat running in ``room``. True when one was running."""
    lair = room.payload
    if not isinstance(lair, EnemyLair) or not lair.combat_active:
        return False
    lair.combat_active = False
    lair.pending = None
    lair.enemy.force_end_combat()
    if actor is not None and actor.is_alive():
        actor.state = ActorState.ACTIVE
    return True


def respawn(room: Room) -> bool:
    """Bring the enemy back when the lair respawns or it was never beaten."""
    lair = room.payload
    if not isinstance(lair, EnemyLair):
        return False
    if not (lair.respawn or not lair.enemy_defeated):
        return False
    lair.enemy.reset()
    lair.enemy_defeated = False
    lair.combat_active = False
    lair.pending = None
    lair.turns = 0
    logger.info("enemy_respawned", room=room.name, enemy=lair.enemy.name)
    return True


def is_dangerous(room: Room) -> bool:
    match room.payload:
        case EnemyLair() as lair:
            return not lair.enemy_defeated or (lair.respawn and not lair.combat_active)
        case LockedGate(inner=Room() as inner):
            return is_dangerous(inner)
    return False


def combat_room(room: Room | None) -> Room | None:
    """The room (``room`` itself or the one behind its door) with a fight running."""
    if room is None:
        return None
    match room.payload:
        case EnemyLair(combat_active=True):
            return room
        case LockedGate(unlocked=True, inner=Room() as inner):
            return combat_room(inner)
    return None


# --- locked rooms ---


def _open_gate(room: Room, gate: LockedGate, actor: Actor, decisions: Decisions) -> Outcome:
    if gate.unlocked:
        return _delegate(gate, actor, decisions)

    key = gate.required_key
    lines = [room.description, "This entrance is sealed by an advanced security mechanism."]
    if not actor.has_item(key):
        lines.extend([
            "The door stays sealed.",
            f"You need: {key}",
            "Explore the area to find the required key.",
        ])
        return Outcome.fail(f"Access denied - {key} required.", lines)

    lines.append(f"You insert the {key} into the lock...")
    if actor.rules.unlock_delay > 0:
        time.sleep(actor.rules.unlock_delay)
    actor.remove_item(key)
    gate.unlocked = True
    actor.stats.add_experience(actor.rules.experience_per_unlock)
    lines.append(f"The {key} works perfectly! The door opens revealing hidden secrets...")
    logger.info("room_unlocked", room=room.name, key=key, player=actor.name)

    outcome = Outcome.ok("Door unlocked successfully!", Kind.UNLOCK, lines)
    if gate.inner is not None:
        inner = interact(gate.inner, actor, decisions)
        outcome.lines.extend(inner.lines)
        outcome.lines.append(inner.message)
        outcome.detail.update(inner.detail)
        outcome.detail["inner"] = inner
    return outcome


def _delegate(gate: LockedGate, actor: Actor, decisions: Decisions) -> Outcome:
    if gate.inner is None:
        return Outcome.ok(
            "Empty room behind the door.",
            Kind.DIALOGUE,
            ["The door opens, but there is nothing behind it..."],
        )
    return interact(gate.inner, actor, decisions)
