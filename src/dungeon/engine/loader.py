"""Parse the level data file into immutable level definitions.

The file is TOML with one ``[[levels]]`` table per tier. Definitions are
parsed once; ``build_map`` turns a definition into fresh, stateful rooms.
"""

import tomllib
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

from ..logging import get_logger
from .actor import Position, Tier
from .combat import BugType, Enemy, Question
from .items import PRESETS, Item, Key, KeyType, Rarity, Treasure, TreasureEffect
from .rooms import EmptyArea, EnemyLair, LockedGate, Room, RoomKind, TreasureCache
from .rules import DEFAULT_RULES, Rules
from .world import GameMap

logger = get_logger(__name__)

ROOM_TYPES = ("empty", "secret", "treasure", "enemy", "locked")


class LevelDataError(ValueError):
    """The level file is malformed."""


@dataclass(frozen=True)
class EnemyDef:
    name: str
    bug_type: BugType
    questions: tuple[Question, ...] = ()
    description: str = ""
    health: int | None = None
    damage: int | None = None
    defense: int | None = None


@dataclass(frozen=True)
class ItemDef:
    """Either a preset name or the fields of a treasure or key."""

    kind: str
    name: str = ""
    description: str = ""
    preset: str | None = None
    rarity: Rarity = Rarity.COMMON
    healing_power: int = 10
    can_overheal: bool = False
    effect: TreasureEffect = TreasureEffect.NONE
    key_type: KeyType = KeyType.STANDARD
    targets: tuple[str, ...] = ()
    single_use: bool = True


@dataclass(frozen=True)
class RoomDef:
    type: str
    name: str
    description: str = ""
    position: Position = Position(0, 0)
    flavor: tuple[str, ...] = ()
    ambience: tuple[str, ...] = ()
    enemy: EnemyDef | None = None
    respawn: bool = False
    items: tuple[ItemDef, ...] = ()
    required_key: str | None = None
    inner: "RoomDef | None" = None


@dataclass(frozen=True)
class LevelDef:
    tier: Tier
    name: str
    width: int
    height: int
    start: Position
    goal: str
    description: str = ""
    rooms: tuple[RoomDef, ...] = ()


@dataclass(frozen=True)
class Campaign:
    """Every tier's level definition, in progression order."""

    levels: tuple[LevelDef, ...] = field(default_factory=tuple)

    def level(self, tier: Tier) -> LevelDef:
        for level in self.levels:
            if level.tier is tier:
                return level
        raise LevelDataError(f"no level defined for tier {tier.label}")

    @property
    def first(self) -> LevelDef:
        return self.levels[0]


# --- parsing ---


def _require(table: dict[str, Any], key: str, where: str) -> Any:
    if key not in table:
        raise LevelDataError(f"{where}: missing '{key}'")
    return table[key]


def _enum(enum_cls, value: str, where: str):
    try:
        return enum_cls[str(value).upper()]
    except KeyError:
        raise LevelDataError(f"{where}: unknown {enum_cls.__name__} '{value}'") from None


def _position(value: Any, where: str) -> Position:
    if not isinstance(value, list) or len(value) != 2:
        raise LevelDataError(f"{where}: expected [x, y], got {value!r}")
    return Position(int(value[0]), int(value[1]))


def _parse_question(table: dict[str, Any], where: str) -> Question:
    return Question(
        id=str(_require(table, "id", where)),
        prompt=_require(table, "prompt", where),
        options=tuple(table.get("options", ())),
        answer=_require(table, "answer", where),
        explanation=table.get("explanation", ""),
    )


def _parse_enemy(table: dict[str, Any], where: str) -> EnemyDef:
    questions = tuple(
        _parse_question(q, f"{where} question {i}")
        for i, q in enumerate(table.get("questions", []), start=1)
    )
    return EnemyDef(
        name=_require(table, "name", where),
        bug_type=_enum(BugType, table.get("bug_type", "syntax_error"), where),
        questions=questions,
        description=table.get("description", ""),
        health=table.get("health"),
        damage=table.get("damage"),
        defense=table.get("defense"),
    )


def _parse_item(table: dict[str, Any], where: str) -> ItemDef:
    if "preset" in table:
        preset = table["preset"]
        if preset not in PRESETS:
            raise LevelDataError(f"{where}: unknown preset '{preset}'")
        return ItemDef(kind="preset", preset=preset)

    kind = _require(table, "kind", where)
    common = {
        "name": _require(table, "name", where),
        "description": table.get("description", ""),
        "rarity": _enum(Rarity, table.get("rarity", "common"), where),
    }
    match kind:
        case "treasure":
            return ItemDef(
                kind=kind,
                healing_power=table.get("healing_power", 10),
                can_overheal=table.get("can_overheal", False),
                effect=_enum(TreasureEffect, table.get("effect", "none"), where),
                **common,
            )
        case "key":
            return ItemDef(
                kind=kind,
                key_type=_enum(KeyType, table.get("key_type", "standard"), where),
                targets=tuple(table.get("targets", ())),
                single_use=table.get("single_use", True),
                **common,
            )
    raise LevelDataError(f"{where}: unknown item kind '{kind}'")


def _parse_room(table: dict[str, Any], where: str, nested: bool = False) -> RoomDef:
    room_type = _require(table, "type", where)
    if room_type not in ROOM_TYPES:
        raise LevelDataError(f"{where}: unknown room type '{room_type}'")
    name = _require(table, "name", where)
    where = f"{where} ({name})"

    enemy = None
    if room_type == "enemy":
        enemy = _parse_enemy(_require(table, "enemy", where), f"{where} enemy")

    inner = None
    required_key = None
    if room_type == "locked":
        required_key = _require(table, "required_key", where)
        if "inner" in table:
            if nested:
                raise LevelDataError(f"{where}: locked rooms cannot be nested")
            inner = _parse_room(table["inner"], f"{where} inner", nested=True)

    return RoomDef(
        type=room_type,
        name=name,
        description=table.get("description", ""),
        position=Position(table.get("x", 0), table.get("y", 0)),
        flavor=tuple(table.get("flavor", ())),
        ambience=tuple(table.get("ambience", ())),
        enemy=enemy,
        respawn=table.get("respawn", False),
        items=tuple(
            _parse_item(item, f"{where} item {i}")
            for i, item in enumerate(table.get("items", []), start=1)
        ),
        required_key=required_key,
        inner=inner,
    )


def _parse_level(table: dict[str, Any], index: int) -> LevelDef:
    where = f"level {index}"
    level = LevelDef(
        tier=_enum(Tier, _require(table, "tier", where), where),
        name=_require(table, "name", where),
        description=table.get("description", ""),
        width=int(_require(table, "width", where)),
        height=int(_require(table, "height", where)),
        start=_position(_require(table, "start", where), where),
        goal=_require(table, "goal", where),
        rooms=tuple(
            _parse_room(room, f"{where} room {i}")
            for i, room in enumerate(table.get("rooms", []), start=1)
        ),
    )

    seen: set[Position] = set()
    for room in level.rooms:
        pos = room.position
        if not (0 <= pos.x < level.width and 0 <= pos.y < level.height):
            raise LevelDataError(f"{where}: room {room.name!r} at {pos} is off the map")
        if pos in seen:
            raise LevelDataError(f"{where}: two rooms at {pos}")
        seen.add(pos)
    if level.start not in seen:
        raise LevelDataError(f"{where}: no room at start position {level.start}")
    return level


def parse_campaign(data: dict[str, Any]) -> Campaign:
    levels = tuple(
        _parse_level(table, i) for i, table in enumerate(data.get("levels", []), start=1)
    )
    if not levels:
        raise LevelDataError("no levels defined")
    return Campaign(levels=levels)


def default_data_path():
    """Locate levels.toml via importlib.resources (works when installed)."""
    return resources.files("dungeon.data").joinpath("levels.toml")


def load_campaign(path: Path | None = None) -> Campaign:
    """Parse the level file at ``path`` (the packaged one by default)."""
    source = path if path is not None else default_data_path()
    try:
        data = tomllib.loads(source.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise LevelDataError(f"{source}: {exc}") from exc
    campaign = parse_campaign(data)
    logger.debug(
        "campaign_loaded",
        source=str(source),
        levels=[level.tier.name for level in campaign.levels],
    )
    return campaign


# --- building ---


def make_item(defn: ItemDef) -> Item:
    match defn.kind:
        case "preset":
            return PRESETS[defn.preset]()
        case "treasure":
            return Treasure(
                defn.name,
                defn.description,
                rarity=defn.rarity,
                healing_power=defn.healing_power,
                can_overheal=defn.can_overheal,
                effect=defn.effect,
            )
        case "key":
            return Key(
                defn.name,
                defn.description,
                rarity=defn.rarity,
                key_type=defn.key_type,
                targets=frozenset(defn.targets),
                single_use=defn.single_use,
            )
    raise LevelDataError(f"unknown item kind '{defn.kind}'")


def make_enemy(defn: EnemyDef, rules: Rules = DEFAULT_RULES) -> Enemy:
    return Enemy(
        defn.name,
        defn.bug_type,
        list(defn.questions),
        description=defn.description,
        health=defn.health,
        damage=defn.damage,
        defense=defn.defense,
        rules=rules,
    )


def make_room(defn: RoomDef, rules: Rules = DEFAULT_RULES) -> Room:
    kind = None
    match defn.type:
        case "empty":
            payload = EmptyArea(flavor=list(defn.flavor), ambience=list(defn.ambience))
        case "secret":
            payload = EmptyArea(
                has_secret=True, flavor=list(defn.flavor), ambience=list(defn.ambience)
            )
            kind = RoomKind.SECRET
        case "treasure":
            payload = TreasureCache(items=[make_item(item) for item in defn.items])
        case "enemy":
            payload = EnemyLair(enemy=make_enemy(defn.enemy, rules), respawn=defn.respawn)
        case "locked":
            inner = make_room(defn.inner, rules) if defn.inner is not None else None
            payload = LockedGate(required_key=defn.required_key, inner=inner)
        case _:
            raise LevelDataError(f"unknown room type '{defn.type}'")
    return Room(defn.name, defn.description, payload, kind=kind)


def build_map(level: LevelDef, rules: Rules = DEFAULT_RULES) -> GameMap:
    """Create a fresh map for ``level``: new rooms, enemies and items."""
    game_map = GameMap(level.name, level.width, level.height)
    for defn in level.rooms:
        game_map.set_room(defn.position.x, defn.position.y, make_room(defn, rules))
    game_map.connect_rooms()
    logger.debug("map_built", level=level.name, rooms=game_map.total_rooms)
    return game_map
