"""Command dispatch and handler functions.

handle_command(campaign, state, raw_input) -> str is the main entry point.
It splits the input into a verb and an optional argument and dispatches to a
handler. Handlers mutate state in place and return the text to show.

While an enemy is waiting for an answer every input is treated as the answer,
except ``flee``.
"""

from collections.abc import Callable

from ..logging import get_logger
from .actor import ActorState
from .loader import Campaign
from .rooms import (
    Decisions,
    EnemyLair,
    Room,
    RoomKind,
    answer_lair,
    combat_room,
    continue_combat,
    end_combat,
    interact,
    interaction_prompt,
)
from .state import GameState, GameStatus, advance_level
from .world import Direction

logger = get_logger(__name__)

ROOM_HINTS = {
    RoomKind.TREASURE: "TREASURE ROOM: press 'f' to pick up valuable items and keys!",
    RoomKind.ENEMY: "COMBAT ROOM: press 'f' to fight by answering programming questions!",
    RoomKind.LOCKED: "LOCKED ROOM: press 'f' to try opening it with your key!",
    RoomKind.EMPTY: "EXPLORATION AREA: press 'f' to explore and maybe rest!",
    RoomKind.SECRET: "SECRET ROOM: press 'f' to uncover hidden mysteries!",
}

HELP_TEXT = """\
Commands:
  w / a / s / d        move north / west / south / east (or type the name)
  f, interact          interact with the current room
  search               interact and search the room for secrets
  rest                 interact and rest if you are hurt
  v, inventory         show your inventory
  x <item>, use <item> use an item from your inventory
  sort <name|type|rarity|value>
  status               your stats and the map
  map                  the map of this tier
  flee                 run away from a fight
  h, help              this help
  q, quit              leave the game

During a fight, answer with the option letter (A-D) or the full answer.
Find each tier's Treasure of Knowledge to advance."""

RECOVERY_MESSAGE = (
    "Something went wrong. The game has recovered to a safe state; "
    "any fight in progress was ended."
)


def handle_command(campaign: Campaign, state: GameState, raw_input: str) -> str:
    """Process a command and return the response text."""
    if state.is_finished:
        return "The game is over."

    text = raw_input.strip()
    if not text:
        return "Empty command. Type 'h' for help."
    state.turns += 1

    try:
        response = _dispatch(campaign, state, text)
        ending = _check_game_conditions(campaign, state)
    except Exception:
        logger.exception("command_failed", command=text, turn=state.turns)
        _recover(state)
        return RECOVERY_MESSAGE

    if ending:
        return response + "\n\n" + ending
    return response


def _dispatch(campaign: Campaign, state: GameState, text: str) -> str:
    fight = combat_room(state.current_room())
    if fight is not None and fight.payload.pending is not None:
        if text.lower() == "flee":
            return _cmd_flee(campaign, state, None)
        return _answer(state, fight, text)

    verb, _, rest = text.partition(" ")
    verb = verb.lower()
    arg = rest.strip() or None

    direction = Direction.parse(verb)
    if direction is not None and arg is None:
        return _cmd_move(state, direction)

    handler = _COMMANDS.get(verb)
    if handler is None:
        return "Invalid command. Remember: 'f' to interact, w/a/s/d to move."
    return handler(campaign, state, arg)


def _check_game_conditions(campaign: Campaign, state: GameState) -> str | None:
    actor = state.actor
    if not actor.is_alive():
        state.status = GameStatus.GAME_OVER
        logger.info("game_over", player=actor.name, turns=state.turns)
        return "\n".join(["GAME OVER", "Your debugging journey ends here.", *_summary(state)])

    level = campaign.level(actor.tier)
    if not actor.has_item(level.goal):
        return None
    if actor.tier.next is None:
        state.status = GameStatus.VICTORY
        logger.info("game_won", player=actor.name, turns=state.turns)
        return "\n".join([
            "VICTORY!",
            f"You obtained the {level.goal}. You have mastered programming!",
            *_summary(state),
        ])
    return "\n".join([*advance_level(campaign, state), *_location_lines(state)])


def _recover(state: GameState) -> None:
    actor = state.actor
    fight = combat_room(state.current_room())
    if fight is not None:
        end_combat(fight, actor)
    if actor.is_alive():
        actor.state = ActorState.ACTIVE


def _summary(state: GameState) -> list[str]:
    stats = state.actor.stats
    return [
        f"Player: {state.actor.name} ({state.actor.tier.label})",
        f"Turns: {state.turns}",
        *stats.summary(),
    ]


# --- location ---


def _location_lines(state: GameState) -> list[str]:
    room = state.current_room()
    if room is None:
        return ["Unknown location. Type 'status' for more information."]

    lines = [f"Location: {room.name}"]
    if not room.visited:
        lines.append(room.description)
        lines.append("NEW ROOM DISCOVERED!")
    lines.append(ROOM_HINTS[room.kind])
    lines.append(interaction_prompt(room))
    lines.append("You can go:")
    if not room.exits:
        lines.append("   nowhere - there are no exits from here")
    for direction, target in room.exits.items():
        neighbor = state.game_map.room_at(target.x, target.y)
        if neighbor is not None:
            lines.append(f"   {direction.label.capitalize()} ({direction.command}): {neighbor.name}")
    return lines


# --- handlers ---


def _cmd_move(state: GameState, direction: Direction) -> str:
    actor = state.actor
    if not actor.can_move():
        return "You cannot move right now."
    room = state.current_room()
    target = room.exits.get(direction) if room is not None else None
    if target is None:
        return f"You can't go {direction.label} from here."

    actor.move_to(target.x, target.y)
    new_room = state.current_room()
    logger.debug("player_moved", player=actor.name, direction=direction.label, room=new_room.name)
    lines = [f"You move {direction.label}."]
    if not new_room.visited:
        lines.append(f"You discovered: {new_room.name}")
        lines.append("Remember: press 'f' to interact and collect items.")
    else:
        lines.append(f"You are back in: {new_room.name}")
    return "\n".join([*lines, *_location_lines(state)])


def _cmd_interact(campaign: Campaign, state: GameState, arg: str | None) -> str:
    room = state.current_room()
    if room is None:
        return "There is nothing to interact with here."
    match (arg or "").lower():
        case "search":
            decisions = Decisions(search=True)
        case "rest":
            decisions = Decisions(rest=True)
        case _:
            decisions = Decisions()
    return interact(room, state.actor, decisions).render()


def _cmd_search(campaign: Campaign, state: GameState, arg: str | None) -> str:
    return _cmd_interact(campaign, state, "search")


def _cmd_rest(campaign: Campaign, state: GameState, arg: str | None) -> str:
    return _cmd_interact(campaign, state, "rest")


def _answer(state: GameState, fight: Room, text: str) -> str:
    actor = state.actor
    parts = [answer_lair(fight, actor, text).render()]
    lair: EnemyLair = fight.payload
    if lair.combat_active and actor.is_alive():
        parts.append(continue_combat(fight, actor).render())
    return "\n\n".join(parts)


def _cmd_flee(campaign: Campaign, state: GameState, arg: str | None) -> str:
    fight = combat_room(state.current_room())
    if fight is None:
        return "There is nothing to flee from."
    end_combat(fight, state.actor)
    logger.info("player_fled", player=state.actor.name, room=fight.name)
    return f"You flee from {fight.payload.enemy.name}. It will still be here when you come back."


def _cmd_inventory(campaign: Campaign, state: GameState, arg: str | None) -> str:
    inventory = state.actor.inventory
    if inventory.is_empty():
        return "Your inventory is empty.\nTip: press 'f' in treasure rooms to collect items."
    return "\n".join([
        f"Inventory ({inventory.size}/{inventory.capacity}):",
        *inventory.display_items(),
        "Use 'x <item>' to use an item.",
    ])


def _cmd_use(campaign: Campaign, state: GameState, arg: str | None) -> str:
    actor = state.actor
    if actor.inventory.is_empty():
        return "Your inventory is empty."
    if arg is None:
        return "\n".join(["Use which item?", *actor.inventory.display_items()])

    item = actor.inventory.find_item(arg)
    if item is None:
        wanted = arg.casefold()
        item = next((i for i in actor.inventory if i.name.casefold() == wanted), None)
    if item is None:
        return f"You don't have an item called: {arg}"

    outcome = item.use(actor)
    if item.used:
        actor.inventory.remove_item(item)
    return outcome.render()


_SORTS = {
    "name": "sort_by_name",
    "type": "sort_by_type",
    "rarity": "sort_by_rarity",
    "value": "sort_by_value",
}


def _cmd_sort(campaign: Campaign, state: GameState, arg: str | None) -> str:
    method = _SORTS.get((arg or "").lower())
    if method is None:
        return "Sort by what? Choose one of: name, type, rarity, value."
    getattr(state.actor.inventory, method)()
    return _cmd_inventory(campaign, state, None)


def _cmd_status(campaign: Campaign, state: GameState, arg: str | None) -> str:
    actor = state.actor
    lines = [*actor.status_lines(), *actor.stats.summary()[3:]]
    if actor.stats.is_critical():
        lines.append("Warning: your health is critical! Find somewhere to rest.")
    lines.append("")
    lines.extend(state.game_map.render(actor.position))
    return "\n".join(lines)


def _cmd_map(campaign: Campaign, state: GameState, arg: str | None) -> str:
    game_map = state.game_map
    return "\n".join([
        f"Size: {game_map.width}x{game_map.height}",
        *game_map.render(state.actor.position),
        "Legend: @ you, # visited, ? not visited, . nothing",
    ])


def _cmd_help(campaign: Campaign, state: GameState, arg: str | None) -> str:
    return HELP_TEXT


def _cmd_quit(campaign: Campaign, state: GameState, arg: str | None) -> str:
    state.status = GameStatus.QUIT
    logger.info("game_quit", player=state.actor.name, turns=state.turns)
    return "\n".join(["Thanks for playing! Until the next adventure.", *_summary(state)])


def _static_response(text: str) -> Callable:
    def handler(campaign: Campaign, state: GameState, arg: str | None) -> str:
        return text

    return handler


_COMMANDS: dict[str, Callable] = {
    **dict.fromkeys(("f", "interact"), _cmd_interact),
    "search": _cmd_search,
    "rest": _cmd_rest,
    "flee": _cmd_flee,
    **dict.fromkeys(("v", "inventory", "i"), _cmd_inventory),
    **dict.fromkeys(("x", "use"), _cmd_use),
    "sort": _cmd_sort,
    "status": _cmd_status,
    "map": _cmd_map,
    **dict.fromkeys(("h", "help"), _cmd_help),
    **dict.fromkeys(("q", "quit"), _cmd_quit),
    "save": _static_response(
        "Saving is not available yet. A future version will let you keep your progress."
    ),
    "load": _static_response(
        "Loading is not available yet. A future version will let you load saved games."
    ),
}


def describe_location(state: GameState) -> str:
    """The text shown when the player arrives somewhere (start of game, new tier)."""
    return "\n".join(_location_lines(state))
