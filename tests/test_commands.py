"""Tests for the command engine."""

from dungeon.engine import commands
from dungeon.engine.actor import ActorState, Position, Tier
from dungeon.engine.commands import HELP_TEXT, RECOVERY_MESSAGE, describe_location, handle_command
from dungeon.engine.items import Key, Treasure
from dungeon.engine.loader import Campaign
from dungeon.engine.rooms import EnemyLair, LockedGate, Room, interact
from dungeon.engine.state import GameState, GameStatus


def _run(campaign: Campaign, game: GameState, inputs: list[str]) -> list[str]:
    return [handle_command(campaign, game, text) for text in inputs]


def test_describe_start(game: GameState):
    text = describe_location(game)
    assert "Location: Main Hall" in text
    assert "North (w): Variables Lab" in text


def test_help(campaign: Campaign, game: GameState):
    assert handle_command(campaign, game, "h") == HELP_TEXT
    assert handle_command(campaign, game, "HELP") == HELP_TEXT


def test_empty_command_does_not_count(campaign: Campaign, game: GameState):
    assert "Empty command" in handle_command(campaign, game, "   ")
    assert game.turns == 0


def test_unknown_command(campaign: Campaign, game: GameState):
    assert "Invalid command" in handle_command(campaign, game, "dance")
    assert game.turns == 1


def test_move(campaign: Campaign, game: GameState):
    result = handle_command(campaign, game, "d")
    assert game.actor.position == Position(3, 2)
    assert "You move east." in result
    assert "Academy of Classes" in result


def test_move_by_name(campaign: Campaign, game: GameState):
    handle_command(campaign, game, "north")
    assert game.actor.position == Position(2, 1)


def test_blocked_move(campaign: Campaign, game: GameState):
    _run(campaign, game, ["a", "w"])
    assert game.actor.position == Position(1, 1)
    result = handle_command(campaign, game, "w")
    assert result == "You can't go north from here."
    assert game.actor.position == Position(1, 1)


def test_inventory_empty(campaign: Campaign, game: GameState):
    assert "Your inventory is empty." in handle_command(campaign, game, "v")


def test_collect_and_use(campaign: Campaign, game: GameState):
    _run(campaign, game, ["a", "s"])
    result = handle_command(campaign, game, "f")
    assert "You obtained: Basic IDE!" in result
    assert game.actor.inventory.size == 2

    refused = handle_command(campaign, game, "x debugger")
    assert "Could not use Debugger." in refused
    assert game.actor.has_item("Debugger")

    game.actor.stats.reduce_health(30)
    used = handle_command(campaign, game, "use Debugger")
    assert "Debugger used." in used
    assert not game.actor.has_item("Debugger")
    assert game.actor.stats.health == 90


def test_use_unknown_item(campaign: Campaign, game: GameState):
    game.actor.add_to_inventory(Treasure("Coffee"))
    assert "don't have an item called: tea" in handle_command(campaign, game, "x tea")


def test_sort(campaign: Campaign, game: GameState):
    assert "Sort by what?" in handle_command(campaign, game, "sort")
    game.actor.add_to_inventory(Treasure("Zebra"))
    game.actor.add_to_inventory(Treasure("Apple"))
    handle_command(campaign, game, "sort name")
    assert [item.name for item in game.actor.inventory] == ["Apple", "Zebra"]


def test_status_and_map(campaign: Campaign, game: GameState):
    status = handle_command(campaign, game, "status")
    assert "Player: Ada (Trainee)" in status
    assert "Map: Trainee World" in status
    assert "Legend" in handle_command(campaign, game, "map")


def test_fight_through_commands(campaign: Campaign, game: GameState):
    _run(campaign, game, ["d"])
    started = handle_command(campaign, game, "f")
    assert "ClassBug challenges you:" in started
    assert game.actor.state is ActorState.IN_COMBAT

    first = handle_command(campaign, game, "B")
    assert "Attempt 1/5" in first
    assert "ClassBug challenges you:" in first

    responses = _run(campaign, game, ["B", "B", "B"])
    assert "Victory! You defeated ClassBug." in responses[-1]
    lair: EnemyLair = game.current_room().payload
    assert lair.enemy_defeated
    assert game.actor.state is ActorState.ACTIVE
    assert game.actor.stats.enemies_defeated == 1


def test_input_during_fight_is_an_answer(campaign: Campaign, game: GameState):
    _run(campaign, game, ["d", "f"])
    result = handle_command(campaign, game, "w")
    assert "Incorrect." in result
    assert game.actor.position == Position(3, 2)
    assert game.actor.stats.health == 90


def test_flee(campaign: Campaign, game: GameState):
    _run(campaign, game, ["d", "f"])
    result = handle_command(campaign, game, "flee")
    assert "You flee from ClassBug." in result
    assert game.actor.state is ActorState.ACTIVE
    handle_command(campaign, game, "a")
    assert game.actor.position == Position(2, 2)


def test_flee_without_fight(campaign: Campaign, game: GameState):
    assert handle_command(campaign, game, "flee") == "There is nothing to flee from."


def test_death_ends_the_game(campaign: Campaign, game: GameState):
    _run(campaign, game, ["d", "f"])
    game.actor.stats.health = 5
    result = handle_command(campaign, game, "A")
    assert "GAME OVER" in result
    assert game.status is GameStatus.GAME_OVER
    assert handle_command(campaign, game, "h") == "The game is over."


def test_goal_advances_tier(campaign: Campaign, game: GameState):
    game.actor.add_to_inventory(Treasure("Trainee Treasure of Knowledge"))
    game.actor.stats.reduce_health(40)
    result = handle_command(campaign, game, "v")
    assert "You have completed the Trainee tier!" in result
    assert game.actor.tier is Tier.JUNIOR
    assert game.actor.position == Position(3, 3)
    assert game.game_map.name == "Junior World"
    assert game.actor.stats.health == game.actor.stats.max_health
    assert game.actor.stats.power == 20
    assert "Location: Junior Main Hall" in result
    assert not game.is_finished


def test_senior_goal_wins(campaign: Campaign, game: GameState):
    game.actor.tier = Tier.SENIOR
    game.actor.add_to_inventory(Treasure("Supreme Treasure of Knowledge"))
    result = handle_command(campaign, game, "v")
    assert "VICTORY!" in result
    assert game.status is GameStatus.VICTORY


def test_quit(campaign: Campaign, game: GameState):
    result = handle_command(campaign, game, "q")
    assert "Thanks for playing!" in result
    assert game.status is GameStatus.QUIT
    assert game.is_finished


def test_save_is_not_available(campaign: Campaign, game: GameState):
    assert "not available" in handle_command(campaign, game, "save")


def test_failure_recovers(campaign: Campaign, game: GameState, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(commands, "interact", boom)
    assert handle_command(campaign, game, "f") == RECOVERY_MESSAGE
    assert game.actor.state is ActorState.ACTIVE
    assert not game.is_finished


def test_using_a_key_keeps_it_for_the_door(campaign: Campaign, game: GameState):
    name = "Trainee Key of Knowledge"
    game.actor.add_to_inventory(Key(name, targets={"Trainee Gate of Wisdom"}))

    described = handle_command(campaign, game, f"use {name}")
    assert "It can unlock: Trainee Gate of Wisdom" in described
    assert game.actor.has_item(name)

    handle_command(campaign, game, f"x {name}")
    assert game.actor.has_item(name)

    gate = Room("Trainee Gate of Wisdom", payload=LockedGate(name))
    outcome = interact(gate, game.actor)
    assert outcome.success
    assert gate.payload.unlocked
    assert not game.actor.has_item(name)
