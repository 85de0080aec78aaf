"""Test that a tier can be played through to completion.

Trainee route: Main Hall (2,2) east to the Academy of Classes, then north
through the Library of Fundamentals to the Treasure Chamber at (3,0).
Junior route: south twice from the hall, then east into the chamber.
Senior route: south three times, then east along the Deployment Pipeline.
"""

import random

import pytest

from dungeon.engine.actor import ActorState, Position, Tier
from dungeon.engine.commands import handle_command
from dungeon.engine.loader import Campaign
from dungeon.engine.state import GameState


def _run(campaign: Campaign, state: GameState, inputs: list[str]) -> list[str]:
    """Run a list of commands and return all responses."""
    responses = []
    for text in inputs:
        resp = handle_command(campaign, state, text)
        responses.append(resp)
        assert not state.is_finished, f"Game ended unexpectedly after {text!r}: {resp}"
    return responses


@pytest.fixture(autouse=True)
def _seed_random():
    random.seed(42)


def _assert_at(state: GameState, x: int, y: int) -> None:
    assert state.actor.position == Position(x, y), (
        f"Expected {(x, y)}, at {state.actor.position}"
    )


def test_shortest_route_to_junior(campaign: Campaign, game: GameState):
    _run(campaign, game, ["d", "w", "w"])
    _assert_at(game, 3, 0)

    responses = _run(campaign, game, ["f"])
    assert "You obtained: Trainee Treasure of Knowledge!" in responses[-1]
    assert game.actor.tier is Tier.JUNIOR
    _assert_at(game, 3, 3)


def test_fight_key_and_gate(campaign: Campaign, game: GameState):
    responses = _run(campaign, game, ["d", "f", "B", "B", "B", "B"])
    assert "Victory! You defeated ClassBug." in responses[-1]

    _run(campaign, game, ["w", "f", "d", "f"])
    _assert_at(game, 4, 1)
    assert game.actor.has_item("Fundamentals Handbook")
    assert game.actor.has_item("Trainee Key of Knowledge")

    responses = _run(campaign, game, ["w", "f"])
    assert "Door unlocked successfully!" in responses[-1]
    assert "Trainee Master challenges you:" in responses[-1]
    assert not game.actor.has_item("Trainee Key of Knowledge")
    assert game.actor.state is ActorState.IN_COMBAT

    _run(campaign, game, ["flee", "a", "f"])
    assert game.actor.tier is Tier.JUNIOR
    assert game.actor.stats.enemies_defeated == 1


def test_junior_tier_is_reachable_and_playable(campaign: Campaign, game: GameState):
    _run(campaign, game, ["d", "w", "w", "f"])
    assert game.actor.tier is Tier.JUNIOR

    _run(campaign, game, ["s", "s", "d"])
    _assert_at(game, 4, 5)
    _run(campaign, game, ["f"])
    assert game.actor.tier is Tier.SENIOR
    _assert_at(game, 4, 4)


def test_senior_tier_can_be_won(campaign: Campaign, game: GameState):
    _run(campaign, game, ["d", "w", "w", "f", "s", "s", "d", "f"])
    assert game.actor.tier is Tier.SENIOR

    _run(campaign, game, ["s", "s", "s", "d"])
    _assert_at(game, 5, 7)
    resp = handle_command(campaign, game, "d")
    assert "Chamber of Supreme Knowledge" in resp
    final = handle_command(campaign, game, "f")
    assert "VICTORY!" in final
    assert game.is_finished
