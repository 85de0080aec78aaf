"""Shared test fixtures for Dungeon Explorer."""

import pytest

from dungeon.engine.actor import Actor
from dungeon.engine.combat import BugType, Enemy, Question
from dungeon.engine.loader import Campaign, load_campaign
from dungeon.engine.rules import Rules
from dungeon.engine.state import GameState, new_game_state


@pytest.fixture
def rules() -> Rules:
    return Rules()


@pytest.fixture
def campaign() -> Campaign:
    return load_campaign()


@pytest.fixture
def actor(rules: Rules) -> Actor:
    return Actor(name="Ada", rules=rules)


@pytest.fixture
def game(campaign: Campaign) -> GameState:
    return new_game_state(campaign, "Ada")


@pytest.fixture
def question() -> Question:
    return Question(
        "inherit",
        "What is inheritance in OOP?",
        (
            "Copying code",
            "A class can inherit properties from another",
            "The same as composition",
            "It only works with interfaces",
        ),
        "A class can inherit properties from another",
        "A subclass reuses the behaviour of its parent.",
    )


@pytest.fixture
def enemy(question: Question, rules: Rules) -> Enemy:
    return Enemy(
        "ClassBug",
        BugType.SYNTAX_ERROR,
        [question],
        health=30,
        damage=15,
        defense=2,
        rules=rules,
    )
