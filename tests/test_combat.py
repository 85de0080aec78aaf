"""Tests for quiz combat."""

from dungeon.engine.actor import Actor
from dungeon.engine.combat import (
    DEFAULT_QUESTIONS,
    BugType,
    CombatType,
    Enemy,
    EnemyState,
    Question,
)


def test_question_accepts_letter_or_text(question: Question):
    assert question.is_correct("B")
    assert question.is_correct(" b ")
    assert question.is_correct("a class can inherit properties from another")
    assert not question.is_correct("A")
    assert not question.is_correct("Z")
    assert not question.is_correct(None)


def test_question_equality_is_by_id(question: Question):
    other = Question("inherit", "Something else entirely")
    assert question == other


def test_question_display_lists_options(question: Question):
    lines = question.display()
    assert lines[0] == "What is inheritance in OOP?"
    assert "   B) A class can inherit properties from another" in lines


def test_stats_fall_back_to_bug_type():
    enemy = Enemy("NullBug", BugType.NULL_POINTER)
    assert (enemy.max_health, enemy.damage, enemy.defense) == (40, 20, 3)
    assert enemy.state is EnemyState.IDLE


def test_blank_name_defaults():
    assert Enemy("").name == "Unknown Bug"


def test_start_combat(enemy: Enemy, actor: Actor):
    result = enemy.start_combat(actor)
    assert result.type is CombatType.COMBAT_STARTED
    assert enemy.in_combat
    assert enemy.state is EnemyState.IN_COMBAT

    again = enemy.start_combat(actor)
    assert again.type is CombatType.ALREADY_ACTIVE


def test_correct_answers_defeat_enemy(enemy: Enemy, actor: Actor, question: Question):
    """Power 10 against defense 2 lands 8 damage per correct answer."""
    enemy.start_combat(actor)
    assert enemy.damage_against(actor) == 8

    for expected in (22, 14, 6):
        result = enemy.process_answer("B", question, actor)
        assert result.type is CombatType.DAMAGE_DEALT
        assert enemy.health == expected

    result = enemy.process_answer("B", question, actor)
    assert result.type is CombatType.ENEMY_DEFEATED
    assert enemy.defeated
    assert enemy.state is EnemyState.DEFEATED
    assert not enemy.in_combat
    assert actor.stats.experience == BugType.SYNTAX_ERROR.experience_reward
    assert result.lines[0] == "Attempt 4/5"


def test_wrong_answer_hurts_player(enemy: Enemy, actor: Actor, question: Question):
    enemy.start_combat(actor)
    result = enemy.process_answer("A", question, actor)
    assert result.type is CombatType.INCORRECT_ANSWER
    assert actor.stats.health == 90
    assert enemy.health == 30


def test_attempts_run_out(enemy: Enemy, actor: Actor, question: Question):
    enemy.start_combat(actor)
    results = [enemy.process_answer("A", question, actor) for _ in range(5)]
    assert results[-1].type is CombatType.ATTEMPTS_EXHAUSTED
    assert enemy.state is EnemyState.IDLE
    assert not enemy.in_combat
    assert not enemy.can_continue_combat()


def test_player_defeat(question: Question, actor: Actor):
    brute = Enemy("Brute", health=30, damage=500, defense=0)
    brute.start_combat(actor)
    result = brute.process_answer("A", question, actor)
    assert result.type is CombatType.PLAYER_DEFEATED
    assert brute.state is EnemyState.VICTORIOUS
    assert not actor.is_alive()


def test_defeated_enemy_refuses_combat(enemy: Enemy, actor: Actor):
    enemy.defeated = True
    enemy.state = EnemyState.DEFEATED
    enemy.health = 0
    result = enemy.start_combat(actor)
    assert result.type is CombatType.ALREADY_DEFEATED
    assert not result.success
    assert enemy.health == 0
    assert enemy.state is EnemyState.DEFEATED


def test_answer_without_combat(enemy: Enemy, actor: Actor, question: Question):
    result = enemy.process_answer("B", question, actor)
    assert result.type is CombatType.NO_COMBAT


def test_missing_question_is_an_error(enemy: Enemy, actor: Actor):
    enemy.start_combat(actor)
    result = enemy.process_answer("B", None, actor)
    assert result.type is CombatType.ERROR
    assert enemy.attempts == 0


def test_reset_restores_enemy(enemy: Enemy, actor: Actor, question: Question):
    enemy.start_combat(actor)
    enemy.process_answer("B", question, actor)
    enemy.reset()
    assert enemy.health == enemy.max_health
    assert enemy.state is EnemyState.IDLE
    assert enemy.attempts == 0
    assert not enemy.used_questions


def test_force_end_combat(enemy: Enemy, actor: Actor):
    enemy.start_combat(actor)
    enemy.force_end_combat()
    assert not enemy.in_combat
    assert enemy.state is EnemyState.IDLE


def test_enemy_without_questions_uses_defaults(actor: Actor):
    enemy = Enemy("Plain")
    enemy.start_combat(actor)
    assert enemy.current_question() in DEFAULT_QUESTIONS


def test_single_question_is_repeated(enemy: Enemy, actor: Actor, question: Question):
    enemy.start_combat(actor)
    assert enemy.current_question() == question
    assert enemy.current_question() == question


def test_question_pool_recycles(actor: Actor):
    first = Question("one", "First?", ("x", "y"), "x")
    second = Question("two", "Second?", ("x", "y"), "y")
    enemy = Enemy("Pair", questions=[first, second])
    enemy.start_combat(actor)

    asked = {enemy.current_question(), enemy.current_question()}
    assert asked == {first, second}
    assert enemy.current_question() in (first, second)
    assert len(enemy.used_questions) == 1
