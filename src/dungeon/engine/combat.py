"""Quiz combat: questions, bug enemies and answer resolution.

An enemy moves through IDLE -> IN_COMBAT -> DEFEATED / VICTORIOUS, or back
to IDLE when its attempts run out. DEFEATED and VICTORIOUS only leave via
``Enemy.reset()``.
"""

import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..logging import get_logger
from .rules import DEFAULT_RULES, Rules

if TYPE_CHECKING:
    from .actor import Actor

logger = get_logger(__name__)

LETTERS = "ABCD"


@dataclass(frozen=True)
class Question:
    """A multiple-choice question. Two questions are equal when their ids are."""

    id: str
    prompt: str = field(compare=False)
    options: tuple[str, ...] = field(default=(), compare=False)
    answer: str = field(default="", compare=False)
    explanation: str = field(default="", compare=False)

    def is_correct(self, raw_answer: str | None) -> bool:
        """Accept the option letter (A-D) or the full answer text, any case."""
        if raw_answer is None or not self.answer:
            return False
        clean = raw_answer.strip()
        if len(clean) == 1 and self.options:
            index = ord(clean.upper()) - ord("A")
            if 0 <= index < min(len(self.options), len(LETTERS)):
                return self.options[index].casefold() == self.answer.casefold()
        return clean.casefold() == self.answer.casefold()

    def display(self) -> list[str]:
        lines = [self.prompt]
        if self.options:
            lines.append("Options:")
            for letter, option in zip(LETTERS, self.options):
                lines.append(f"   {letter}) {option}")
        return lines


DEFAULT_QUESTIONS = (
    Question(
        "default1",
        "What is the most important principle in programming?",
        ("Copy and paste", "Clean Code", "Code fast", "Never document"),
        "Clean Code",
        "Clean code is fundamental for maintainable, scalable software.",
    ),
    Question(
        "default2",
        "What does OOP stand for?",
        (
            "Object-Oriented Programming",
            "Optimised Original Programming",
            "Organised Operating Process",
            "Official Ordered Project",
        ),
        "Object-Oriented Programming",
        "OOP is a paradigm built around objects and classes.",
    ),
    Question(
        "default3",
        "What is the most basic data structure?",
        ("Array", "LinkedList", "HashMap", "TreeSet"),
        "Array",
        "The array is the most fundamental data structure in programming.",
    ),
)


class BugType(Enum):
    """(display name, health, damage, defense, reward, multiplier, taunt)"""

    SYNTAX_ERROR = ("Syntax Error", 30, 15, 2, 25, 1.0,
                    "Get ready to face syntax errors!")
    NULL_POINTER = ("Null Pointer", 40, 20, 3, 35, 1.2,
                    "Watch out for null references!")
    LOGIC_ERROR = ("Logic Error", 50, 25, 4, 45, 1.4,
                   "Your logic will be put to the test!")
    RUNTIME_ERROR = ("Runtime Error", 60, 30, 5, 55, 1.6,
                     "Errors that only show up at runtime!")
    MEMORY_LEAK = ("Memory Leak", 70, 35, 6, 65, 1.8,
                   "Memory is leaking out of control!")
    INFINITE_LOOP = ("Infinite Loop", 80, 40, 7, 75, 2.0,
                     "Trapped in an endless cycle!")

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def base_health(self) -> int:
        return self.value[1]

    @property
    def base_damage(self) -> int:
        return self.value[2]

    @property
    def base_defense(self) -> int:
        return self.value[3]

    @property
    def experience_reward(self) -> int:
        return self.value[4]

    @property
    def difficulty_multiplier(self) -> float:
        return self.value[5]

    @property
    def taunt(self) -> str:
        return self.value[6]


class EnemyState(Enum):
    IDLE = "idle"
    IN_COMBAT = "in_combat"
    DEFEATED = "defeated"
    VICTORIOUS = "victorious"
    FLEEING = "fleeing"


class CombatType(Enum):
    COMBAT_STARTED = "combat_started"
    ALREADY_ACTIVE = "already_active"
    DAMAGE_DEALT = "damage_dealt"
    INCORRECT_ANSWER = "incorrect_answer"
    ENEMY_DEFEATED = "enemy_defeated"
    PLAYER_DEFEATED = "player_defeated"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    ALREADY_DEFEATED = "already_defeated"
    NO_COMBAT = "no_combat"
    ERROR = "error"


@dataclass
class CombatResult:
    success: bool
    message: str
    type: CombatType
    lines: list[str] = field(default_factory=list)


class Enemy:
    """A bug that fights by asking questions."""

    def __init__(
        self,
        name: str,
        bug_type: BugType = BugType.SYNTAX_ERROR,
        questions: list[Question] | None = None,
        *,
        description: str = "",
        health: int | None = None,
        damage: int | None = None,
        defense: int | None = None,
        rules: Rules = DEFAULT_RULES,
    ):
        self.id = f"enemy-{uuid.uuid4().hex[:8]}"
        self.name = (name or "").strip() or "Unknown Bug"
        self.bug_type = bug_type
        self.description = (description or "").strip() or (
            f"A {bug_type.label} that challenges your programming knowledge."
        )
        self.max_health = max(1, bug_type.base_health if health is None else health)
        self.health = self.max_health
        self.damage = max(1, bug_type.base_damage if damage is None else damage)
        self.defense = max(0, bug_type.base_defense if defense is None else defense)
        self.questions: list[Question] = list(questions or [])
        self.used_questions: set[str] = set()
        self.max_attempts = rules.max_question_attempts

        self.state = EnemyState.IDLE
        self.defeated = False
        self.in_combat = False
        self.attempts = 0
        self.turns = 0

    def __repr__(self) -> str:
        return (
            f"Enemy({self.name!r}, {self.bug_type.name}, {self.state.value}, "
            f"hp={self.health}/{self.max_health}, "
            f"attempts={self.attempts}/{self.max_attempts})"
        )

    # --- combat lifecycle ---

    def start_combat(self, actor: "Actor") -> CombatResult:
        if self.defeated:
            return CombatResult(
                False, f"{self.name} has already been defeated.",
                CombatType.ALREADY_DEFEATED,
            )
        if self.in_combat:
            return CombatResult(True, "Combat already active.", CombatType.ALREADY_ACTIVE)

        self.state = EnemyState.IN_COMBAT
        self.in_combat = True
        self.attempts = 0
        self.turns = 0
        self.used_questions.clear()
        logger.info("combat_started", enemy=self.name, player=actor.name)
        return CombatResult(
            True,
            f"Combat started with {self.name}.",
            CombatType.COMBAT_STARTED,
            [f"A wild {self.name} appeared!", self.description, self.bug_type.taunt],
        )

    def current_question(self) -> Question:
        """Pick an unasked question, recycling the pool when it runs dry."""
        if not self.questions:
            return random.choice(DEFAULT_QUESTIONS)

        available = [q for q in self.questions if q.id not in self.used_questions]
        if not available:
            if len(self.questions) > 1 and self.attempts < self.max_attempts:
                self.used_questions.clear()
                available = list(self.questions)
                logger.debug("question_pool_recycled", enemy=self.name)
            else:
                return self.questions[0]

        question = random.choice(available)
        self.used_questions.add(question.id)
        return question

    def process_answer(
        self, raw_answer: str | None, question: Question | None, actor: "Actor"
    ) -> CombatResult:
        if not self.in_combat:
            return CombatResult(False, "There is no active combat.", CombatType.NO_COMBAT)
        if question is None:
            logger.error("combat_question_missing", enemy=self.name)
            return CombatResult(False, "Combat question error.", CombatType.ERROR)

        self.attempts += 1
        self.turns += 1
        attempt_line = f"Attempt {self.attempts}/{self.max_attempts}"

        if question.is_correct(raw_answer):
            result = self._handle_correct(actor)
        else:
            result = self._handle_incorrect(question, actor)
        result.lines.insert(0, attempt_line)
        logger.debug(
            "answer_processed",
            enemy=self.name,
            outcome=result.type.value,
            attempts=self.attempts,
            enemy_health=self.health,
        )
        return result

    def _handle_correct(self, actor: "Actor") -> CombatResult:
        dealt = self.damage_against(actor)
        self.take_damage(dealt)
        lines = [f"Correct! Your knowledge hurts {self.name} ({dealt} damage)."]

        if self.health <= 0:
            self.defeated = True
            self.state = EnemyState.DEFEATED
            self.in_combat = False
            reward = self.bug_type.experience_reward
            actor.stats.add_experience(reward)
            lines.append(f"You defeated {self.name}! +{reward} experience.")
            logger.info("enemy_defeated", enemy=self.name, player=actor.name)
            return CombatResult(
                True, f"{self.name} defeated.", CombatType.ENEMY_DEFEATED, lines
            )

        lines.append(f"{self.name} - health: {self.health}/{self.max_health}")
        if self.attempts >= self.max_attempts:
            self.state = EnemyState.IDLE
            self.in_combat = False
            return CombatResult(
                True, "Question limit reached.", CombatType.ATTEMPTS_EXHAUSTED, lines
            )
        return CombatResult(True, "Damage dealt to the enemy.", CombatType.DAMAGE_DEALT, lines)

    def _handle_incorrect(self, question: Question, actor: "Actor") -> CombatResult:
        lines = [f"Incorrect. The answer was: {question.answer}"]
        if question.explanation:
            lines.append(question.explanation)
        taken = actor.take_damage(max(1, self.damage))
        lines.append(f"{self.name} strikes back with confusion! (-{taken} HP)")

        if not actor.is_alive():
            self.state = EnemyState.VICTORIOUS
            self.in_combat = False
            logger.info("player_defeated", enemy=self.name, player=actor.name)
            return CombatResult(
                False, "You have been defeated.", CombatType.PLAYER_DEFEATED, lines
            )
        if self.attempts >= self.max_attempts:
            self.state = EnemyState.IDLE
            self.in_combat = False
            return CombatResult(
                False, "Combat attempts exhausted.", CombatType.ATTEMPTS_EXHAUSTED, lines
            )
        return CombatResult(False, "Incorrect answer.", CombatType.INCORRECT_ANSWER, lines)

    def damage_against(self, actor: "Actor") -> int:
        base = max(1, actor.stats.power - self.defense)
        return int(base * (1 + 0.1 * self.bug_type.difficulty_multiplier))

    def take_damage(self, amount: int) -> None:
        if amount > 0:
            self.health = max(0, self.health - amount)

    def reset(self) -> None:
        """Full health, IDLE, history cleared."""
        self.health = self.max_health
        self.state = EnemyState.IDLE
        self.defeated = False
        self.in_combat = False
        self.attempts = 0
        self.turns = 0
        self.used_questions.clear()
        logger.debug("enemy_reset", enemy=self.name)

    def force_end_combat(self) -> None:
        self.in_combat = False
        self.state = EnemyState.IDLE
        logger.info("combat_force_ended", enemy=self.name)

    def can_continue_combat(self) -> bool:
        return (
            not self.defeated
            and self.in_combat
            and self.attempts < self.max_attempts
            and self.health > 0
        )

    def detailed_info(self) -> list[str]:
        return [
            f"{self.name} ({self.bug_type.label})",
            self.description,
            f"Health: {self.health}/{self.max_health}",
            f"Damage: {self.damage}",
            f"Defense: {self.defense}",
            f"Questions: {len(self.questions)}",
            f"State: {self.state.value}",
            f"Attempts: {self.attempts}/{self.max_attempts}",
        ]
