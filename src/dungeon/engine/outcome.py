"""Structured results handed back to the caller for rendering."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Kind(Enum):
    """What category of thing an interaction turned out to be."""

    NONE = "none"
    DIALOGUE = "dialogue"
    COMBAT = "combat"
    LOOT = "loot"
    UNLOCK = "unlock"
    HEAL = "heal"
    DAMAGE = "damage"
    USE = "use"


@dataclass
class Outcome:
    """Success flag, category, headline message and narration lines.

    ``lines`` carries everything the player should read in order; the
    headline ``message`` is the short summary shown last.
    """

    success: bool
    message: str
    kind: Kind = Kind.NONE
    lines: list[str] = field(default_factory=list)
    # Extra payload some rooms attach (the pending question, the combat result)
    detail: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, message: str, kind: Kind, lines: list[str] | None = None) -> "Outcome":
        return cls(True, message, kind, list(lines or []))

    @classmethod
    def fail(cls, message: str, lines: list[str] | None = None) -> "Outcome":
        return cls(False, message, Kind.NONE, list(lines or []))

    def render(self) -> str:
        marker = "" if self.success else "(!) "
        return "\n".join([*self.lines, f"{marker}{self.message}"])
