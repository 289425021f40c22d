"""Word rules — the local validation pipeline and turn outcome types.

The pipeline short-circuits at the first failure, in a fixed order:
length, duplicate, letter chain. Dictionary lookup happens afterwards in
the engine because it is the only check that leaves the process.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "OutcomeKind",
    "RejectReason",
    "Outcome",
    "UsedWord",
    "ValidationResult",
    "check_word",
    "rejection_message",
]


class RejectReason(Enum):
    TOO_SHORT = "too_short"
    DUPLICATE = "duplicate"
    WRONG_LETTER = "wrong_letter"
    NOT_A_WORD = "not_a_word"


class OutcomeKind(Enum):
    ACCEPT = "accept"
    PENALTY = "penalty"
    TIMEOUT = "timeout"
    GAME_OVER = "game_over"
    IGNORED = "ignored"  # game over, or a submission is already pending
    STALE = "stale"  # validator answered after the turn moved on


@dataclass(frozen=True)
class UsedWord:
    """One accepted word and the display name of the player who played it."""

    word: str
    by: str

    def to_dict(self) -> dict:
        return {"word": self.word, "by": self.by}


@dataclass(frozen=True)
class ValidationResult:
    """Result of the local checks against a normalized word."""

    legal: bool
    reason: RejectReason | None = None
    message: str | None = None


@dataclass(frozen=True)
class Outcome:
    """What a submission or a tick did to the game."""

    kind: OutcomeKind
    player: str | None = None
    word: str | None = None
    reason: RejectReason | None = None
    message: str = ""


def rejection_message(
    reason: RejectReason,
    min_length: int = 4,
    last_letter: str | None = None,
) -> str:
    """Human-readable feedback for a rejected submission."""
    if reason is RejectReason.TOO_SHORT:
        detail = f"Word must be at least {min_length} letters."
    elif reason is RejectReason.DUPLICATE:
        detail = "Word already used."
    elif reason is RejectReason.WRONG_LETTER:
        detail = f"Word must start with '{last_letter}'."
    else:
        detail = "Not a valid English word."
    return f"Invalid: {detail} -1 point."


def check_word(
    word: str,
    used: set[str] | frozenset[str],
    last_letter: str | None,
    min_length: int = 4,
) -> ValidationResult:
    """Run the local checks on an already-normalized word. Does not touch state."""
    if len(word) < min_length:
        reason = RejectReason.TOO_SHORT
    elif word in used:
        reason = RejectReason.DUPLICATE
    elif last_letter and word[0] != last_letter:
        reason = RejectReason.WRONG_LETTER
    else:
        return ValidationResult(legal=True)
    return ValidationResult(
        legal=False,
        reason=reason,
        message=rejection_message(reason, min_length, last_letter),
    )
