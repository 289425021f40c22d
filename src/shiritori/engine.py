"""TurnEngine — the Shiritori turn/timer state machine.

Owns the current player, scores, word history, letter-chain constraint,
countdown and the game-over condition. Two inputs drive it:

- ``submit(raw)`` from the player, which may call out to a WordValidator
- ``tick()`` once per second from an external scheduler (see TurnClock)

The engine holds no timer resource of its own, only the countdown integer.
All state is guarded by one lock. The validator call runs outside the lock;
its answer is applied only if the turn it was issued for is still current.

Lifecycle: hydrate (from a StateStore) -> running -> game over -> reset.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from shiritori.core.dictionary import WordValidator
from shiritori.core.rules import (
    Outcome,
    OutcomeKind,
    RejectReason,
    UsedWord,
    check_word,
    rejection_message,
)
from shiritori.core.sanitizer import normalize_word
from shiritori.core.store import StateStore, valid_fields
from shiritori.core.telemetry import TurnLogger, TurnRecord

__all__ = ["TurnEngine", "GameView", "DEFAULT_PLAYERS"]

logger = logging.getLogger(__name__)

DEFAULT_PLAYERS = ("Player 1", "Player 2")
DEFAULT_TURN_SECONDS = 30
DEFAULT_MIN_WORD_LENGTH = 4
DEFAULT_MAX_CONSECUTIVE_TIMEOUTS = 2

# Snapshot key -> attribute holding it
_FIELD_ATTRS = {
    "currentPlayerIndex": "_current_index",
    "scores": "_scores",
    "usedWords": "_used_words",
    "lastLetter": "_last_letter",
    "gameOver": "_game_over",
    "consecutiveTimeouts": "_consecutive_timeouts",
}


@dataclass(frozen=True)
class GameView:
    """Consistent read-only copy of the engine state, for display."""

    players: tuple[str, ...]
    current_player_index: int
    scores: tuple[int, ...]
    used_words: tuple[UsedWord, ...]
    last_letter: str | None
    game_over: bool
    consecutive_timeouts: int
    remaining: int
    turn_seconds: int
    running: bool
    pending: bool
    turn_id: int
    last_outcome: Outcome | None

    @property
    def current_player(self) -> str:
        return self.players[self.current_player_index]


class TurnEngine:
    """Turn/timer state machine for a two-player Shiritori game."""

    def __init__(
        self,
        validator: WordValidator,
        players: tuple[str, ...] | list[str] = DEFAULT_PLAYERS,
        store: StateStore | None = None,
        turn_seconds: int = DEFAULT_TURN_SECONDS,
        min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
        max_consecutive_timeouts: int = DEFAULT_MAX_CONSECUTIVE_TIMEOUTS,
        turn_log: TurnLogger | None = None,
    ) -> None:
        players = tuple(players)
        if len(players) < 2:
            raise ValueError(f"Need at least 2 players, got {len(players)}")
        if turn_seconds < 1:
            raise ValueError(f"turn_seconds must be positive, got {turn_seconds}")
        if min_word_length < 1:
            raise ValueError(f"min_word_length must be positive, got {min_word_length}")
        if max_consecutive_timeouts < 1:
            raise ValueError(
                f"max_consecutive_timeouts must be positive, got {max_consecutive_timeouts}"
            )

        self._lock = threading.RLock()
        self._validator = validator
        self._players = players
        self._store = store
        self._turn_seconds = turn_seconds
        self._min_word_length = min_word_length
        self._max_consecutive_timeouts = max_consecutive_timeouts
        self._turn_log = turn_log

        # Persisted fields
        self._current_index: int = 0
        self._scores: tuple[int, ...] = (0,) * len(players)
        self._used_words: tuple[UsedWord, ...] = ()
        self._last_letter: str | None = None
        self._game_over: bool = False
        self._consecutive_timeouts: int = 0

        # Session-only fields
        self._remaining: int = turn_seconds
        self._running: bool = True
        self._turn_id: int = 0
        self._pending: bool = False
        self._turn_number: int = 0
        self._last_outcome: Outcome | None = None

        self._hydrate()
        self._running = not self._game_over

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def players(self) -> tuple[str, ...]:
        return self._players

    @property
    def current_player_index(self) -> int:
        return self._current_index

    @property
    def current_player(self) -> str:
        return self._players[self._current_index]

    @property
    def scores(self) -> tuple[int, ...]:
        return self._scores

    @property
    def used_words(self) -> tuple[UsedWord, ...]:
        return self._used_words

    @property
    def used_set(self) -> frozenset[str]:
        """Lowercase forms of every used word, derived from the history."""
        return frozenset(w.word.lower() for w in self._used_words)

    @property
    def last_letter(self) -> str | None:
        return self._last_letter

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def consecutive_timeouts(self) -> int:
        return self._consecutive_timeouts

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def turn_seconds(self) -> int:
        return self._turn_seconds

    @property
    def min_word_length(self) -> int:
        return self._min_word_length

    @property
    def running(self) -> bool:
        return self._running

    @property
    def turn_id(self) -> int:
        """Increases every time a turn starts, including after reset()."""
        return self._turn_id

    @property
    def pending(self) -> bool:
        """True while a submission is waiting on the validator."""
        return self._pending

    @property
    def last_outcome(self) -> Outcome | None:
        return self._last_outcome

    def view(self) -> GameView:
        with self._lock:
            return GameView(
                players=self._players,
                current_player_index=self._current_index,
                scores=self._scores,
                used_words=self._used_words,
                last_letter=self._last_letter,
                game_over=self._game_over,
                consecutive_timeouts=self._consecutive_timeouts,
                remaining=self._remaining,
                turn_seconds=self._turn_seconds,
                running=self._running,
                pending=self._pending,
                turn_id=self._turn_id,
                last_outcome=self._last_outcome,
            )

    def snapshot(self) -> dict:
        """Return the persisted subset of the state, in storage format."""
        with self._lock:
            return {
                "currentPlayerIndex": self._current_index,
                "scores": list(self._scores),
                "usedWords": [w.to_dict() for w in self._used_words],
                "lastLetter": self._last_letter,
                "gameOver": self._game_over,
                "consecutiveTimeouts": self._consecutive_timeouts,
            }

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def tick(self, turn_id: int | None = None) -> Outcome | None:
        """Advance the countdown by one second.

        Returns the timeout Outcome when this tick expired the turn, else
        None. Does nothing while the game is over, the clock is stopped, or
        a submission is waiting on the validator. When ``turn_id`` is given,
        the tick only applies if that turn is still the current one.
        """
        with self._lock:
            if turn_id is not None and turn_id != self._turn_id:
                return None
            if self._game_over or not self._running or self._pending:
                return None
            self._remaining -= 1
            if self._remaining > 0:
                return None
            self._remaining = 0
            self._running = False
            return self._timeout()

    def submit(self, raw: str | None, turn_id: int | None = None) -> Outcome:
        """Play a word for the current player.

        Local checks (length, duplicate, letter chain) run under the lock.
        The dictionary lookup runs without it; meanwhile the countdown is
        frozen and further submissions are ignored. A lookup that returns
        after the turn has moved on (reset) is discarded as STALE.

        ``turn_id`` is the turn the word was typed in; a word typed in a
        turn that has since ended is discarded as STALE.
        """
        with self._lock:
            if self._game_over:
                return Outcome(OutcomeKind.IGNORED, message="Game is over.")
            if turn_id is not None and turn_id != self._turn_id:
                return Outcome(
                    OutcomeKind.STALE,
                    message="Turn ended before the word was submitted.",
                )
            if self._pending:
                return Outcome(
                    OutcomeKind.IGNORED, message="Still checking the previous word."
                )

            word = normalize_word(raw)
            player = self.current_player
            result = check_word(
                word, self.used_set, self._last_letter, self._min_word_length
            )
            if not result.legal:
                return self._penalize(word, result.reason, result.message)

            ticket = self._turn_id
            self._pending = True

        try:
            valid = bool(self._validator.validate(word))
        except Exception:
            with self._lock:
                if ticket == self._turn_id:
                    self._pending = False
            raise

        with self._lock:
            if ticket != self._turn_id:
                logger.info("Discarding stale dictionary answer for %r", word)
                return Outcome(OutcomeKind.STALE, player=player, word=word)
            self._pending = False
            if not valid:
                return self._penalize(
                    word,
                    RejectReason.NOT_A_WORD,
                    rejection_message(RejectReason.NOT_A_WORD),
                )
            return self._accept(word)

    def reset(self) -> None:
        """Return every field to its initial value and restart the clock."""
        with self._lock:
            self._turn_id += 1
            self._pending = False
            self._set("currentPlayerIndex", 0)
            self._set("scores", (0,) * len(self._players))
            self._set("usedWords", ())
            self._set("lastLetter", None)
            self._set("gameOver", False)
            self._set("consecutiveTimeouts", 0)
            self._remaining = self._turn_seconds
            self._running = True
            self._turn_number = 0
            self._last_outcome = None
            logger.info("Game reset")

    # ------------------------------------------------------------------
    # Internals (lock held)
    # ------------------------------------------------------------------

    def _accept(self, word: str) -> Outcome:
        player = self.current_player
        self._set("usedWords", self._used_words + (UsedWord(word=word, by=player),))
        self._set("lastLetter", word[-1])
        self._set("consecutiveTimeouts", 0)
        return self._finish_turn(
            Outcome(OutcomeKind.ACCEPT, player=player, word=word, message=f"Accepted: {word}")
        )

    def _penalize(self, word: str, reason: RejectReason, message: str) -> Outcome:
        player = self.current_player
        self._deduct_point()
        # Rejected words never count toward the double-timeout rule.
        self._set("consecutiveTimeouts", 0)
        return self._finish_turn(
            Outcome(
                OutcomeKind.PENALTY,
                player=player,
                word=word,
                reason=reason,
                message=message,
            )
        )

    def _timeout(self) -> Outcome:
        player = self.current_player
        self._deduct_point()
        count = self._consecutive_timeouts + 1

        if count >= self._max_consecutive_timeouts:
            self._set("gameOver", True)
            self._running = False
            self._set("consecutiveTimeouts", 0)
            outcome = Outcome(
                OutcomeKind.GAME_OVER,
                player=player,
                message=self._game_over_message(),
            )
            self._last_outcome = outcome
            self._log(outcome)
            self._finalize()
            logger.info("Game over after %d consecutive timeouts", count)
            return outcome

        self._set("consecutiveTimeouts", count)
        return self._finish_turn(
            Outcome(
                OutcomeKind.TIMEOUT,
                player=player,
                message=f"{player} ran out of time. -1 point.",
            )
        )

    def _finish_turn(self, outcome: Outcome) -> Outcome:
        """Record the completed turn, then start the next one."""
        self._last_outcome = outcome
        self._log(outcome)
        self._turn_id += 1
        self._set("currentPlayerIndex", (self._current_index + 1) % len(self._players))
        self._remaining = self._turn_seconds
        self._running = True
        return outcome

    def _deduct_point(self) -> None:
        scores = list(self._scores)
        scores[self._current_index] -= 1
        self._set("scores", tuple(scores))

    def _game_over_message(self) -> str:
        if len(self._players) == 2 and self._max_consecutive_timeouts == 2:
            return "Both players timed out. Game over."
        return f"{self._max_consecutive_timeouts} turns timed out in a row. Game over."

    def _set(self, name: str, value) -> None:
        """Update one persisted field; a real change is saved immediately."""
        attr = _FIELD_ATTRS[name]
        if getattr(self, attr) == value:
            return
        setattr(self, attr, value)
        self._persist()

    def _persist(self) -> None:
        if self._store is None:
            return
        try:
            self._store.save(self.snapshot())
        except Exception as exc:
            logger.warning("State save failed: %s", exc)

    def _log(self, outcome: Outcome) -> None:
        self._turn_number += 1
        if self._turn_log is None:
            return
        self._turn_log.log_turn(
            TurnRecord(
                turn_number=self._turn_number,
                player=outcome.player or "",
                word=outcome.word,
                outcome=outcome.kind.value,
                reason=outcome.reason.value if outcome.reason else None,
                message=outcome.message,
                scores=list(self._scores),
                remaining_s=self._remaining,
                consecutive_timeouts=self._consecutive_timeouts,
                game_over=self._game_over,
            )
        )

    def _finalize(self) -> None:
        if self._turn_log is None:
            return
        self._turn_log.finalize_game(
            scores=dict(zip(self._players, self._scores)),
            words_played=len(self._used_words),
        )

    # ------------------------------------------------------------------
    # Hydration
    # ------------------------------------------------------------------

    def _hydrate(self) -> None:
        """Restore persisted fields from the store, field by field."""
        if self._store is None:
            return
        try:
            raw = self._store.load()
        except Exception as exc:
            logger.warning("State load failed, starting fresh: %s", exc)
            return
        if raw is None:
            return

        fields = valid_fields(raw)
        n = len(self._players)

        index = fields.get("currentPlayerIndex", 0)
        if index >= n:
            logger.warning("Stored currentPlayerIndex %d out of range, using 0", index)
            index = 0
        self._current_index = index

        scores = fields.get("scores")
        if scores is not None and len(scores) != n:
            logger.warning("Stored scores have %d entries for %d players, using default", len(scores), n)
            scores = None
        self._scores = tuple(scores) if scores is not None else (0,) * n

        used: list[UsedWord] = []
        seen: set[str] = set()
        for item in fields.get("usedWords", []):
            word = item["word"].lower()
            if word in seen:
                logger.warning("Dropping repeated stored word %r", word)
                continue
            seen.add(word)
            used.append(UsedWord(word=word, by=item["by"]))
        self._used_words = tuple(used)

        letter = fields.get("lastLetter")
        self._last_letter = letter.lower() if letter else None

        self._game_over = fields.get("gameOver", False)

        timeouts = fields.get("consecutiveTimeouts", 0)
        if timeouts >= self._max_consecutive_timeouts:
            logger.warning("Stored consecutiveTimeouts %d out of range, using 0", timeouts)
            timeouts = 0
        self._consecutive_timeouts = timeouts
