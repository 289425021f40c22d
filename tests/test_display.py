"""Tests for the rich display builders."""

import pytest
from rich.console import Console

from shiritori.core.rules import Outcome, OutcomeKind
from shiritori.display import (
    build_feedback,
    make_timer_bar,
    render,
    timer_style,
)
from shiritori.engine import TurnEngine


def _text(renderable) -> str:
    console = Console(record=True, width=80, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestTimer:
    @pytest.mark.parametrize("remaining,style", [
        (30, "bold green"), (15, "bold yellow"), (6, "bold red"), (0, "bold red"),
    ])
    def test_style_thresholds(self, remaining, style):
        assert timer_style(remaining, 30) == style

    def test_bar_width(self):
        bar = make_timer_bar(15, 30, width=10)
        assert bar.plain.startswith("█" * 5 + "░" * 5)
        assert bar.plain.endswith("15s")

    def test_bar_clamps(self):
        assert make_timer_bar(40, 30, width=4).plain.startswith("████ ")
        assert make_timer_bar(-3, 30, width=4).plain.startswith("░░░░ ")


class TestRender:
    def test_fresh_game(self, engine):
        out = _text(render(engine.view()))
        assert "Turn: Player 1" in out
        assert "30s" in out
        assert "No words yet." in out

    def test_history_and_letter(self, engine):
        engine.submit("tiger")
        out = _text(render(engine.view()))
        assert "Player 1: tiger" in out
        assert "Start with 'r'" in out
        assert "Accepted: tiger" in out

    def test_game_over_panel(self, validator):
        engine = TurnEngine(validator=validator, turn_seconds=1)
        engine.tick()
        engine.tick()
        out = _text(render(engine.view()))
        assert "Game Over." in out
        assert "Player 1: -1, Player 2: -1" in out
        assert "Both players timed out. Game over." in out

    def test_explicit_feedback_wins(self, engine):
        outcome = Outcome(OutcomeKind.PENALTY, message="Invalid: Word already used. -1 point.")
        out = _text(render(engine.view(), outcome))
        assert "Word already used" in out

    def test_feedback_without_message(self):
        assert build_feedback(None) is None
        assert build_feedback(Outcome(OutcomeKind.STALE)) is None
