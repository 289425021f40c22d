"""Rich renderables for the terminal game surface.

Every builder takes a GameView, so rendering never touches the live
engine and never needs its lock.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shiritori.core.rules import Outcome, OutcomeKind
from shiritori.engine import GameView

PLAYER_COLORS = ("cyan", "magenta")
TIMER_WIDTH = 30

_OUTCOME_STYLES = {
    OutcomeKind.ACCEPT: "bold green",
    OutcomeKind.PENALTY: "bold yellow",
    OutcomeKind.TIMEOUT: "bold red",
    OutcomeKind.GAME_OVER: "bold white on red",
    OutcomeKind.STALE: "italic yellow",
}


def player_color(index: int) -> str:
    return PLAYER_COLORS[index % len(PLAYER_COLORS)]


def timer_style(remaining: int, total: int) -> str:
    pct = remaining / total if total else 0.0
    if pct <= 0.2:
        return "bold red"
    if pct <= 0.5:
        return "bold yellow"
    return "bold green"


def make_timer_bar(remaining: int, total: int, width: int = TIMER_WIDTH) -> Text:
    """Countdown bar, clamped to [0, width] cells."""
    pct = max(0.0, min(1.0, remaining / total)) if total else 0.0
    filled = round(pct * width)
    style = timer_style(remaining, total)
    bar = Text()
    bar.append("█" * filled, style=style)
    bar.append("░" * (width - filled), style="dim")
    bar.append(f" {remaining}s", style=style)
    return bar


def build_header(view: GameView) -> Panel:
    """Turn indicator, required letter and countdown."""
    header = Text()
    header.append("Turn: ", style="dim")
    header.append(view.current_player, style=f"bold {player_color(view.current_player_index)}")
    if view.last_letter:
        header.append("   Start with ", style="dim")
        header.append(f"'{view.last_letter}'", style="bold")
    if view.pending:
        header.append("   checking…", style="italic dim")
    header.append("\n")
    header.append_text(make_timer_bar(view.remaining, view.turn_seconds))
    return Panel(Align.center(header), title="[bold]Shiritori[/bold]", border_style="bright_white")


def build_scoreboard(view: GameView) -> Table:
    table = Table(show_header=True, header_style="bold", expand=True)
    for i, name in enumerate(view.players):
        table.add_column(name, justify="center", style=player_color(i))
    table.add_row(*(str(score) for score in view.scores))
    return table


def build_history(view: GameView) -> Panel:
    """Chronological word history."""
    if not view.used_words:
        body = Text("No words yet.", style="dim")
    else:
        body = Text()
        colors = {name: player_color(i) for i, name in enumerate(view.players)}
        for i, item in enumerate(view.used_words):
            if i:
                body.append("\n")
            body.append(f"{item.by}: ", style=colors.get(item.by, "white"))
            body.append(item.word, style="bold")
    return Panel(body, title="Word History", border_style="blue")


def build_feedback(outcome: Outcome | None) -> Text | None:
    if outcome is None or not outcome.message:
        return None
    return Text(outcome.message, style=_OUTCOME_STYLES.get(outcome.kind, ""))


def build_final_panel(view: GameView) -> Panel:
    """Final scores, shown once the game is over."""
    result = Text()
    result.append("Game Over. ", style="bold red")
    result.append("Final Scores — ", style="bold")
    parts = [f"{name}: {score}" for name, score in zip(view.players, view.scores)]
    result.append(", ".join(parts))
    result.append("\nType :reset to play again.", style="dim")
    return Panel(Align.center(result), border_style="red")


def render(view: GameView, feedback: Outcome | None = None) -> Group:
    """Build the full display."""
    parts = [build_header(view), build_scoreboard(view)]
    fb = build_feedback(feedback if feedback is not None else view.last_outcome)
    if fb is not None:
        parts.append(fb)
    if view.game_over:
        parts.append(build_final_panel(view))
    parts.append(build_history(view))
    return Group(*parts)
