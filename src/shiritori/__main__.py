"""CLI entry point: python -m shiritori [config.yaml]"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console

from shiritori.clock import TurnClock
from shiritori.config import ConfigError, ShiritoriConfig, default_config, load_config
from shiritori.core.dictionary import (
    DictionaryApiValidator,
    WordValidator,
    load_word_list,
)
from shiritori.core.rules import Outcome, OutcomeKind
from shiritori.core.store import JsonFileStore, MemoryStore, StateStore
from shiritori.core.telemetry import TurnLogger
from shiritori.display import build_feedback, render
from shiritori.engine import TurnEngine

QUIT_COMMANDS = (":quit", ":q")
RESET_COMMAND = ":reset"


def build_validator(config: ShiritoriConfig) -> WordValidator:
    dcfg = config.dictionary
    if dcfg.provider == "wordlist":
        return load_word_list(dcfg.word_list)
    return DictionaryApiValidator(base_url=dcfg.base_url, timeout_s=dcfg.timeout_s)


def build_store(config: ShiritoriConfig) -> StateStore:
    if config.storage.state_path is None:
        return MemoryStore()
    return JsonFileStore(config.storage.state_path)


def build_engine(
    config: ShiritoriConfig,
    validator: WordValidator | None = None,
    store: StateStore | None = None,
    turn_log: TurnLogger | None = None,
) -> TurnEngine:
    """Wire an engine from config. Collaborators may be injected."""
    game = config.game
    return TurnEngine(
        validator=validator or build_validator(config),
        players=game.players,
        store=store if store is not None else build_store(config),
        turn_seconds=game.turn_seconds,
        min_word_length=game.min_word_length,
        max_consecutive_timeouts=game.max_consecutive_timeouts,
        turn_log=turn_log,
    )


def _prompt(engine: TurnEngine) -> str:
    view = engine.view()
    if view.game_over:
        return "[dim](game over)[/dim] > "
    letter = f" '{view.last_letter}'…" if view.last_letter else ""
    return f"[bold]{view.current_player}[/bold]{letter} ({view.remaining}s) > "


def play(engine: TurnEngine, console: Console, advance_delay_s: float = 0.3) -> None:
    """Hot-seat game loop. Returns when the players quit."""

    def on_clock_outcome(outcome: Outcome) -> None:
        feedback = build_feedback(outcome)
        if feedback is not None:
            console.print()
            console.print(feedback)
        if outcome.kind is OutcomeKind.GAME_OVER:
            console.print(render(engine.view(), outcome))

    console.print(render(engine.view()))
    console.print(f"[dim]Commands: {RESET_COMMAND}, {QUIT_COMMANDS[0]}[/dim]")

    with TurnClock(engine, advance_delay_s=advance_delay_s, on_outcome=on_clock_outcome):
        while True:
            turn_id = engine.turn_id
            try:
                line = console.input(_prompt(engine))
            except (EOFError, KeyboardInterrupt):
                console.print()
                break

            command = line.strip().lower()
            if command in QUIT_COMMANDS:
                break
            if command == RESET_COMMAND:
                engine.reset()
                console.print(render(engine.view()))
                continue

            # A line typed during a turn that has since ended is not replayed.
            outcome = engine.submit(line, turn_id=turn_id)
            console.print(render(engine.view(), outcome))


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="shiritori",
        description="Two-player Shiritori word-chaining game",
    )
    parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        default=os.environ.get("SHIRITORI_CONFIG"),
        help="Path to YAML config file (default: $SHIRITORI_CONFIG or built-in defaults)",
    )
    parser.add_argument(
        "--state",
        type=Path,
        default=None,
        help="Saved game file (overrides storage.state_path)",
    )
    parser.add_argument(
        "--no-save",
        action="store_true",
        default=False,
        help="Keep the game in memory only",
    )
    parser.add_argument(
        "--word-list",
        type=Path,
        default=None,
        help="Validate against a local word list instead of the dictionary API",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        default=False,
        help="Discard any saved game and start fresh",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Log engine and storage activity to stderr",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.config is not None:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        try:
            config = load_config(config_path)
        except ConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
    else:
        config = default_config()

    if args.state is not None:
        config.storage.state_path = args.state
    if args.no_save:
        config.storage.state_path = None
    if args.word_list is not None:
        if not args.word_list.exists():
            print(f"Error: word list not found: {args.word_list}", file=sys.stderr)
            sys.exit(1)
        config.dictionary.provider = "wordlist"
        config.dictionary.word_list = args.word_list

    turn_log = None
    if config.storage.log_dir is not None:
        game_id = f"shiritori-{datetime.now(timezone.utc):%Y%m%d-%H%M%S}"
        turn_log = TurnLogger(config.storage.log_dir, game_id)

    store = build_store(config)
    if args.reset:
        store.clear()
    engine = build_engine(config, store=store, turn_log=turn_log)

    console = Console()
    console.print(f"Players: {', '.join(config.game.players)}")
    if turn_log is not None:
        console.print(f"[dim]Turn log: {turn_log.file_path}[/dim]")
    play(engine, console, advance_delay_s=config.game.advance_delay_ms / 1000)


if __name__ == "__main__":
    main()
