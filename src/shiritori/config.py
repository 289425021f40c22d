"""YAML configuration loading for Shiritori."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from shiritori.core.dictionary import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S
from shiritori.engine import (
    DEFAULT_MAX_CONSECUTIVE_TIMEOUTS,
    DEFAULT_MIN_WORD_LENGTH,
    DEFAULT_PLAYERS,
    DEFAULT_TURN_SECONDS,
)

_PROVIDERS = ("dictionaryapi", "wordlist")


class ConfigError(ValueError):
    """Raised when a config file has the right syntax but wrong content."""


@dataclass
class GameConfig:
    players: list[str] = field(default_factory=lambda: list(DEFAULT_PLAYERS))
    turn_seconds: int = DEFAULT_TURN_SECONDS
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH
    max_consecutive_timeouts: int = DEFAULT_MAX_CONSECUTIVE_TIMEOUTS
    advance_delay_ms: int = 300


@dataclass
class DictionaryConfig:
    provider: str = "dictionaryapi"
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    word_list: Path | None = None


@dataclass
class StorageConfig:
    state_path: Path | None = Path(".shiritori/state.json")
    log_dir: Path | None = Path("output/games")


@dataclass
class ShiritoriConfig:
    game: GameConfig = field(default_factory=GameConfig)
    dictionary: DictionaryConfig = field(default_factory=DictionaryConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


def default_config() -> ShiritoriConfig:
    """Built-in defaults, used when no config file is given."""
    return ShiritoriConfig()


def _optional_path(value) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser()


def _section(raw: dict, name: str, path: Path) -> dict:
    value = raw.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{path}: {name} must be a mapping")
    return value


def _number(section: dict, key: str, default, kind, where: str, path: Path):
    value = section.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"{path}: {where}.{key} must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(
            f"{path}: {where}.{key} must be a number, got {value!r}"
        ) from None


def _players(section: dict, path: Path) -> list[str]:
    players = section.get("players", DEFAULT_PLAYERS)
    if not isinstance(players, (list, tuple)):
        raise ConfigError(f"{path}: game.players must be a list of names")
    if not all(isinstance(p, (str, int)) and not isinstance(p, bool) for p in players):
        raise ConfigError(f"{path}: game.players entries must be names")
    return [str(p) for p in players]


def load_config(path: Path) -> ShiritoriConfig:
    """Load config from YAML file. Missing sections and keys use defaults."""
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    g = _section(raw, "game", path)
    d = _section(raw, "dictionary", path)
    s = _section(raw, "storage", path)
    defaults = StorageConfig()

    game = GameConfig(
        players=_players(g, path),
        turn_seconds=_number(g, "turn_seconds", DEFAULT_TURN_SECONDS, int, "game", path),
        min_word_length=_number(
            g, "min_word_length", DEFAULT_MIN_WORD_LENGTH, int, "game", path
        ),
        max_consecutive_timeouts=_number(
            g, "max_consecutive_timeouts", DEFAULT_MAX_CONSECUTIVE_TIMEOUTS, int, "game", path
        ),
        advance_delay_ms=_number(g, "advance_delay_ms", 300, int, "game", path),
    )
    dictionary = DictionaryConfig(
        provider=d.get("provider", "dictionaryapi"),
        base_url=d.get("base_url", DEFAULT_BASE_URL),
        timeout_s=_number(d, "timeout_s", DEFAULT_TIMEOUT_S, float, "dictionary", path),
        word_list=_optional_path(d.get("word_list")),
    )
    storage = StorageConfig(
        state_path=_optional_path(s.get("state_path", defaults.state_path)),
        log_dir=_optional_path(s.get("log_dir", defaults.log_dir)),
    )

    config = ShiritoriConfig(game=game, dictionary=dictionary, storage=storage)
    _validate(config, path)
    return config


def _validate(config: ShiritoriConfig, path: Path) -> None:
    game = config.game
    if len(game.players) != 2:
        raise ConfigError(f"{path}: game.players must name exactly 2 players")
    if len(set(game.players)) != len(game.players):
        raise ConfigError(f"{path}: game.players must be distinct")
    if game.turn_seconds < 1:
        raise ConfigError(f"{path}: game.turn_seconds must be positive")
    if game.min_word_length < 1:
        raise ConfigError(f"{path}: game.min_word_length must be positive")
    if game.max_consecutive_timeouts < 1:
        raise ConfigError(f"{path}: game.max_consecutive_timeouts must be positive")
    if game.advance_delay_ms < 0:
        raise ConfigError(f"{path}: game.advance_delay_ms must not be negative")

    dictionary = config.dictionary
    if dictionary.provider not in _PROVIDERS:
        raise ConfigError(
            f"{path}: dictionary.provider must be one of {', '.join(_PROVIDERS)}"
        )
    if dictionary.provider == "wordlist" and dictionary.word_list is None:
        raise ConfigError(f"{path}: dictionary.word_list is required for provider 'wordlist'")
    if dictionary.provider == "wordlist" and not dictionary.word_list.is_file():
        raise ConfigError(f"{path}: dictionary.word_list not found: {dictionary.word_list}")
