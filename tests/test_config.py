"""Tests for YAML config loading."""

from pathlib import Path

import pytest

from shiritori.config import ConfigError, default_config, load_config

EXAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "shiritori.yaml.example"


def _write(tmp_path, text):
    path = tmp_path / "shiritori.yaml"
    path.write_text(text)
    return path


class TestDefaults:
    def test_default_config(self):
        config = default_config()
        assert config.game.players == ["Player 1", "Player 2"]
        assert config.game.turn_seconds == 30
        assert config.game.min_word_length == 4
        assert config.game.max_consecutive_timeouts == 2
        assert config.game.advance_delay_ms == 300
        assert config.dictionary.provider == "dictionaryapi"
        assert config.storage.state_path == Path(".shiritori/state.json")

    def test_defaults_are_not_shared(self):
        a = default_config()
        a.game.players.append("Player 3")
        assert default_config().game.players == ["Player 1", "Player 2"]


class TestLoadConfig:
    def test_example_config_loads(self):
        config = load_config(EXAMPLE_CONFIG)
        assert config.game.turn_seconds == 30
        assert config.dictionary.base_url.startswith("https://api.dictionaryapi.dev/")
        assert config.dictionary.timeout_s == 8.0
        assert config.dictionary.word_list is None
        assert config.storage.log_dir == Path("output/games")

    def test_empty_file_uses_defaults(self, tmp_path):
        config = load_config(_write(tmp_path, ""))
        assert config == default_config()

    def test_partial_sections(self, tmp_path):
        config = load_config(_write(tmp_path, "game:\n  turn_seconds: 10\n"))
        assert config.game.turn_seconds == 10
        assert config.game.min_word_length == 4

    def test_custom_players(self, tmp_path):
        config = load_config(_write(tmp_path, "game:\n  players: [Ana, Ben]\n"))
        assert config.game.players == ["Ana", "Ben"]

    def test_null_storage_paths(self, tmp_path):
        config = load_config(
            _write(tmp_path, "storage:\n  state_path: null\n  log_dir: null\n")
        )
        assert config.storage.state_path is None
        assert config.storage.log_dir is None

    def test_wordlist_provider(self, tmp_path):
        words = tmp_path / "words.txt"
        words.write_text("tiger\n")
        config = load_config(
            _write(tmp_path, f"dictionary:\n  provider: wordlist\n  word_list: {words}\n")
        )
        assert config.dictionary.provider == "wordlist"
        assert config.dictionary.word_list == words

    def test_numbers_given_as_strings(self, tmp_path):
        config = load_config(
            _write(tmp_path, "game:\n  turn_seconds: '15'\ndictionary:\n  timeout_s: '2.5'\n")
        )
        assert config.game.turn_seconds == 15
        assert config.dictionary.timeout_s == 2.5


class TestConfigErrors:
    @pytest.mark.parametrize("text", [
        "- just\n- a list\n",
        "game:\n  players: [Solo]\n",
        "game:\n  players: [Ana, Ana]\n",
        "game:\n  turn_seconds: 0\n",
        "game:\n  min_word_length: 0\n",
        "game:\n  max_consecutive_timeouts: 0\n",
        "game:\n  advance_delay_ms: -1\n",
        "dictionary:\n  provider: oracle\n",
        "dictionary:\n  provider: wordlist\n",
        "game:\n  players: null\n",
        "game:\n  players: 5\n",
        "game:\n  players: [[Ana], Ben]\n",
        "game:\n  turn_seconds: abc\n",
        "game:\n  turn_seconds: true\n",
        "game:\n  min_word_length: [4]\n",
        "game: 30\n",
        "dictionary:\n  timeout_s: soon\n",
        "dictionary:\n  provider: wordlist\n  word_list: /nonexistent/words.txt\n",
    ])
    def test_rejected(self, tmp_path, text):
        with pytest.raises(ConfigError):
            load_config(_write(tmp_path, text))

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)

    def test_error_names_the_key(self, tmp_path):
        with pytest.raises(ConfigError, match="game.turn_seconds"):
            load_config(_write(tmp_path, "game:\n  turn_seconds: abc\n"))
