"""TurnLogger — JSONL game logging.

One logger per game session. Writes one JSONL line per completed turn plus
a game summary line when the game ends. All entries include schema
version and game ID.
"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from pathlib import Path

import shiritori

_SCHEMA_VERSION = "1.0.0"


@dataclass
class TurnRecord:
    """One completed turn (accept, penalty or timeout)."""

    turn_number: int
    player: str
    word: str | None
    outcome: str
    reason: str | None
    message: str
    scores: list[int]
    remaining_s: int
    consecutive_timeouts: int
    game_over: bool = False


class TurnLogger:
    """Writes JSONL telemetry for a game session."""

    def __init__(self, output_dir: Path, game_id: str):
        self._output_dir = Path(output_dir)
        self._game_id = game_id
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._output_dir / f"{game_id}.jsonl"

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def game_id(self) -> str:
        return self._game_id

    def log_turn(self, record: TurnRecord) -> None:
        entry = asdict(record)
        entry["schema_version"] = _SCHEMA_VERSION
        entry["game_id"] = self._game_id
        entry["timestamp"] = datetime.now(timezone.utc).isoformat()
        entry["engine_version"] = shiritori.__version__
        self._append(entry)

    def finalize_game(
        self,
        scores: dict[str, int],
        words_played: int,
        extra: dict | None = None,
    ) -> None:
        entry = {
            "schema_version": _SCHEMA_VERSION,
            "record_type": "game_summary",
            "game_id": self._game_id,
            "final_scores": scores,
            "words_played": words_played,
            "engine_version": shiritori.__version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if extra:
            entry.update(extra)
        self._append(entry)

    def _append(self, entry: dict) -> None:
        with open(self._file_path, "a") as f:
            f.write(json.dumps(entry, default=str) + "\n")
