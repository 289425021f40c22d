"""StateStore — load/save of the persisted game snapshot.

Storage is best-effort: the engine must behave the same whether or not a
save lands. JsonFileStore logs and swallows I/O and decode errors.

Snapshot format (camelCase keys, JSON-compatible values)::

    {"currentPlayerIndex": 0, "scores": [0, 0], "usedWords": [],
     "lastLetter": null, "gameOver": false, "consecutiveTimeouts": 0}
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from jsonschema import Draft7Validator

from shiritori.core.schemas import SNAPSHOT_SCHEMA_PATH, load_schema

logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS = (
    "currentPlayerIndex",
    "scores",
    "usedWords",
    "lastLetter",
    "gameOver",
    "consecutiveTimeouts",
)

_field_validators: dict[str, Draft7Validator] | None = None


def _validators() -> dict[str, Draft7Validator]:
    global _field_validators
    if _field_validators is None:
        schema = load_schema(SNAPSHOT_SCHEMA_PATH)
        _field_validators = {
            name: Draft7Validator(sub)
            for name, sub in schema["properties"].items()
        }
    return _field_validators


def valid_fields(raw) -> dict:
    """Return the subset of ``raw`` whose fields pass the snapshot schema.

    Each field is checked on its own so one corrupt value never costs the
    others. Unknown keys are dropped.
    """
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning("Ignoring stored snapshot of type %s", type(raw).__name__)
        return {}

    fields = {}
    validators = _validators()
    for name in SNAPSHOT_FIELDS:
        if name not in raw:
            continue
        error = next(iter(validators[name].iter_errors(raw[name])), None)
        if error is not None:
            logger.warning("Stored %s is invalid, using default: %s", name, error.message)
            continue
        fields[name] = raw[name]
    return fields


class StateStore(ABC):
    """Abstract base for snapshot storage."""

    @abstractmethod
    def load(self) -> dict | None:
        """Return the last saved snapshot, or None if there is none."""

    @abstractmethod
    def save(self, snapshot: dict) -> None:
        """Persist a full snapshot, replacing the previous one."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored snapshot, if any."""


class MemoryStore(StateStore):
    """In-process store.

    With ``record=True`` every saved snapshot is also kept in ``saves``,
    in order, for inspection.
    """

    def __init__(self, initial: dict | None = None, record: bool = False) -> None:
        self._current = json.loads(json.dumps(initial)) if initial is not None else None
        self._record = record
        self.saves: list[dict] = []

    def load(self) -> dict | None:
        if self._current is None:
            return None
        return json.loads(json.dumps(self._current))

    def save(self, snapshot: dict) -> None:
        copy = json.loads(json.dumps(snapshot))
        self._current = copy
        if self._record:
            self.saves.append(copy)

    def clear(self) -> None:
        self._current = None


class JsonFileStore(StateStore):
    """Snapshot kept in a single JSON file, replaced atomically on save."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict | None:
        try:
            with open(self._path) as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Could not read game state from %s: %s", self._path, exc)
            return None

    def save(self, snapshot: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._write(snapshot)
        except OSError as exc:
            logger.warning("Could not save game state to %s: %s", self._path, exc)

    def clear(self) -> None:
        """Delete the stored snapshot, if any."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.warning("Could not delete %s: %s", self._path, exc)

    def _write(self, snapshot: dict) -> None:
        """Write atomically (tmp + rename)."""
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(snapshot, f, indent=2)
            os.replace(tmp_path, self._path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
