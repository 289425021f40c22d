"""WordValidator — uniform interface for dictionary lookups.

Provides ABC and concrete implementations:
- DictionaryApiValidator: HTTP lookup against a public dictionary API
- WordListValidator: offline, backed by an in-memory word set

Validators answer a plain bool. Transport failures are logged and
reported as "not a word"; they never reach the engine.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.dictionaryapi.dev/api/v2/entries/en/"
DEFAULT_TIMEOUT_S = 8.0


class WordValidator(ABC):
    """Abstract base for all word validators."""

    @abstractmethod
    def validate(self, word: str) -> bool:
        """Return True if ``word`` (lowercase) is a recognized word."""


class DictionaryApiValidator(WordValidator):
    """Validator backed by a dictionaryapi.dev-compatible endpoint.

    A word is valid when the endpoint answers 2xx with a non-empty JSON
    list. Answers are cached for the lifetime of the instance, so repeated
    or duplicate attempts never hit the network twice.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url.endswith("/"):
            base_url += "/"
        self._base_url = base_url
        self._timeout_s = timeout_s
        self._session = session
        self._cache: dict[str, bool] = {}

    def validate(self, word: str) -> bool:
        key = word.lower()
        if key in self._cache:
            return self._cache[key]
        valid = self._lookup(key)
        if valid is not None:
            self._cache[key] = valid
            return valid
        return False

    def _lookup(self, key: str) -> bool | None:
        """Query the endpoint. Returns None when the answer must not be cached."""
        url = self._base_url + quote(key, safe="")
        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(url, timeout=self._timeout_s)
        except requests.RequestException as exc:
            logger.warning("Dictionary lookup failed for %r: %s", key, exc)
            return None

        if response.status_code == 404:
            return False
        if not response.ok:
            logger.warning(
                "Dictionary lookup for %r returned HTTP %s", key, response.status_code
            )
            return None

        try:
            body = response.json()
        except ValueError as exc:
            logger.warning("Dictionary returned undecodable body for %r: %s", key, exc)
            return None
        return isinstance(body, list) and len(body) > 0


class WordListValidator(WordValidator):
    """Offline validator for tests and play without network access."""

    def __init__(self, words) -> None:
        self._words = frozenset(w.strip().lower() for w in words if w.strip())

    def __len__(self) -> int:
        return len(self._words)

    def validate(self, word: str) -> bool:
        if not word:
            return False
        return word.lower() in self._words


def load_word_list(path: Path) -> WordListValidator:
    """Load a one-word-per-line file. Blank lines and ``#`` comments are skipped."""
    words = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            words.append(line)
    return WordListValidator(words)
