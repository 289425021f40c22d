"""Shared test fixtures for shiritori."""

import threading

import pytest

from shiritori.core.dictionary import WordListValidator, WordValidator
from shiritori.core.store import MemoryStore
from shiritori.engine import TurnEngine

WORDS = [
    "tiger", "rabbit", "tapir", "robin", "newt", "tern",
    "dog", "goat", "cat", "toad", "eagle", "emu",
]


class AcceptAllValidator(WordValidator):
    """Says yes to everything and counts calls."""

    def __init__(self):
        self.calls: list[str] = []

    def validate(self, word):
        self.calls.append(word)
        return True


class GatedValidator(WordValidator):
    """Blocks inside validate() until released, to hold a submission pending."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.entered = threading.Event()
        self.release = threading.Event()

    def validate(self, word):
        self.entered.set()
        self.release.wait(timeout=5)
        return self.answer


@pytest.fixture
def validator():
    return WordListValidator(WORDS)


@pytest.fixture
def store():
    return MemoryStore(record=True)


@pytest.fixture
def engine(validator, store):
    return TurnEngine(validator=validator, store=store)


@pytest.fixture
def short_engine(validator, store):
    """Engine that accepts three-letter words."""
    return TurnEngine(validator=validator, store=store, min_word_length=3)


@pytest.fixture
def accept_all():
    return AcceptAllValidator()


@pytest.fixture
def gated():
    v = GatedValidator()
    yield v
    v.release.set()
