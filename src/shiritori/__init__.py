"""Shiritori — two-player word-chaining game with a turn clock."""

__version__ = "0.1.0"
