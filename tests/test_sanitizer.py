"""Tests for input sanitization and normalization."""

from shiritori.core.sanitizer import normalize_word, sanitize_text


class TestSanitizeText:
    def test_passthrough_normal_text(self):
        assert sanitize_text("tiger") == "tiger"

    def test_strip_null_bytes(self):
        assert sanitize_text("ti\x00ger") == "tiger"

    def test_strip_control_characters(self):
        assert sanitize_text("ti\x01\x02ger") == "tiger"
        assert sanitize_text("ti\nger") == "ti\nger"

    def test_strip_zero_width_characters(self):
        assert sanitize_text("ti\u200bger") == "tiger"
        assert sanitize_text("\ufefftiger") == "tiger"

    def test_preserves_unicode(self):
        assert sanitize_text("café") == "café"


class TestNormalizeWord:
    def test_trims_and_lowercases(self):
        assert normalize_word("  TiGeR\t\n") == "tiger"

    def test_none_is_empty(self):
        assert normalize_word(None) == ""

    def test_hidden_characters_removed_before_trim(self):
        assert normalize_word("\u200b Rabbit \u200b") == "rabbit"
