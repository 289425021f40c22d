"""Text sanitization for player input.

Every submission passes through normalize_word before the rules see it.
"""

import re

# Control chars to strip (keep \t=0x09, \n=0x0a, \r=0x0d)
_CONTROL_RE = re.compile(
    r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]"
)

# Zero-width and BOM characters
_ZERO_WIDTH_RE = re.compile(
    r"[\u200b\u200c\u200d\u2060\ufeff\u00ad]"
)


def sanitize_text(text: str) -> str:
    """Strip control characters and zero-width chars. Preserves normal unicode."""
    text = _CONTROL_RE.sub("", text)
    text = _ZERO_WIDTH_RE.sub("", text)
    return text


def normalize_word(raw: str | None) -> str:
    """Return the canonical form of a submission: sanitized, trimmed, lowercased."""
    if raw is None:
        return ""
    return sanitize_text(raw).strip().lower()
