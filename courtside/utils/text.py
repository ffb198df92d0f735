"""Small text helpers shared by detectors and action builders."""

import re

_WORD_RE = re.compile(r"[\w']+")


def truncate(text: str, length: int) -> str:
    """Cut text to length, marking the cut with an ellipsis."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def words(text: str) -> list[str]:
    """Lowercase word tokens, punctuation dropped."""
    return _WORD_RE.findall(text.lower())


def last_name(full_name: str) -> str:
    """Return the last whitespace-separated part of a name."""
    parts = full_name.split()
    return parts[-1] if parts else full_name
