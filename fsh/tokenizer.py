"""Splitting of command lines into tokens."""

from __future__ import annotations

import re

MAX_TOKENS = 100


def tokenize(line: str, delimiter: str = " ") -> list[str]:
    """Split ``line`` on any character of ``delimiter``, dropping empty tokens.

    Raises ``ValueError`` when the line holds more than ``MAX_TOKENS`` tokens.
    """
    if not delimiter:
        raise ValueError("delimiter must not be empty")
    pattern = "[" + re.escape(delimiter) + "]+"
    tokens = [token for token in re.split(pattern, line) if token]
    if len(tokens) > MAX_TOKENS:
        raise ValueError(f"too many tokens (maximum is {MAX_TOKENS})")
    return tokens