"""Validation and normalization helpers for typed letters and answers.

Uses the `regex` module so letter classes are Unicode-aware (`\\p{L}`).
"""
from typing import Any
import regex as re


LETTER_RE = re.compile(r"^\p{L}$", flags=re.UNICODE)
NON_LETTER_RE = re.compile(r"[^\p{L}]+", flags=re.UNICODE)


def normalize_letter(s: Any) -> str:
    """Return the upper-cased first character of `s` if it is a letter, else ''.

    Used for every single-key input, so stray whitespace, digits or
    multi-character strings never end up in an answer slot.
    """
    if not isinstance(s, str) or not s:
        return ""
    ch = s.strip()[:1].upper()
    if not ch or not LETTER_RE.match(ch):
        return ""
    return ch


def letters_only(s: str) -> str:
    """Strip everything but letters and upper-case the rest ("Old-Timer" -> "OLDTIMER")."""
    if not s:
        return ""
    return NON_LETTER_RE.sub("", s).upper()


def answer_pattern_for(answer: str) -> str:
    """Derive a blank pattern from an answer: letters become `_`, separators stay."""
    return "".join("_" if LETTER_RE.match(ch) else ch for ch in answer)


def sanitize_json(obj: Any, *, _depth: int = 0, _max_depth: int = 10) -> Any:
    """Recursively sanitize an input JSON-like structure.

    - Rejects keys that start with '$' or contain '..'.
    - Enforces max depth to avoid excessive recursion.
    - Returns a cleaned structure containing only dict/list/primitives.
    """
    if _depth > _max_depth:
        raise ValueError("Input too deeply nested")

    if isinstance(obj, dict):
        clean = {}
        for k, v in obj.items():
            if not isinstance(k, str):
                continue
            if k.startswith("$") or ".." in k:
                continue
            clean[k] = sanitize_json(v, _depth=_depth + 1, _max_depth=_max_depth)
        return clean
    elif isinstance(obj, list):
        return [sanitize_json(v, _depth=_depth + 1, _max_depth=_max_depth) for v in obj]
    elif isinstance(obj, (str, int, float, bool)) or obj is None:
        return obj
    else:
        raise ValueError("Unsupported JSON value type")
