"""Immutable puzzle definitions, one model per game.

These validate the date-keyed content files. Letters are upper-cased on
the way in; anything structurally wrong (wrong row count, wrong word
length) raises a pydantic `ValidationError` so the content store can skip
the entry.
"""
from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, field_validator, model_validator

from utils.validation import answer_pattern_for
from .domain_models import CamelModel


class FrozenCamelModel(CamelModel):
    model_config = ConfigDict(frozen=True)


class DiagonePuzzle(FrozenCamelModel):
    """Six six-letter row words. The pieces are cut from their diagonals."""
    row_words: tuple[str, ...]

    @field_validator("row_words")
    @classmethod
    def _six_words_of_six(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        words = tuple(w.strip().upper() for w in v)
        if len(words) != 6:
            raise ValueError("expected 6 row words")
        if any(len(w) != 6 for w in words):
            raise ValueError("every row word must have 6 letters")
        return words


class RhymeAGramsPuzzle(FrozenCamelModel):
    """Pyramid rows of 1/3/5/7 letters and four four-letter solutions."""
    letters: tuple[str, ...]
    solutions: tuple[str, ...]

    @field_validator("letters")
    @classmethod
    def _pyramid(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        rows = tuple(r.strip().upper() for r in v)
        if [len(r) for r in rows] != [1, 3, 5, 7]:
            raise ValueError("pyramid rows must have 1, 3, 5 and 7 letters")
        return rows

    @field_validator("solutions")
    @classmethod
    def _four_words(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        words = tuple(w.strip().upper() for w in v)
        if len(words) != 4 or any(len(w) != 4 for w in words):
            raise ValueError("expected 4 solutions of 4 letters")
        return words


class TumbleWord(FrozenCamelModel):
    solution: str
    # Filled in by the content store when the content omits it.
    scrambled: Optional[str] = None
    # 1-based letter positions feeding the final answer.
    shaded_indices: tuple[int, ...] = ()

    @field_validator("solution", "scrambled")
    @classmethod
    def _upper(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v is not None else None

    @model_validator(mode="after")
    def _shaded_in_range(self) -> "TumbleWord":
        if not self.solution:
            raise ValueError("solution must not be empty")
        if any(i < 1 or i > len(self.solution) for i in self.shaded_indices):
            raise ValueError(f"shaded index out of range for {self.solution}")
        if self.scrambled is not None and sorted(self.scrambled) != sorted(self.solution):
            raise ValueError(f"{self.scrambled} is not a scramble of {self.solution}")
        return self


class TumblePunsPuzzle(FrozenCamelModel):
    words: tuple[TumbleWord, ...]
    definition: str
    answer: str
    answer_pattern: Optional[str] = None

    @field_validator("answer")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.strip().upper()

    @model_validator(mode="after")
    def _check(self) -> "TumblePunsPuzzle":
        if len(self.words) != 4:
            raise ValueError("expected 4 words")
        return self

    @property
    def pattern(self) -> str:
        """Blank pattern for the final answer, e.g. `___-_____`."""
        return self.answer_pattern or answer_pattern_for(self.answer)

    @property
    def final_answer_length(self) -> int:
        return self.pattern.count("_")


__all__ = [
    "DiagonePuzzle",
    "RhymeAGramsPuzzle",
    "TumbleWord",
    "TumblePunsPuzzle",
]
