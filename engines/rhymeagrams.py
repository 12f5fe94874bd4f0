"""RhymeAGrams engine: four four-letter rhyming words drawn from a letter pyramid."""
from __future__ import annotations

from typing import Optional
import logging

from pydantic import ValidationError

from models.domain_models import Completion, RhymeAGramsState
from models.puzzle_models import RhymeAGramsPuzzle
from utils.validation import normalize_letter

logger = logging.getLogger(__name__)

SLOT_COUNT = 4
WORD_LENGTH = 4


class RhymeAGramsEngine:
    """Answer slots plus a selection cursor.

    Answers are order independent: any slot may hold any of the four
    solutions, but a solution only counts once, so typing the same word
    into two slots marks just the first of them correct.
    """

    def __init__(self, puzzle: RhymeAGramsPuzzle, saved: Optional[RhymeAGramsState] = None):
        self.puzzle = puzzle
        self._answers = [""] * SLOT_COUNT
        self._selected: Optional[int] = 0
        if saved is not None:
            if self.is_compatible(saved):
                self.restore(saved)
            else:
                logger.warning("discarding saved rhymeagrams state: wrong shape")

    @classmethod
    def from_json(cls, puzzle: RhymeAGramsPuzzle, blob: Optional[str]) -> "RhymeAGramsEngine":
        if not blob:
            return cls(puzzle)
        try:
            saved = RhymeAGramsState.model_validate_json(blob)
        except (ValidationError, ValueError):
            logger.warning("discarding corrupt rhymeagrams state blob")
            return cls(puzzle)
        return cls(puzzle, saved)

    @staticmethod
    def is_compatible(state: RhymeAGramsState) -> bool:
        if len(state.answers) != SLOT_COUNT:
            return False
        if any(len(a) > WORD_LENGTH for a in state.answers):
            return False
        return state.selected_slot is None or 0 <= state.selected_slot < SLOT_COUNT

    @property
    def state(self) -> RhymeAGramsState:
        return RhymeAGramsState(answers=list(self._answers), selected_slot=self._selected)

    def to_json(self) -> str:
        return self.state.to_json()

    def restore(self, state: RhymeAGramsState) -> None:
        self._answers = [a.upper() for a in state.answers]
        self._selected = state.selected_slot

    def reset(self) -> None:
        self._answers = [""] * SLOT_COUNT
        self._selected = 0

    @property
    def answers(self) -> list[str]:
        return list(self._answers)

    @property
    def selected_slot(self) -> Optional[int]:
        return self._selected

    # --- input -------------------------------------------------------------

    def select_slot(self, index: Optional[int]) -> bool:
        if index is not None and not 0 <= index < SLOT_COUNT:
            return False
        self._selected = index
        return True

    def append_letter(self, letter: str) -> bool:
        """Append to the selected slot; a slot that fills up moves the cursor on."""
        ch = normalize_letter(letter)
        i = self._selected
        if not ch or i is None or len(self._answers[i]) >= WORD_LENGTH:
            return False
        self._answers[i] += ch
        if len(self._answers[i]) >= WORD_LENGTH:
            for step in range(1, SLOT_COUNT):
                nxt = (i + step) % SLOT_COUNT
                if len(self._answers[nxt]) < WORD_LENGTH:
                    self._selected = nxt
                    break
        return True

    def delete_letter(self) -> bool:
        """Drop the last letter; from an empty slot, step back to the previous non-empty one."""
        i = self._selected
        if i is None:
            return False
        if not self._answers[i]:
            for step in range(1, SLOT_COUNT):
                prev = (i - step) % SLOT_COUNT
                if self._answers[prev]:
                    self._selected = i = prev
                    break
            else:
                return False
        self._answers[i] = self._answers[i][:-1]
        return True

    # --- checks ------------------------------------------------------------

    @property
    def correct_indices(self) -> set[int]:
        remaining = list(self.puzzle.solutions)
        correct = set()
        for index, answer in enumerate(self._answers):
            if len(answer) == WORD_LENGTH and answer in remaining:
                remaining.remove(answer)
                correct.add(index)
        return correct

    @property
    def is_complete(self) -> bool:
        return all(len(a) == WORD_LENGTH for a in self._answers)

    @property
    def is_solved(self) -> bool:
        return len(self.correct_indices) == SLOT_COUNT

    @property
    def completion(self) -> Completion:
        if not self.is_complete:
            return Completion.FILLING
        return Completion.SOLVED if self.is_solved else Completion.INCORRECT

    @property
    def used_pyramid_positions(self) -> set[tuple[int, int]]:
        """Pyramid `(row, col)` positions consumed by the letters typed so far.

        Each typed letter claims the first unclaimed matching position, top
        row first, so the pyramid can grey out letters already in use.
        """
        used: set[tuple[int, int]] = set()
        for answer in self._answers:
            for ch in answer:
                for r, row in enumerate(self.puzzle.letters):
                    hit = next((c for c, p in enumerate(row) if p == ch and (r, c) not in used), None)
                    if hit is not None:
                        used.add((r, hit))
                        break
        return used
