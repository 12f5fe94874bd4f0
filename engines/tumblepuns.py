"""TumblePuns engine: unscramble four words, then the shaded letters into the pun."""
from __future__ import annotations

from typing import Optional
import logging

from pydantic import ValidationError

from models.domain_models import Completion, TumblePunsState
from models.puzzle_models import TumblePunsPuzzle
from utils.validation import letters_only, normalize_letter

logger = logging.getLogger(__name__)


class TumblePunsEngine:

    def __init__(self, puzzle: TumblePunsPuzzle, saved: Optional[TumblePunsState] = None):
        self.puzzle = puzzle
        self._words = [""] * len(puzzle.words)
        self._final = ""
        self._selected_word: Optional[int] = 0
        self._final_selected = False
        if saved is not None:
            if self.is_compatible(saved):
                self.restore(saved)
            else:
                logger.warning("discarding saved tumblepuns state: wrong shape")

    @classmethod
    def from_json(cls, puzzle: TumblePunsPuzzle, blob: Optional[str]) -> "TumblePunsEngine":
        if not blob:
            return cls(puzzle)
        try:
            saved = TumblePunsState.model_validate_json(blob)
        except (ValidationError, ValueError):
            logger.warning("discarding corrupt tumblepuns state blob")
            return cls(puzzle)
        return cls(puzzle, saved)

    def is_compatible(self, state: TumblePunsState) -> bool:
        words = self.puzzle.words
        if len(state.word_answers) != len(words):
            return False
        if any(len(a) > len(w.solution) for a, w in zip(state.word_answers, words)):
            return False
        if len(state.final_answer) > self.puzzle.final_answer_length:
            return False
        i = state.selected_word_index
        return i is None or 0 <= i < len(words)

    @property
    def state(self) -> TumblePunsState:
        return TumblePunsState(
            word_answers=list(self._words),
            final_answer=self._final,
            selected_word_index=self._selected_word,
            is_final_answer_selected=self._final_selected,
        )

    def to_json(self) -> str:
        return self.state.to_json()

    def restore(self, state: TumblePunsState) -> None:
        self._words = [a.upper() for a in state.word_answers]
        self._final = state.final_answer.upper()
        self._selected_word = state.selected_word_index
        self._final_selected = state.is_final_answer_selected and state.selected_word_index is None
        if self._selected_word is None and not self._final_selected:
            self._selected_word = 0

    def reset(self) -> None:
        self._words = [""] * len(self.puzzle.words)
        self._final = ""
        self._selected_word = 0
        self._final_selected = False

    @property
    def word_answers(self) -> list[str]:
        return list(self._words)

    @property
    def final_answer(self) -> str:
        return self._final

    @property
    def selected_word_index(self) -> Optional[int]:
        return self._selected_word

    @property
    def is_final_answer_selected(self) -> bool:
        return self._final_selected

    # --- selection ---------------------------------------------------------

    def select_word(self, index: Optional[int]) -> bool:
        """Select word slot `index`. Exactly one slot or the final answer is always selected, so None is refused."""
        if index is None or not 0 <= index < len(self._words):
            return False
        self._selected_word = index
        self._final_selected = False
        return True

    def select_final_answer(self) -> None:
        self._selected_word = None
        self._final_selected = True

    # --- input -------------------------------------------------------------

    def append_letter(self, letter: str) -> bool:
        ch = normalize_letter(letter)
        if not ch:
            return False
        if self._final_selected:
            if len(self._final) >= self.puzzle.final_answer_length:
                return False
            self._final += ch
            return True
        i = self._selected_word
        if i is None or len(self._words[i]) >= len(self.puzzle.words[i].solution):
            return False
        self._words[i] += ch
        return True

    def delete_letter(self) -> bool:
        if self._final_selected:
            if not self._final:
                return False
            self._final = self._final[:-1]
            return True
        i = self._selected_word
        if i is None or not self._words[i]:
            return False
        self._words[i] = self._words[i][:-1]
        return True

    def clear_final_answer(self) -> None:
        self._final = ""

    # --- checks ------------------------------------------------------------

    @property
    def correct_indices(self) -> set[int]:
        return {
            i for i, (answer, word) in enumerate(zip(self._words, self.puzzle.words))
            if answer == word.solution
        }

    @property
    def words_solved(self) -> bool:
        return len(self.correct_indices) == len(self.puzzle.words)

    @property
    def shaded_letters(self) -> str:
        """Shaded letters of the correctly solved words, in word order."""
        letters = []
        for i in sorted(self.correct_indices):
            word = self.puzzle.words[i]
            letters.extend(word.solution[pos - 1] for pos in word.shaded_indices)
        return "".join(letters)

    @property
    def is_complete(self) -> bool:
        return (
            all(len(a) == len(w.solution) for a, w in zip(self._words, self.puzzle.words))
            and len(self._final) == self.puzzle.final_answer_length
        )

    @property
    def is_solved(self) -> bool:
        return self.words_solved and letters_only(self._final) == letters_only(self.puzzle.answer)

    @property
    def completion(self) -> Completion:
        if not self.is_complete:
            return Completion.FILLING
        return Completion.SOLVED if self.is_solved else Completion.INCORRECT
