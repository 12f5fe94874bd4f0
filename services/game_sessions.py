"""Per-game sessions: the user actions each game accepts, wired to its engine."""
from __future__ import annotations

from typing import Any, Optional

from engines import DiagonalPlacementEngine, PuzzleConfiguration, RhymeAGramsEngine, TumblePunsEngine
from models.domain_models import Cell, GameType
from .session import GameSession


class DiagoneSession(GameSession):
    game = GameType.DIAGONE

    def build_engine(self, blob: Optional[str]) -> DiagonalPlacementEngine:
        return DiagonalPlacementEngine.from_json(PuzzleConfiguration.from_puzzle(self.puzzle), blob)

    def on_incorrect_cleanup(self) -> None:
        self.engine.clear_main_diagonal()

    def win_gaps(self) -> list[float]:
        # a wave across the 11 diagonals, then time for the last bounce to settle
        return [0.0] + [0.07] * 10 + [0.42]

    def place(self, piece_id: str, target_id: str) -> tuple[bool, Optional[str]]:
        if not self.can_play:
            return False, None
        ok, replaced = self.engine.place_or_replace(piece_id, target_id)
        if not ok:
            self._invalid_move()
            return False, None
        self._haptic("place")
        self._mutated()
        return True, replaced

    def remove_piece(self, target_id: str) -> Optional[str]:
        if not self.can_play:
            return None
        removed = self.engine.remove_piece(target_id)
        if removed is not None:
            self._mutated()
        return removed

    def remove_at(self, row: int, col: int) -> Optional[str]:
        """Tap on a board cell: take back the piece covering it, if any."""
        target_id = self.engine.occupied_target_at(Cell(row=row, col=col))
        if target_id is None:
            return None
        return self.remove_piece(target_id)

    def type_letter(self, letter: str) -> bool:
        if not self.can_play or not self.engine.type_main_letter(letter):
            return False
        self._mutated()
        return True

    def delete_letter(self) -> bool:
        if not self.can_play or not self.engine.delete_main_letter():
            return False
        self._mutated()
        return True

    def set_main_diagonal_letters(self, letters: list[str]) -> bool:
        if not self.can_play or not self.engine.set_main_diagonal(letters):
            return False
        self._mutated()
        return True

    def undo(self) -> bool:
        if not self.can_play or not self.engine.undo():
            return False
        self._mutated()
        return True

    def redo(self) -> bool:
        if not self.can_play or not self.engine.redo():
            return False
        self._mutated()
        return True

    def puzzle_view(self) -> dict[str, Any]:
        return {
            "board": self.engine.board,
            "availablePieces": [p.id for p in self.engine.available_pieces],
            "validTargets": {p.id: self.engine.valid_targets(p.id) for p in self.engine.pieces},
        }


class RhymeAGramsSession(GameSession):
    game = GameType.RHYMEAGRAMS

    def build_engine(self, blob: Optional[str]) -> RhymeAGramsEngine:
        return RhymeAGramsEngine.from_json(self.puzzle, blob)

    def win_gaps(self) -> list[float]:
        return [0.25] * 4 + [0.3]

    def select_slot(self, index: Optional[int]) -> bool:
        if not self.can_play or not self.engine.select_slot(index):
            return False
        self._schedule_save()
        self._notify()
        return True

    def type_letter(self, letter: str) -> bool:
        if not self.can_play or not self.engine.append_letter(letter):
            return False
        self._mutated()
        return True

    def delete_letter(self) -> bool:
        if not self.can_play or not self.engine.delete_letter():
            return False
        self._mutated()
        return True

    def puzzle_view(self) -> dict[str, Any]:
        return {
            "letters": list(self.puzzle.letters),
            "correctIndices": sorted(self.engine.correct_indices),
            "usedPositions": sorted(list(p) for p in self.engine.used_pyramid_positions),
        }


class TumblePunsSession(GameSession):
    game = GameType.TUMBLEPUNS

    def build_engine(self, blob: Optional[str]) -> TumblePunsEngine:
        return TumblePunsEngine.from_json(self.puzzle, blob)

    def on_incorrect_cleanup(self) -> None:
        self.engine.clear_final_answer()

    def win_gaps(self) -> list[float]:
        letters = self.puzzle.final_answer_length
        return [0.25] * 4 + [0.2] + [0.15] * letters + [0.3]

    def select_slot(self, index: Optional[int]) -> bool:
        if not self.can_play or not self.engine.select_word(index):
            return False
        self._schedule_save()
        self._notify()
        return True

    def select_final_answer(self) -> bool:
        if not self.can_play:
            return False
        self.engine.select_final_answer()
        self._schedule_save()
        self._notify()
        return True

    def type_letter(self, letter: str) -> bool:
        if not self.can_play or not self.engine.append_letter(letter):
            return False
        self._mutated()
        return True

    def delete_letter(self) -> bool:
        if not self.can_play or not self.engine.delete_letter():
            return False
        self._mutated()
        return True

    def puzzle_view(self) -> dict[str, Any]:
        return {
            "words": [
                {"scrambled": w.scrambled, "length": len(w.solution), "shadedIndices": list(w.shaded_indices)}
                for w in self.puzzle.words
            ],
            "definition": self.puzzle.definition,
            "answerPattern": self.puzzle.pattern,
            "correctIndices": sorted(self.engine.correct_indices),
            "shadedLetters": self.engine.shaded_letters,
        }


SESSION_CLASSES: dict[GameType, type[GameSession]] = {
    GameType.DIAGONE: DiagoneSession,
    GameType.RHYMEAGRAMS: RhymeAGramsSession,
    GameType.TUMBLEPUNS: TumblePunsSession,
}
