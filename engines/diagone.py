"""Diagone placement engine.

The 6x6 board is filled by dropping word-piece chips onto the ten diagonals
parallel to the main diagonal (two per length 1-5, one above and one below),
then typing the six letters of the main diagonal itself. The puzzle is
solved when every row spells its expected word.

Targets and pieces live in two id-indexed maps. A target stores the id of
its piece and the piece stores the id of its target; every mutation goes
through `place_or_replace` / `remove_piece` / `reset` / `restore`, which
keep both sides in step. The board is never edited directly: it is rebuilt
from the placements and the main diagonal after every change.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging

from pydantic import ValidationError

from models.domain_models import (
    Cell,
    Completion,
    DiagonalTarget,
    DiagoneState,
    MainDiagonal,
    Piece,
)
from models.puzzle_models import DiagonePuzzle
from utils.validation import normalize_letter

logger = logging.getLogger(__name__)

GRID_SIZE = 6


def main_diagonal_cells() -> tuple[Cell, ...]:
    return tuple(Cell(row=i, col=i) for i in range(GRID_SIZE))


def target_diagonals() -> tuple[tuple[Cell, ...], ...]:
    """All diagonals parallel to the main one, sorted by length then start cell.

    Within a length the upper diagonal (starting on row 0) sorts before the
    lower one (starting on column 0).
    """
    diagonals = []
    for offset in range(1, GRID_SIZE):
        upper = tuple(Cell(row=i, col=i + offset) for i in range(GRID_SIZE - offset))
        lower = tuple(Cell(row=i + offset, col=i) for i in range(GRID_SIZE - offset))
        diagonals.extend([upper, lower])
    diagonals.sort(key=lambda d: (len(d), d[0].row, d[0].col))
    return tuple(diagonals)


def piece_letters_from_rows(row_words: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Cut the ten piece strings out of the six row words.

    Order is 1A, 1B, 2A, 2B, ... 5A, 5B, matching `target_diagonals()`, so
    the n-th piece belongs on the n-th target.
    """
    return tuple(
        "".join(row_words[c.row][c.col] for c in diagonal)
        for diagonal in target_diagonals()
    )


def target_ids(diagonals: tuple[tuple[Cell, ...], ...]) -> list[str]:
    ids = []
    seen: dict[int, int] = {}
    for diagonal in diagonals:
        n = seen.get(len(diagonal), 0)
        seen[len(diagonal)] = n + 1
        ids.append(f"d_len{len(diagonal)}_{'ab'[n % 2]}")
    return ids


@dataclass(frozen=True)
class PuzzleConfiguration:
    """Structure of one Diagone puzzle: target cells, piece letters and answers."""
    main_diagonal: tuple[Cell, ...]
    diagonals: tuple[tuple[Cell, ...], ...]
    piece_letters: tuple[str, ...]
    row_words: tuple[str, ...]

    @classmethod
    def from_puzzle(cls, puzzle: DiagonePuzzle) -> "PuzzleConfiguration":
        return cls(
            main_diagonal=main_diagonal_cells(),
            diagonals=target_diagonals(),
            piece_letters=piece_letters_from_rows(puzzle.row_words),
            row_words=tuple(w.upper() for w in puzzle.row_words),
        )


class DiagonalPlacementEngine:

    def __init__(self, configuration: PuzzleConfiguration, saved: Optional[DiagoneState] = None):
        self.configuration = configuration
        self._targets: dict[str, DiagonalTarget] = {}
        self._pieces: dict[str, Piece] = {}
        self._main: list[str] = []
        self._board: list[list[str]] = []
        self._history: list[DiagoneState] = []
        self._future: list[DiagoneState] = []
        self._load(self._initial_state())

        if saved is not None:
            if self.is_compatible(saved):
                self._load(saved)
            else:
                logger.warning("discarding saved diagone state: does not match puzzle configuration")

    @classmethod
    def from_json(cls, configuration: PuzzleConfiguration, blob: Optional[str]) -> "DiagonalPlacementEngine":
        """Build an engine from a persisted blob, starting fresh if it is unusable."""
        if not blob:
            return cls(configuration)
        try:
            saved = DiagoneState.model_validate_json(blob)
        except (ValidationError, ValueError):
            logger.warning("discarding corrupt diagone state blob")
            return cls(configuration)
        return cls(configuration, saved)

    # -------------------------------------------------
    # State
    # -------------------------------------------------

    def _initial_state(self) -> DiagoneState:
        cfg = self.configuration
        targets = [
            DiagonalTarget(id=tid, cells=list(cells))
            for tid, cells in zip(target_ids(cfg.diagonals), cfg.diagonals)
        ]
        pieces = [Piece(id=f"p{i + 1}", letters=letters) for i, letters in enumerate(cfg.piece_letters)]
        main = MainDiagonal(cells=list(cfg.main_diagonal), value=[""] * len(cfg.main_diagonal))
        return DiagoneState(targets=targets, pieces=pieces, main_diagonal=main)

    def _load(self, state: DiagoneState) -> None:
        self._targets = {t.id: t.model_copy(deep=True) for t in state.targets}
        self._pieces = {p.id: p.model_copy(deep=True) for p in state.pieces}
        self._main = list(state.main_diagonal.value)
        self._recompute_board()

    @property
    def state(self) -> DiagoneState:
        """Deep copy of the current state, safe to persist or keep for undo."""
        return DiagoneState(
            targets=[t.model_copy(deep=True) for t in self._targets.values()],
            pieces=[p.model_copy(deep=True) for p in self._pieces.values()],
            main_diagonal=MainDiagonal(cells=list(self.configuration.main_diagonal), value=list(self._main)),
        )

    def to_json(self) -> str:
        return self.state.to_json()

    def is_compatible(self, state: DiagoneState) -> bool:
        """True if `state` was produced for this configuration and is internally consistent."""
        cfg = self.configuration
        if len(state.targets) != len(cfg.diagonals) or len(state.pieces) != len(cfg.piece_letters):
            return False
        if len(state.main_diagonal.value) != len(cfg.main_diagonal):
            return False
        fresh = self._initial_state()
        if [(t.id, t.cells) for t in state.targets] != [(t.id, t.cells) for t in fresh.targets]:
            return False
        if [(p.id, p.letters) for p in state.pieces] != [(p.id, p.letters) for p in fresh.pieces]:
            return False
        return links_consistent(state)

    def _snapshot(self) -> None:
        self._history.append(self.state)
        self._future.clear()

    # -------------------------------------------------
    # Read-side queries
    # -------------------------------------------------

    @property
    def targets(self) -> list[DiagonalTarget]:
        return [t.model_copy(deep=True) for t in self._targets.values()]

    @property
    def pieces(self) -> list[Piece]:
        return [p.model_copy(deep=True) for p in self._pieces.values()]

    def target(self, target_id: str) -> Optional[DiagonalTarget]:
        t = self._targets.get(target_id)
        return t.model_copy(deep=True) if t else None

    def piece(self, piece_id: str) -> Optional[Piece]:
        p = self._pieces.get(piece_id)
        return p.model_copy(deep=True) if p else None

    @property
    def available_pieces(self) -> list[Piece]:
        """Pieces still in the selection pane."""
        return [p.model_copy(deep=True) for p in self._pieces.values() if p.placed_on is None]

    @property
    def main_diagonal(self) -> list[str]:
        return list(self._main)

    @property
    def board(self) -> list[list[str]]:
        return [list(row) for row in self._board]

    def rows(self) -> list[str]:
        return ["".join(row) for row in self._board]

    @property
    def all_placed(self) -> bool:
        return all(t.piece_id is not None for t in self._targets.values())

    @property
    def main_filled(self) -> bool:
        return all(v != "" for v in self._main)

    @property
    def is_complete(self) -> bool:
        return self.all_placed and self.main_filled

    @property
    def is_solved(self) -> bool:
        if not self.is_complete:
            return False
        expected = self.configuration.row_words
        if len(expected) != GRID_SIZE:
            return False
        return all(row.upper() == word.upper() for row, word in zip(self.rows(), expected))

    @property
    def completion(self) -> Completion:
        if not self.is_complete:
            return Completion.FILLING
        return Completion.SOLVED if self.is_solved else Completion.INCORRECT

    def valid_targets(self, piece_id: str, *, include_occupied: bool = False) -> list[str]:
        """Targets that can take `piece_id`: same length and empty (or already holding it).

        With `include_occupied` the same-length targets holding another piece
        are listed too; those are the ones `place_or_replace` will swap.
        """
        piece = self._pieces.get(piece_id)
        if piece is None:
            return []
        return [
            t.id for t in self._targets.values()
            if t.length == piece.length
            and (include_occupied or t.piece_id is None or t.piece_id == piece.id)
        ]

    def occupied_target_at(self, cell: Cell) -> Optional[str]:
        """Id of the occupied target covering `cell`, if any (tap-to-remove)."""
        for t in self._targets.values():
            if t.piece_id is not None and cell in t.cells:
                return t.id
        return None

    # -------------------------------------------------
    # Mutations
    # -------------------------------------------------

    def place_or_replace(self, piece_id: str, target_id: str) -> tuple[bool, Optional[str]]:
        """Put a piece on a target.

        Returns `(success, replaced_piece_id)`. Fails for unknown ids or a
        length mismatch. A different piece already on the target goes back
        to the pane and its id is returned; if the piece was on another
        target, that target is emptied.
        """
        if target_id not in self.valid_targets(piece_id, include_occupied=True):
            return False, None
        piece = self._pieces[piece_id]
        target = self._targets[target_id]
        if target.piece_id == piece.id:
            return True, None

        self._snapshot()

        replaced_id = None
        if target.piece_id is not None:
            self._pieces[target.piece_id].placed_on = None
            replaced_id = target.piece_id

        if piece.placed_on is not None:
            self._targets[piece.placed_on].piece_id = None

        target.piece_id = piece.id
        piece.placed_on = target.id
        self._recompute_board()
        return True, replaced_id

    def remove_piece(self, target_id: str) -> Optional[str]:
        """Send the piece on `target_id` back to the pane. Returns its id, or None if empty."""
        target = self._targets.get(target_id)
        if target is None or target.piece_id is None:
            return None
        self._snapshot()
        piece_id = target.piece_id
        target.piece_id = None
        self._pieces[piece_id].placed_on = None
        self._recompute_board()
        return piece_id

    def set_main_diagonal(self, letters: list[str]) -> bool:
        """Overwrite all six main-diagonal letters at once. Blanks are allowed."""
        if len(letters) != len(self._main):
            return False
        self._snapshot()
        self._main = [normalize_letter(ch) for ch in letters]
        self._recompute_board()
        return True

    def type_main_letter(self, letter: str) -> bool:
        """Write a letter into the first blank main-diagonal cell."""
        ch = normalize_letter(letter)
        if not ch or "" not in self._main:
            return False
        letters = list(self._main)
        letters[letters.index("")] = ch
        return self.set_main_diagonal(letters)

    def delete_main_letter(self) -> bool:
        """Blank the last filled main-diagonal cell."""
        filled = [i for i, v in enumerate(self._main) if v]
        if not filled:
            return False
        letters = list(self._main)
        letters[filled[-1]] = ""
        return self.set_main_diagonal(letters)

    def clear_main_diagonal(self) -> None:
        if any(self._main):
            self.set_main_diagonal([""] * len(self._main))

    def reset(self) -> None:
        """Back to the empty board: every piece in the pane, main diagonal blank."""
        self._history.clear()
        self._future.clear()
        self._load(self._initial_state())

    def restore(self, state: DiagoneState) -> None:
        """Replace the whole state. The caller checks `is_compatible` first."""
        self._history.clear()
        self._future.clear()
        self._load(state)

    def undo(self) -> bool:
        if not self._history:
            return False
        self._future.append(self.state)
        self._load(self._history.pop())
        return True

    def redo(self) -> bool:
        if not self._future:
            return False
        self._history.append(self.state)
        self._load(self._future.pop())
        return True

    def _recompute_board(self) -> None:
        board = [[""] * GRID_SIZE for _ in range(GRID_SIZE)]
        for target in self._targets.values():
            if target.piece_id is None:
                continue
            piece = self._pieces[target.piece_id]
            for letter, cell in zip(piece.letters, target.cells):
                board[cell.row][cell.col] = letter
        for letter, cell in zip(self._main, self.configuration.main_diagonal):
            board[cell.row][cell.col] = letter
        self._board = board


def links_consistent(state: DiagoneState) -> bool:
    """Every target->piece link has a matching piece->target link and vice versa."""
    targets = {t.id: t for t in state.targets}
    pieces = {p.id: p for p in state.pieces}
    for t in state.targets:
        if t.piece_id is not None:
            p = pieces.get(t.piece_id)
            if p is None or p.placed_on != t.id or p.length != t.length:
                return False
    for p in state.pieces:
        if p.placed_on is not None:
            t = targets.get(p.placed_on)
            if t is None or t.piece_id != p.id:
                return False
    return True
