"""Date-keyed puzzle content.

Each game has one JSON file in the content directory mapping `MM/dd/yyyy`
to that day's puzzle. Files are read on first use and cached for the life
of the store. A day with no entry (or a bad one) gets the game's built-in
fallback puzzle, so there is always something to play.
"""
from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union
import hashlib
import json
import logging

from pydantic import ValidationError

import config
from models.domain_models import GameType
from models.puzzle_models import (
    DiagonePuzzle,
    RhymeAGramsPuzzle,
    TumblePunsPuzzle,
    TumbleWord,
)
from stores.exceptions import ContentError, ContentNotFound, MalformedContent
from utils.time import PUZZLE_KEY_FORMAT, puzzle_key
from utils.validation import sanitize_json

logger = logging.getLogger(__name__)

Puzzle = Union[DiagonePuzzle, RhymeAGramsPuzzle, TumblePunsPuzzle]

CONTENT_FILES = {
    GameType.DIAGONE: "diagone_puzzles.json",
    GameType.RHYMEAGRAMS: "rhymeagrams_puzzles.json",
    GameType.TUMBLEPUNS: "tumblepuns_puzzles.json",
}

FALLBACK_DIAGONE = DiagonePuzzle(
    row_words=("ABCDEF", "GHIJKL", "MNOPQR", "STUVWX", "YZABCD", "EFGHIJ"),
)

FALLBACK_RHYMEAGRAMS = RhymeAGramsPuzzle(
    letters=("B", "EEE", "EHIII", "IKKKKLP"),
    solutions=("BIKE", "HIKE", "LIKE", "PIKE"),
)

FALLBACK_TUMBLEPUNS = TumblePunsPuzzle(
    words=(
        TumbleWord(solution="DITZY", scrambled="DYTIZ", shaded_indices=(2,)),
        TumbleWord(solution="WINDOW", scrambled="DWONWI", shaded_indices=(4, 5)),
        TumbleWord(solution="PERPLEX", scrambled="XEPPELR", shaded_indices=(2, 5)),
        TumbleWord(solution="MAJORITY", scrambled="AJIMYTOR", shaded_indices=(1, 5, 7)),
    ),
    definition="A sundial",
    answer="OLD-TIMER",
    answer_pattern="___-_____",
)

FALLBACKS: dict[GameType, Puzzle] = {
    GameType.DIAGONE: FALLBACK_DIAGONE,
    GameType.RHYMEAGRAMS: FALLBACK_RHYMEAGRAMS,
    GameType.TUMBLEPUNS: FALLBACK_TUMBLEPUNS,
}


# --- Seeded scramble ---

LCG_MULTIPLIER = 6364136223846793005
LCG_INCREMENT = 1442695040888963407
LCG_MASK = (1 << 64) - 1


def _seed_state(seed: str, word: str) -> int:
    digest = hashlib.sha256((seed + word).encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def scramble(word: str, seed: str) -> str:
    """Deterministically shuffle `word` using `seed` (normally the puzzle date key).

    A 64-bit linear congruential generator seeded from SHA-256(seed + word)
    drives a Fisher-Yates shuffle. If the shuffle lands back on the word,
    the first letter is swapped with the first letter that differs from it.
    A word made of one repeated letter comes back unchanged.
    """
    letters = list(word)
    if len(letters) < 2:
        return word

    state = _seed_state(seed, word)
    for i in range(len(letters) - 1, 0, -1):
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) & LCG_MASK
        j = (state >> 33) % (i + 1)
        letters[i], letters[j] = letters[j], letters[i]

    if letters == list(word):
        k = next((i for i in range(1, len(letters)) if letters[i] != letters[0]), None)
        if k is not None:
            letters[0], letters[k] = letters[k], letters[0]
    return "".join(letters)


# --- Store ---

class PuzzleContentStore:
    """Loads and caches the per-game content files.

    Malformed entries are skipped with a warning; a missing or unreadable
    file is treated as empty.
    """

    def __init__(self, content_dir: Optional[Union[str, Path]] = None):
        self.content_dir = Path(content_dir if content_dir is not None else config.CONTENT_DIR)
        self._cache: dict[GameType, dict[str, Puzzle]] = {}

    def _load_file(self, game: GameType) -> dict[str, Any]:
        path = self.content_dir / CONTENT_FILES[game]
        if not path.exists():
            raise ContentNotFound(f"no content file for {game.value} at {path}")
        try:
            raw = sanitize_json(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            raise MalformedContent(f"failed to read {path}: {e}") from e
        if not isinstance(raw, dict):
            raise MalformedContent(f"{path} is not a date-keyed object")
        return raw

    def _read(self, game: GameType) -> dict[str, Any]:
        try:
            return self._load_file(game)
        except ContentNotFound as e:
            logger.warning(f"[CONTENT] {e}")
        except ContentError as e:
            logger.error(f"[CONTENT] {e}")
        return {}

    def _entries(self, game: GameType) -> dict[str, Puzzle]:
        cached = self._cache.get(game)
        if cached is not None:
            return cached

        entries: dict[str, Puzzle] = {}
        for key, value in self._read(game).items():
            try:
                datetime.strptime(key, PUZZLE_KEY_FORMAT)
                entries[key] = self._parse(game, key, value)
            except (ValidationError, ValueError, TypeError) as e:
                logger.warning(f"[CONTENT] skipping {game.value} entry {key!r}: {e}")

        logger.info(f"[CONTENT] loaded {len(entries)} {game.value} puzzles")
        self._cache[game] = entries
        return entries

    @staticmethod
    def _parse(game: GameType, key: str, value: Any) -> Puzzle:
        if game is GameType.DIAGONE:
            if isinstance(value, list):
                value = {"rowWords": value}
            return DiagonePuzzle.model_validate(value)

        if game is GameType.RHYMEAGRAMS:
            return RhymeAGramsPuzzle.model_validate(value)

        puzzle = TumblePunsPuzzle.model_validate(value)
        words = tuple(
            w if w.scrambled else w.model_copy(update={"scrambled": scramble(w.solution, key)})
            for w in puzzle.words
        )
        return puzzle.model_copy(update={"words": words})

    def puzzle_for(self, game: GameType, day: Union[date, datetime]) -> Puzzle:
        """The puzzle for `day`, or the game's fallback when there is none."""
        key = puzzle_key(day)
        puzzle = self._entries(game).get(key)
        if puzzle is None:
            logger.debug(f"[CONTENT] no {game.value} puzzle for {key}, using fallback")
            return FALLBACKS[game]
        return puzzle

    def has_puzzle(self, game: GameType, day: Union[date, datetime]) -> bool:
        return puzzle_key(day) in self._entries(game)

    def available_dates(self, game: GameType) -> list[date]:
        return sorted(datetime.strptime(k, PUZZLE_KEY_FORMAT).date() for k in self._entries(game))

    def diagone(self, day: Union[date, datetime]) -> DiagonePuzzle:
        return self.puzzle_for(GameType.DIAGONE, day)

    def rhymeagrams(self, day: Union[date, datetime]) -> RhymeAGramsPuzzle:
        return self.puzzle_for(GameType.RHYMEAGRAMS, day)

    def tumblepuns(self, day: Union[date, datetime]) -> TumblePunsPuzzle:
        return self.puzzle_for(GameType.TUMBLEPUNS, day)
