"""Pure rule engines, one per game. No I/O and no clock; sessions drive them."""

from .diagone import (
    GRID_SIZE,
    PuzzleConfiguration,
    DiagonalPlacementEngine,
    links_consistent,
)
from .rhymeagrams import RhymeAGramsEngine
from .tumblepuns import TumblePunsEngine

__all__ = [
    "GRID_SIZE",
    "PuzzleConfiguration",
    "DiagonalPlacementEngine",
    "links_consistent",
    "RhymeAGramsEngine",
    "TumblePunsEngine",
]
