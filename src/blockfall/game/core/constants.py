# src/blockfall/game/core/constants.py
from __future__ import annotations

# Board / cell encoding
EMPTY_CELL: int = 0
MAX_COLOR_ID: int = 255

# Classic tetromino set size (used for Game Boy-specific rules)
CLASSIC_NUM_PIECES: int = 7

# Cells per tetromino
PIECE_CELLS: int = 4

# Rotation states per kind (R0, R90, R180, R270)
NUM_ROTATIONS: int = 4

# Default board and timing (seconds)
DEFAULT_WIDTH: int = 10
DEFAULT_HEIGHT: int = 20
DEFAULT_SEED: int = 12345
DEFAULT_FALL_INTERVAL: float = 1.0
DEFAULT_LOCK_DELAY: float = 0.5
