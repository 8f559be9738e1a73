# src/blockfall/game/core/game.py
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Tuple

import numpy as np

from blockfall.config.game import GameConfig
from blockfall.game.core.board import Board
from blockfall.game.core.collision import KickPolicy, drop_distance, is_legal, try_rotate, try_translate
from blockfall.game.core.constants import (
    DEFAULT_FALL_INTERVAL,
    DEFAULT_HEIGHT,
    DEFAULT_LOCK_DELAY,
    DEFAULT_SEED,
    DEFAULT_WIDTH,
    PIECE_CELLS,
)
from blockfall.game.core.gravity import FallController
from blockfall.game.core.piece_rules import PieceRule, make_piece_rule
from blockfall.game.core.pieceset import PieceSet
from blockfall.game.core.spawn import SpawnController
from blockfall.game.core.types import Cell, Command, Phase, Piece, RotationDirection, TetrominoKind

logger = logging.getLogger(__name__)

_COMMAND_ALIASES = {
    "left": Command.MOVE_LEFT,
    "move_left": Command.MOVE_LEFT,
    "right": Command.MOVE_RIGHT,
    "move_right": Command.MOVE_RIGHT,
    "cw": Command.ROTATE_CW,
    "rot_cw": Command.ROTATE_CW,
    "rotate_cw": Command.ROTATE_CW,
    "ccw": Command.ROTATE_CCW,
    "rot_ccw": Command.ROTATE_CCW,
    "rotate_ccw": Command.ROTATE_CCW,
    "down": Command.SOFT_DROP,
    "soft_drop": Command.SOFT_DROP,
    "drop": Command.HARD_DROP,
    "hard_drop": Command.HARD_DROP,
}

_LATERAL = {Command.MOVE_LEFT: -1, Command.MOVE_RIGHT: +1}
_ROTATE = {Command.ROTATE_CW: RotationDirection.CW, Command.ROTATE_CCW: RotationDirection.CCW}


def normalize_command(cmd: Any) -> Command:
    if isinstance(cmd, Command):
        return cmd
    s = str(cmd).strip().lower()
    try:
        return _COMMAND_ALIASES[s]
    except KeyError as e:
        raise ValueError(f"unknown command {cmd!r} (known: {sorted(_COMMAND_ALIASES)!r})") from e


class TetrisGame:
    """
    Falling-block state machine.

    Phases:
      SPAWNING -> ACTIVE | GAME_OVER
      ACTIVE   -> ACTIVE (move/rotate/fall) | LOCKING (downward step rejected)
      LOCKING  -> LOCKING (lateral/rotation move restarts the lock countdown)
               -> ACTIVE (a move leaves the piece room to fall)
               -> CLEARING (lock delay elapsed, or hard drop)
      CLEARING -> SPAWNING (always, also for zero cleared rows)
    CLEARING and SPAWNING only exist inside a single call; callers observe
    ACTIVE, LOCKING or GAME_OVER between calls.

    Contracts:
      - Every piece mutation is validated by the collision module first;
        rejected moves leave the game untouched and return False.
      - board.grid is the LOCKED board; the active piece is never written
        into it until it locks.
      - tick(dt, commands) applies commands before advancing gravity and the
        lock countdown of the same frame.
      - a tick that locked a piece through a command does not also advance
        gravity for the freshly spawned one.
      - GAME_OVER is terminal: ticks and commands are no-ops.
    """

    def __init__(
            self,
            *,
            width: int = DEFAULT_WIDTH,
            height: int = DEFAULT_HEIGHT,
            seed: int = DEFAULT_SEED,
            piece_rule: PieceRule | str = "uniform",
            preview_size: int = 1,
            fall_interval: float = DEFAULT_FALL_INTERVAL,
            lock_delay: float = DEFAULT_LOCK_DELAY,
            lock_reset_limit: Optional[int] = None,
            kicks: KickPolicy | str = KickPolicy.SIMPLE,
            piece_set: Optional[PieceSet] = None,
    ) -> None:
        self.w = int(width)
        self.h = int(height)
        if self.w < 4:
            raise ValueError(f"width must be >= 4, got {self.w}")
        if self.h < 2:
            raise ValueError(f"height must be >= 2, got {self.h}")

        self.seed = int(seed)
        self.pieces = piece_set or PieceSet.classic7()
        self.kicks = KickPolicy(kicks)

        rule = make_piece_rule(piece_rule) if isinstance(piece_rule, str) else piece_rule
        self.spawner = SpawnController(
            width=self.w,
            height=self.h,
            pieces=self.pieces,
            piece_rule=rule,
            preview_size=preview_size,
        )
        self.fall = FallController(
            fall_interval=float(fall_interval),
            lock_delay=float(lock_delay),
            lock_reset_limit=lock_reset_limit,
        )

        self.board = Board.empty(h=self.h, w=self.w)
        self.active: Optional[Piece] = None
        self.phase = Phase.SPAWNING
        self.last_clear_count = 0
        self.lines_cleared = 0
        self.pieces_locked = 0
        self.frames = 0

        self._rng: np.random.Generator = np.random.default_rng(self.seed)
        self.spawner.reset(rng=self._rng)

    @classmethod
    def from_config(cls, cfg: GameConfig, *, piece_rule: PieceRule | None = None) -> "TetrisGame":
        return cls(
            width=cfg.width,
            height=cfg.height,
            seed=cfg.seed,
            piece_rule=piece_rule or cfg.piece_rule,
            preview_size=cfg.preview_size,
            fall_interval=cfg.fall_interval,
            lock_delay=cfg.lock_delay,
            lock_reset_limit=cfg.lock_reset_limit,
            kicks=cfg.kicks,
        )

    # ---- lifecycle -----------------------------------------------------------------

    def reset(self, *, seed: Optional[int] = None, initial_grid: Optional[np.ndarray] = None) -> "TetrisGame":
        """
        Start a fresh game and spawn the first piece.

        initial_grid (optional) pre-fills the locked board, shape (height, width),
        row 0 at the bottom, 0 = empty. Used for scripted starting positions.
        """
        if seed is not None:
            self.seed = int(seed)
        self._rng = np.random.default_rng(self.seed)

        self.board = Board.empty(h=self.h, w=self.w)
        if initial_grid is not None:
            g = np.asarray(initial_grid)
            if g.shape != (self.h, self.w):
                raise ValueError(f"initial_grid must have shape {(self.h, self.w)}, got {g.shape}")
            if np.any(g < 0) or np.any(g > 255):
                raise ValueError("initial_grid values must be color ids in [0,255]")
            self.board.grid = g.astype(np.uint8, copy=True)

        self.active = None
        self.last_clear_count = 0
        self.lines_cleared = 0
        self.pieces_locked = 0
        self.frames = 0

        self.spawner.reset(rng=self._rng)
        self.phase = Phase.SPAWNING
        self._spawn()
        return self

    # ---- external surface ----------------------------------------------------------

    def apply_command(self, cmd: Command | str) -> bool:
        """
        Apply one discrete command. Returns False (state unchanged) when the
        command is not accepted in the current phase or its placement is illegal.
        """
        c = normalize_command(cmd)
        if self.phase not in (Phase.ACTIVE, Phase.LOCKING) or self.active is None:
            return False

        if c in _LATERAL:
            moved = try_translate(piece=self.active, board=self.board, pieces=self.pieces, dx=_LATERAL[c], dy=0)
            return self._commit_shift(moved)

        if c in _ROTATE:
            moved = try_rotate(
                piece=self.active,
                board=self.board,
                pieces=self.pieces,
                direction=_ROTATE[c],
                kicks=self.kicks,
            )
            return self._commit_shift(moved)

        if c == Command.SOFT_DROP:
            if self._step_down():
                return True
            self._enter_locking()
            return False

        # HARD_DROP
        dist = drop_distance(piece=self.active, board=self.board, pieces=self.pieces)
        self.active = self.active.translated(0, -dist)
        self._lock_active()
        return True

    def tick(self, dt: float, commands: Iterable[Command | str] = ()) -> int:
        """
        Advance one frame: apply `commands` in order, then gravity and lock timing.

        Returns the number of rows cleared during this call.
        """
        if self.phase == Phase.GAME_OVER:
            return 0

        self.frames += 1
        cleared_before = self.lines_cleared
        locked_before = self.pieces_locked

        for cmd in commands:
            self.apply_command(cmd)

        if self.phase == Phase.SPAWNING:
            self._spawn()

        if self.phase in (Phase.ACTIVE, Phase.LOCKING) and self.pieces_locked == locked_before:
            must_lock = self.fall.tick(dt, self._step_down)
            if self.fall.grounded:
                self.phase = Phase.LOCKING
            if must_lock:
                self._lock_active()

        return int(self.lines_cleared - cleared_before)

    # ---- read-only queries ---------------------------------------------------------

    def grid_snapshot(self) -> np.ndarray:
        """
        Copy of the locked board, grid[y, x] with row 0 at the bottom.
        """
        return self.board.snapshot()

    def active_piece(self) -> Optional[Piece]:
        return self.active

    def active_cells(self) -> Tuple[Cell, ...]:
        if self.active is None:
            return ()
        return self.active.absolute_cells(self.pieces)

    def ghost_piece(self) -> Optional[Piece]:
        """
        Where the active piece would land on a hard drop.
        """
        if self.active is None:
            return None
        dist = drop_distance(piece=self.active, board=self.board, pieces=self.pieces)
        return self.active.translated(0, -dist)

    def upcoming(self) -> Tuple[TetrominoKind, ...]:
        return self.spawner.upcoming()

    @property
    def game_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    # ---- internals -----------------------------------------------------------------

    def _spawn(self) -> None:
        piece = self.spawner.spawn()
        self.fall.reset()
        if not is_legal(piece=piece, board=self.board, pieces=self.pieces):
            self.active = None
            self.phase = Phase.GAME_OVER
            logger.debug("[game] spawn blocked kind=%s at (%d,%d): game over", piece.kind.value, piece.x, piece.y)
            return
        self.active = piece
        self.phase = Phase.ACTIVE

    def _step_down(self) -> bool:
        if self.active is None:
            raise RuntimeError("no active piece to move down")
        moved = try_translate(piece=self.active, board=self.board, pieces=self.pieces, dx=0, dy=-1)
        if moved is None:
            return False
        self.active = moved
        self.fall.release()
        self.phase = Phase.ACTIVE
        return True

    def _enter_locking(self) -> None:
        self.fall.ground()
        self.phase = Phase.LOCKING

    def _commit_shift(self, moved: Optional[Piece]) -> bool:
        if moved is None:
            return False
        self.active = moved
        self.fall.on_moved()
        # Still resting on something: the countdown keeps running (from zero after a reset).
        if self.fall.grounded:
            below = try_translate(piece=moved, board=self.board, pieces=self.pieces, dx=0, dy=-1)
            if below is not None:
                self.fall.release()
        self.phase = Phase.LOCKING if self.fall.grounded else Phase.ACTIVE
        return True

    def _lock_active(self) -> None:
        piece = self.active
        if piece is None:
            raise RuntimeError("no active piece to lock")

        self.phase = Phase.CLEARING
        color_id = self.pieces.color_id(piece.kind)
        cells = [(x, y, color_id) for x, y in piece.absolute_cells(self.pieces)]
        if len(cells) != PIECE_CELLS:
            raise RuntimeError(f"piece {piece.kind.value} resolved to {len(cells)} cells, expected {PIECE_CELLS}")
        self.board.lock_cells(cells)
        self.active = None
        self.pieces_locked += 1
        self.spawner.note_locked(piece.kind)

        cleared = self.board.clear_full_rows()
        self.last_clear_count = int(cleared)
        self.lines_cleared += int(cleared)
        logger.debug(
            "[game] locked kind=%s rot=%d at (%d,%d) cleared=%d",
            piece.kind.value,
            int(piece.rotation),
            piece.x,
            piece.y,
            cleared,
        )

        self.phase = Phase.SPAWNING
        self._spawn()


__all__ = ["TetrisGame", "normalize_command"]
