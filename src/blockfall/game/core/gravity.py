# src/blockfall/game/core/gravity.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from blockfall.game.core.constants import DEFAULT_FALL_INTERVAL, DEFAULT_LOCK_DELAY


@dataclass
class FallController:
    """
    Gravity and lock-delay timing for the active piece.

    Two timers, never both running:
      - fall_timer accumulates while the piece is airborne; every full
        fall_interval asks the owner for one downward step.
      - lock_timer accumulates once a downward step was rejected (grounded);
        the piece must lock when it reaches lock_delay.

    Movement resets the lock countdown to zero (optionally capped by
    lock_reset_limit per piece); the piece only stops being grounded once the
    owner reports it can fall again via release(). Time is in seconds and is never dropped: a large dt produces
    several falls, and fall time left over when the piece lands is carried
    into the lock countdown.
    """

    fall_interval: float = DEFAULT_FALL_INTERVAL
    lock_delay: float = DEFAULT_LOCK_DELAY
    lock_reset_limit: Optional[int] = None

    fall_timer: float = 0.0
    lock_timer: float = 0.0
    grounded: bool = False
    lock_resets: int = 0

    def __post_init__(self) -> None:
        if float(self.fall_interval) <= 0.0:
            raise ValueError(f"fall_interval must be > 0, got {self.fall_interval!r}")
        if float(self.lock_delay) < 0.0:
            raise ValueError(f"lock_delay must be >= 0, got {self.lock_delay!r}")
        if self.lock_reset_limit is not None and int(self.lock_reset_limit) < 0:
            raise ValueError(f"lock_reset_limit must be >= 0 or None, got {self.lock_reset_limit!r}")

    def reset(self) -> None:
        self.fall_timer = 0.0
        self.lock_timer = 0.0
        self.grounded = False
        self.lock_resets = 0

    def lock_due(self) -> bool:
        return self.grounded and self.lock_timer >= self.lock_delay

    def ground(self) -> None:
        if self.grounded:
            return
        self.grounded = True
        self.fall_timer = 0.0
        self.lock_timer = 0.0

    def tick(self, dt: float, step_down: Callable[[], bool]) -> bool:
        """
        Advance by dt seconds. step_down() attempts one downward move and
        reports whether it was accepted. Returns True when the piece must lock.
        """
        dt = float(dt)
        if dt < 0.0:
            raise ValueError(f"dt must be >= 0, got {dt!r}")

        if self.grounded:
            self.lock_timer += dt
            return self.lock_due()

        self.fall_timer += dt
        while self.fall_timer >= self.fall_interval:
            self.fall_timer -= self.fall_interval
            if not step_down():
                leftover = self.fall_timer
                self.ground()
                self.lock_timer = leftover
                break
        return self.lock_due()

    def on_moved(self) -> bool:
        """
        A lateral or rotation move succeeded. Restart the lock countdown unless
        the per-piece reset budget is spent. Returns whether a reset happened.

        The piece stays grounded; the owner calls release() if the move left
        it with room to fall.
        """
        if not self.grounded:
            return True
        if self.lock_reset_limit is not None and self.lock_resets >= int(self.lock_reset_limit):
            return False
        self.lock_resets += 1
        self.lock_timer = 0.0
        return True

    def release(self) -> None:
        """
        The piece is no longer resting on anything (it moved down, or off a ledge).
        """
        self.grounded = False
        self.lock_timer = 0.0


__all__ = ["FallController"]
