# src/blockfall/apps/simulate/entrypoint.py
from __future__ import annotations

import argparse
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from blockfall.config.game import GameConfig
from blockfall.config.io import load_game_config
from blockfall.game.core.game import TetrisGame
from blockfall.game.core.types import Command
from blockfall.utils.logging import setup_logger
from blockfall.utils.seed import game_seed

_COMMANDS = tuple(Command)


@dataclass
class GameStats:
    seed: int
    frames: int
    pieces: int
    lines: int
    game_over: bool


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Headless falling-block simulation driven by seeded random commands."
    )
    parser.add_argument("--config", type=Path, default=None, help="Game config YAML (top-level 'game:' section).")
    parser.add_argument("--games", type=int, default=10, help="Number of games to play.")
    parser.add_argument("--max-frames", type=int, default=20_000, help="Frame cap per game.")
    parser.add_argument("--dt", type=float, default=1.0 / 60.0, help="Seconds per frame.")
    parser.add_argument(
        "--command-prob",
        type=float,
        default=0.2,
        help="Probability that a frame carries one random command.",
    )
    parser.add_argument(
        "--hard-drop-weight",
        type=float,
        default=0.05,
        help="Relative weight of hard drops among random commands (others share the rest).",
    )

    # Overrides on top of the config file
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--piece-rule", type=str, default=None, choices=["uniform", "bag7", "gameboy"])
    parser.add_argument("--kicks", type=str, default=None, choices=["none", "simple"])

    parser.add_argument("--log-level", type=str, default="info")
    parser.add_argument("--no-rich", action="store_true", help="Plain log output.")
    return parser.parse_args(argv)


def resolve_game_config(args: argparse.Namespace) -> GameConfig:
    base = load_game_config(args.config) if args.config is not None else GameConfig()
    overrides: Dict[str, Any] = {}
    for key in ("seed", "width", "height", "piece_rule", "kicks"):
        v = getattr(args, key)
        if v is not None:
            overrides[key] = v
    if not overrides:
        return base
    return GameConfig.model_validate({**base.model_dump(), **overrides})


def _command_weights(hard_drop_weight: float) -> np.ndarray:
    hd = float(hard_drop_weight)
    if not (0.0 <= hd <= 1.0):
        raise ValueError(f"--hard-drop-weight must be in [0,1], got {hd}")
    others = (1.0 - hd) / (len(_COMMANDS) - 1)
    return np.asarray([hd if c == Command.HARD_DROP else others for c in _COMMANDS], dtype=np.float64)


def play_game(
        *,
        game: TetrisGame,
        rng: np.random.Generator,
        dt: float,
        max_frames: int,
        command_prob: float,
        weights: np.ndarray,
) -> GameStats:
    for _ in range(int(max_frames)):
        if game.game_over:
            break
        cmds = []
        if rng.random() < command_prob:
            cmds.append(_COMMANDS[int(rng.choice(len(_COMMANDS), p=weights))])
        game.tick(dt, cmds)

    return GameStats(
        seed=int(game.seed),
        frames=int(game.frames),
        pieces=int(game.pieces_locked),
        lines=int(game.lines_cleared),
        game_over=bool(game.game_over),
    )


def run_simulation(args: argparse.Namespace) -> int:
    logger = setup_logger(name="blockfall", use_rich=not args.no_rich, level=str(args.log_level))

    if int(args.games) <= 0:
        raise ValueError(f"--games must be >= 1, got {args.games}")
    if not (0.0 <= float(args.command_prob) <= 1.0):
        raise ValueError(f"--command-prob must be in [0,1], got {args.command_prob}")

    cfg = resolve_game_config(args)
    weights = _command_weights(args.hard_drop_weight)
    logger.info(
        "[sim] board=%dx%d piece_rule=%s kicks=%s fall=%.3fs lock=%.3fs games=%d",
        cfg.width,
        cfg.height,
        cfg.piece_rule,
        cfg.kicks,
        cfg.fall_interval,
        cfg.lock_delay,
        int(args.games),
    )

    game = TetrisGame.from_config(cfg)
    all_stats: list[GameStats] = []
    t0 = time.perf_counter()

    for i in range(int(args.games)):
        seed = game_seed(base_seed=cfg.seed, game_index=i)
        game.reset(seed=seed)
        # Command stream gets its own derived seed so it does not share the piece RNG.
        rng = np.random.default_rng(game_seed(base_seed=seed, game_index=1))
        stats = play_game(
            game=game,
            rng=rng,
            dt=float(args.dt),
            max_frames=int(args.max_frames),
            command_prob=float(args.command_prob),
            weights=weights,
        )
        all_stats.append(stats)
        logger.info(
            "[game %d] seed=%d frames=%d pieces=%d lines=%d %s",
            i,
            stats.seed,
            stats.frames,
            stats.pieces,
            stats.lines,
            "game_over" if stats.game_over else "frame_cap",
        )

    elapsed = time.perf_counter() - t0
    frames = sum(s.frames for s in all_stats)
    logger.info(
        "[done] games=%d frames=%d pieces=%d lines=%d elapsed=%.3fs frames/s=%.1f",
        len(all_stats),
        frames,
        sum(s.pieces for s in all_stats),
        sum(s.lines for s in all_stats),
        elapsed,
        frames / max(elapsed, 1e-12),
    )
    return 0


__all__ = ["GameStats", "parse_args", "resolve_game_config", "play_game", "run_simulation"]
