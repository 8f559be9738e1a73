# src/blockfall/utils/paths.py
from __future__ import annotations

from pathlib import Path


def _find_repo_root(start: Path) -> Path | None:
    for p in [start, *start.parents]:
        if (p / "pyproject.toml").is_file():
            return p
    return None


def repo_root() -> Path:
    """
    Return the repository root by searching upwards for pyproject.toml.
    """
    here = Path(__file__).resolve()
    root = _find_repo_root(here.parent)
    if root is None:
        raise FileNotFoundError("Could not locate repo root (pyproject.toml not found).")
    return root


def package_dir() -> Path:
    return Path(__file__).resolve().parents[1]


def assets_dir() -> Path:
    """
    Return blockfall/assets (ships with the package, must exist).
    """
    p = package_dir() / "assets"
    if not p.is_dir():
        raise FileNotFoundError(f"Assets directory not found: {p}")
    return p


def pieces_dir() -> Path:
    """
    Return blockfall/assets/pieces (must exist).
    """
    p = assets_dir() / "pieces"
    if not p.is_dir():
        raise FileNotFoundError(f"Pieces directory not found: {p}")
    return p


def default_game_config_path() -> Path:
    """
    Return repo_root/configs/game/default.yaml (only available from a source checkout).
    """
    p = repo_root() / "configs" / "game" / "default.yaml"
    if not p.is_file():
        raise FileNotFoundError(f"Default game config not found: {p}")
    return p


__all__ = ["repo_root", "package_dir", "assets_dir", "pieces_dir", "default_game_config_path"]
