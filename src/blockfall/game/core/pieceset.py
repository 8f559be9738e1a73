# src/blockfall/game/core/pieceset.py
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import yaml

from blockfall.game.core.constants import NUM_ROTATIONS, PIECE_CELLS
from blockfall.game.core.types import Cell, Rotation, TetrominoKind
from blockfall.utils.paths import pieces_dir

Offsets = Tuple[Cell, ...]

_ANCHOR = "@"
_FILLED = "#"
_EMPTY = "."


def _parse_rotation(rows: Sequence[str], *, where: str) -> Offsets:
    """
    Turn a top-to-bottom mask into anchor-relative offsets (y grows upward).
    """
    if not isinstance(rows, (list, tuple)) or len(rows) == 0:
        raise ValueError(f"{where}: rotation must be a non-empty list of strings")

    width = None
    anchor: Optional[Tuple[int, int]] = None
    filled: List[Tuple[int, int]] = []
    for r, row in enumerate(rows):
        if not isinstance(row, str) or len(row) == 0:
            raise ValueError(f"{where}: rotation rows must be non-empty strings, got {row!r}")
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise ValueError(f"{where}: rotation rows must have equal width, got widths {width} and {len(row)}")

        for c, ch in enumerate(row):
            if ch == _EMPTY:
                continue
            if ch not in (_FILLED, _ANCHOR):
                raise ValueError(f"{where}: unexpected mask character {ch!r}")
            if ch == _ANCHOR:
                if anchor is not None:
                    raise ValueError(f"{where}: rotation must have exactly one anchor '@'")
                anchor = (c, r)
            filled.append((c, r))

    if anchor is None:
        raise ValueError(f"{where}: rotation must mark its anchor cell with '@'")

    ac, ar = anchor
    # Sorted so equal shapes compare equal regardless of mask scan order.
    return tuple(sorted((c - ac, ar - r) for c, r in filled))


@dataclass(frozen=True)
class PieceDef:
    kind: TetrominoKind
    rotations: Tuple[Offsets, ...]  # indexed by Rotation

    def offsets(self, rot: Rotation | int) -> Offsets:
        return self.rotations[int(rot) % len(self.rotations)]


@dataclass(frozen=True)
class PieceSet:
    """
    Static piece geometry loaded from YAML.

    Provides:
      - stable ordering of kinds (kind_idx in 0..K-1)
      - offsets(kind, rot): the four anchor-relative cells of a rotation state
      - color_id(kind) in 1..K, the value a locked cell of that kind carries (0 is empty)

    Asset contract:
      - exactly four rotations per kind, clockwise from R0
      - every rotation marks its anchor with '@' and has the same cell count
    """

    pieces: Dict[TetrominoKind, PieceDef]
    kind_order: Tuple[TetrominoKind, ...]

    @staticmethod
    def default_classic7_path() -> Path:
        return pieces_dir() / "classic7.yaml"

    @classmethod
    def classic7(cls) -> "PieceSet":
        return _load_classic7()

    @classmethod
    def from_yaml(cls, path: Path, *, expected_cells: Optional[int] = None) -> "PieceSet":
        p = Path(path)
        data = yaml.safe_load(p.read_text(encoding="utf-8"))

        if not isinstance(data, dict):
            raise ValueError(f"piece YAML must be a mapping at top-level, got {type(data)!r}")

        if expected_cells is None:
            v = data.get("expected_cells", PIECE_CELLS)
            if isinstance(v, bool) or not isinstance(v, (int, str)):
                raise TypeError(f"expected_cells must be int or str, got {type(v)!r}")
            expected_cells = int(v)

        pieces_node = data.get("pieces")
        if not isinstance(pieces_node, dict) or not pieces_node:
            raise ValueError("piece YAML must contain non-empty mapping 'pieces:'")

        pieces: Dict[TetrominoKind, PieceDef] = {}
        kind_order: List[TetrominoKind] = []

        for raw_kind, spec in pieces_node.items():
            try:
                kind = TetrominoKind(str(raw_kind))
            except ValueError as e:
                raise ValueError(f"unknown piece kind {raw_kind!r}") from e
            if not isinstance(spec, dict):
                raise ValueError(f"piece spec for {kind.value!r} must be a mapping, got {type(spec)!r}")

            rotations_node = spec.get("rotations")
            if not isinstance(rotations_node, list) or len(rotations_node) != NUM_ROTATIONS:
                raise ValueError(f"{kind.value!r}: 'rotations' must list exactly {NUM_ROTATIONS} rotations")

            rotations = tuple(
                _parse_rotation(rows, where=f"{kind.value}.rotations[{i}]") for i, rows in enumerate(rotations_node)
            )

            cell_counts = [len(r) for r in rotations]
            if len(set(cell_counts)) != 1:
                raise ValueError(f"{kind.value!r}: rotations must have same filled cell count, got {cell_counts}")
            if cell_counts[0] != int(expected_cells):
                raise ValueError(f"{kind.value!r}: expected {expected_cells} filled cells, got {cell_counts[0]}")

            pieces[kind] = PieceDef(kind=kind, rotations=rotations)
            kind_order.append(kind)

        return cls(pieces=pieces, kind_order=tuple(kind_order))

    def kinds(self) -> Tuple[TetrominoKind, ...]:
        return self.kind_order

    def get(self, kind: TetrominoKind | str) -> PieceDef:
        try:
            return self.pieces[TetrominoKind(kind)]
        except (KeyError, ValueError) as e:
            raise KeyError(f"unknown piece kind {kind!r}. known kinds={[k.value for k in self.kind_order]!r}") from e

    def offsets(self, kind: TetrominoKind | str, rot: Rotation | int) -> Offsets:
        return self.get(kind).offsets(rot)

    def kind_idx(self, kind: TetrominoKind | str) -> int:
        try:
            return self.kind_order.index(TetrominoKind(kind))
        except ValueError as e:
            raise KeyError(f"unknown piece kind {kind!r}") from e

    def idx_to_kind(self, idx: int) -> TetrominoKind:
        ii = int(idx)
        if ii < 0 or ii >= len(self.kind_order):
            raise ValueError(f"kind_idx out of range: {ii} (valid 0..{len(self.kind_order) - 1})")
        return self.kind_order[ii]

    def color_id(self, kind: TetrominoKind | str) -> int:
        return int(self.kind_idx(kind) + 1)

    def color_id_to_kind(self, color_id: int) -> TetrominoKind:
        cid = int(color_id)
        if cid <= 0:
            raise ValueError("color_id must be >= 1 (0 is empty)")
        return self.idx_to_kind(cid - 1)


@lru_cache(maxsize=1)
def _load_classic7() -> PieceSet:
    return PieceSet.from_yaml(PieceSet.default_classic7_path(), expected_cells=PIECE_CELLS)


__all__ = ["Offsets", "PieceDef", "PieceSet"]
