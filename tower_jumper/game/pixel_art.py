# tower_jumper/game/pixel_art.py
"""
20x20 avatar grids.

A cell is either empty (None) or a hex color string. Stored and exported
grids write empty cells as 0; `cell_from_wire` / `cells_to_wire` are the
only places that know about that encoding.
"""
from __future__ import annotations
import json
import math
from typing import Any, List, Optional, Sequence, Tuple
import numpy as np
from .config import (
    PIXEL_GRID, BRUSH_MIN_SIZE, BRUSH_MAX_SIZE, EXPORT_APP, EXPORT_KIND, EXPORT_VERSION,
)

Cell = Optional[str]
GRID_CELLS = PIXEL_GRID * PIXEL_GRID
BRUSH_SHAPES = ("square", "circle")

IMPORT_ERROR_MESSAGE = "Import failed. Please choose a valid Tower Jumper pixel-art JSON file."


class PixelArtImportError(ValueError):
    """Raised when an imported document is not a pixel-art grid."""


def blank_grid() -> List[Cell]:
    return [None] * GRID_CELLS


def filled_grid(color: Cell) -> List[Cell]:
    return [color] * GRID_CELLS


def cell_from_wire(value: Any, fallback: Cell) -> Cell:
    if isinstance(value, str):
        return value or None
    if value is None or value is False or value == 0:
        return None
    # Legacy grids stored booleans/ints for "filled".
    return fallback


def cells_to_wire(cells: Sequence[Cell]) -> List[Any]:
    return [c if c else 0 for c in cells]


def resample(values: Sequence[Any], fallback: Cell) -> List[Cell]:
    """
    Nearest-neighbor resample of a flat square grid to PIXEL_GRID x PIXEL_GRID.
    The source side is round(sqrt(len)); missing source cells read as empty.
    An empty source yields a grid filled with `fallback`.
    """
    n = int(round(math.sqrt(len(values))))
    if n <= 0:
        return filled_grid(fallback)

    src = [cell_from_wire(v, fallback) for v in values[: n * n]]
    src.extend([None] * (n * n - len(src)))
    arr = np.empty(n * n, dtype=object)
    arr[:] = src
    arr = arr.reshape(n, n)

    idx = (np.arange(PIXEL_GRID) * n) // PIXEL_GRID
    return list(arr[np.ix_(idx, idx)].ravel())


def normalize(values: Sequence[Any], fallback: Cell) -> List[Cell]:
    if len(values) == GRID_CELLS:
        return [cell_from_wire(v, fallback) for v in values]
    return resample(values, fallback)


def brush_footprint(x: int, y: int, size: int, shape: str) -> List[Tuple[int, int]]:
    """Cells covered by a brush centered (as well as an even size allows) on (x, y)."""
    size = max(BRUSH_MIN_SIZE, min(BRUSH_MAX_SIZE, int(size)))
    half_low = (size - 1) // 2
    half_high = math.ceil((size - 1) / 2)
    radius_sq = (size / 2) ** 2
    cells = []
    for yy in range(y - half_low, y + half_high + 1):
        if yy < 0 or yy >= PIXEL_GRID:
            continue
        for xx in range(x - half_low, x + half_high + 1):
            if xx < 0 or xx >= PIXEL_GRID:
                continue
            if shape == "circle":
                dx, dy = xx - x, yy - y
                if dx * dx + dy * dy > radius_sq:
                    continue
            cells.append((xx, yy))
    return cells


def cell_index(x: int, y: int) -> Optional[int]:
    if 0 <= x < PIXEL_GRID and 0 <= y < PIXEL_GRID:
        return y * PIXEL_GRID + x
    return None


def export_document(slot: int, cells: Sequence[Cell]) -> dict:
    return {
        "app": EXPORT_APP,
        "kind": EXPORT_KIND,
        "version": EXPORT_VERSION,
        "grid": PIXEL_GRID,
        "slot": int(slot),
        "pixels": cells_to_wire(cells),
    }


def parse_import(text: str | bytes, fallback: Cell) -> List[Cell]:
    """Accepts a bare array or an exported document; anything else raises PixelArtImportError."""
    try:
        data = json.loads(text)
    except ValueError:
        data = None

    values = None
    if isinstance(data, list):
        values = data
    elif isinstance(data, dict) and isinstance(data.get("pixels"), list):
        values = data["pixels"]
    if values is None:
        raise PixelArtImportError(IMPORT_ERROR_MESSAGE)
    return resample(values, fallback)
