# tower_jumper/tests/test_pixel_art.py
"""
Pixel grids: wire coercion, nearest-neighbor resampling, brush footprints
and import parsing.

Usage (from repo root):
  python -m pytest tower_jumper/tests/test_pixel_art.py
  python -m tower_jumper.tests.test_pixel_art
"""
from __future__ import annotations
import json
import pytest

from tower_jumper.game.config import PIXEL_GRID
from tower_jumper.game.pixel_art import (
    GRID_CELLS, PixelArtImportError, IMPORT_ERROR_MESSAGE,
    blank_grid, cell_from_wire, cells_to_wire, resample, normalize,
    brush_footprint, cell_index, export_document, parse_import,
)

FALLBACK = "#FF00FF"


def _grid(n):
    """n x n grid whose cell color encodes its (row, col)."""
    return [f"#{r:02X}{c:02X}00" for r in range(n) for c in range(n)]


def _at(cells, x, y):
    return cells[y * PIXEL_GRID + x]


def test_wire_coercion():
    assert cell_from_wire("#ABCDEF", FALLBACK) == "#ABCDEF"
    assert cell_from_wire("", FALLBACK) is None
    for empty in (None, False, 0, 0.0):
        assert cell_from_wire(empty, FALLBACK) is None
    # legacy truthy markers become the fallback color
    assert cell_from_wire(True, FALLBACK) == FALLBACK
    assert cell_from_wire(1, FALLBACK) == FALLBACK

    assert cells_to_wire(["#111111", None, ""]) == ["#111111", 0, 0]


def test_resample_identity_at_native_size():
    src = _grid(PIXEL_GRID)
    assert resample(src, FALLBACK) == src


def test_resample_upscales_in_blocks():
    src = _grid(10)
    out = resample(src, FALLBACK)
    assert len(out) == GRID_CELLS
    for y in range(PIXEL_GRID):
        for x in range(PIXEL_GRID):
            assert _at(out, x, y) == src[(y // 2) * 10 + (x // 2)]


def test_resample_downscales_by_sampling():
    src = _grid(40)
    out = resample(src, FALLBACK)
    for y in range(PIXEL_GRID):
        for x in range(PIXEL_GRID):
            assert _at(out, x, y) == src[(2 * y) * 40 + 2 * x]


def test_resample_always_400_cells():
    for n in (1, 3, 7, 19, 21, 64):
        assert len(resample(_grid(n), FALLBACK)) == GRID_CELLS
    for length in (2, 15, 30, 50, 401):
        assert len(resample(["#000000"] * length, FALLBACK)) == GRID_CELLS


def test_resample_empty_source_is_fallback_fill():
    assert resample([], FALLBACK) == [FALLBACK] * GRID_CELLS


def test_resample_pads_short_non_square_source():
    # 15 values -> side 4, the 16th source cell is missing
    out = resample(["#000000"] * 15, FALLBACK)
    assert _at(out, 0, 0) == "#000000"
    assert _at(out, PIXEL_GRID - 1, PIXEL_GRID - 1) is None
    assert out.count(None) == 25


def test_resample_coerces_wire_values():
    src = [0, True, "#123456", ""]            # 2 x 2
    out = resample(src, FALLBACK)
    assert _at(out, 0, 0) is None
    assert _at(out, 19, 0) == FALLBACK
    assert _at(out, 0, 19) == "#123456"
    assert _at(out, 19, 19) is None


def test_normalize_keeps_native_grids():
    src = [0] * GRID_CELLS
    src[5] = "#ABCDEF"
    out = normalize(src, FALLBACK)
    assert out[5] == "#ABCDEF"
    assert out.count(None) == GRID_CELLS - 1


def test_brush_footprint_sizes():
    assert len(brush_footprint(5, 5, 1, "square")) == 1
    assert sorted(brush_footprint(5, 5, 2, "square")) == [(5, 5), (5, 6), (6, 5), (6, 6)]
    assert len(brush_footprint(5, 5, 3, "square")) == 9
    assert len(brush_footprint(5, 5, 5, "square")) == 25
    assert len(brush_footprint(5, 5, 5, "circle")) == 21
    assert brush_footprint(5, 5, 1, "circle") == [(5, 5)]


def test_brush_footprint_clips_to_grid():
    assert sorted(brush_footprint(0, 0, 3, "square")) == [(0, 0), (0, 1), (1, 0), (1, 1)]
    last = PIXEL_GRID - 1
    assert len(brush_footprint(last, last, 5, "square")) == 9
    assert brush_footprint(-5, -5, 3, "square") == []


def test_brush_size_is_clamped():
    assert len(brush_footprint(10, 10, 0, "square")) == 1
    assert len(brush_footprint(10, 10, 9, "square")) == 25


def test_cell_index():
    assert cell_index(0, 0) == 0
    assert cell_index(3, 2) == 2 * PIXEL_GRID + 3
    assert cell_index(-1, 0) is None
    assert cell_index(0, PIXEL_GRID) is None


def test_export_document_fields():
    cells = blank_grid()
    cells[0] = "#FFFFFF"
    doc = export_document(2, cells)
    assert doc["app"] == "tower-jumper"
    assert doc["kind"] == "pixel-art"
    assert doc["version"] == 1
    assert doc["grid"] == PIXEL_GRID and doc["slot"] == 2
    assert doc["pixels"][0] == "#FFFFFF" and doc["pixels"][1] == 0
    assert len(doc["pixels"]) == GRID_CELLS


def test_parse_import_accepts_array_and_document():
    bare = parse_import(json.dumps(_grid(PIXEL_GRID)), FALLBACK)
    assert bare == _grid(PIXEL_GRID)
    wrapped = parse_import(json.dumps({"pixels": _grid(10)}), FALLBACK)
    assert _at(wrapped, 3, 3) == _grid(10)[1 * 10 + 1]


@pytest.mark.parametrize("text", [
    "not json",
    "42",
    '"pixels"',
    '{"foo": []}',
    '{"pixels": "nope"}',
    "",
])
def test_parse_import_rejects_non_grids(text):
    with pytest.raises(PixelArtImportError) as exc:
        parse_import(text, FALLBACK)
    assert str(exc.value) == IMPORT_ERROR_MESSAGE


def main():
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn) and name != "test_parse_import_rejects_non_grids":
            fn()
    for text in ("not json", "42", '{"foo": []}'):
        test_parse_import_rejects_non_grids(text)
    print("✓ pixel art tests passed")


if __name__ == "__main__":
    main()
