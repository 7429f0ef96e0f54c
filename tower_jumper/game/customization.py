# tower_jumper/game/customization.py
from __future__ import annotations
import json
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence
from .config import (
    COLOR_KEY, BRUSH_COLOR_KEY, BRUSH_SIZE_KEY, BRUSH_SHAPE_KEY, RENDER_MODE_KEY,
    PIXEL_ART_KEY, PIXEL_SLOT_KEY, PIXEL_SLOTS, BRUSH_MIN_SIZE, BRUSH_MAX_SIZE,
    DEFAULT_COLOR, COLOR_CHOICES,
)
from .pixel_art import (
    Cell, blank_grid, filled_grid, normalize, resample, cells_to_wire,
    brush_footprint, cell_index, export_document, parse_import,
)
from .storage import SafeStore, to_int


class CustomizationStore:
    """Avatar color, render mode, pixel-art slots and brush settings, all persisted."""

    def __init__(self, store: SafeStore):
        self.store = store

    # --- render mode / color ---
    def render_mode(self) -> str:
        return "pixel" if self.store.read(RENDER_MODE_KEY, "color") == "pixel" else "color"

    def set_render_mode(self, mode: str):
        self.store.set(RENDER_MODE_KEY, "pixel" if mode == "pixel" else "color")

    def color(self) -> str:
        return self.store.read(COLOR_KEY, DEFAULT_COLOR)

    def set_color(self, color: str):
        self.store.set(COLOR_KEY, color)

    def choose_color(self, color: str) -> str:
        """Picker path: only palette colors, and picking one switches back to color mode."""
        match = next((c for c in COLOR_CHOICES if c.lower() == str(color).lower()), None)
        if match is None:
            raise ValueError(f"{color!r} is not one of the picker colors {COLOR_CHOICES}")
        self.set_render_mode("color")
        self.set_color(match)
        return match

    # --- brush ---
    def brush_color(self) -> str:
        return self.store.read(BRUSH_COLOR_KEY, self.color())

    def set_brush_color(self, color: str):
        self.store.set(BRUSH_COLOR_KEY, color)

    def brush_size(self) -> int:
        return self.store.read_clamped_int(BRUSH_SIZE_KEY, 1, BRUSH_MIN_SIZE, BRUSH_MAX_SIZE)

    def set_brush_size(self, size) -> int:
        return self.store.write_clamped_int(BRUSH_SIZE_KEY, to_int(size, 1), BRUSH_MIN_SIZE, BRUSH_MAX_SIZE)

    def brush_shape(self) -> str:
        return "circle" if self.store.read(BRUSH_SHAPE_KEY, "square") == "circle" else "square"

    def set_brush_shape(self, shape: str):
        self.store.set(BRUSH_SHAPE_KEY, "circle" if shape == "circle" else "square")

    # --- slots ---
    def slot(self) -> int:
        return self.store.read_clamped_int(PIXEL_SLOT_KEY, 0, 0, PIXEL_SLOTS - 1)

    def set_slot(self, idx) -> int:
        return self.store.write_clamped_int(PIXEL_SLOT_KEY, to_int(idx, 0), 0, PIXEL_SLOTS - 1)

    def default_pixel_art(self) -> List[Cell]:
        return filled_grid(self.brush_color() or self.color() or DEFAULT_COLOR)

    def load_slot(self, idx: int) -> List[Cell]:
        data = self.store.read_json(f"{PIXEL_ART_KEY}_{idx}", None)
        if isinstance(data, list):
            return normalize(data, self.brush_color())
        if idx == 0:
            legacy = self.store.read_json(PIXEL_ART_KEY, None)
            if isinstance(legacy, list):
                return resample(legacy, self.brush_color())
        return self.default_pixel_art()

    def save_slot(self, idx: int, cells: Sequence[Cell]):
        self.store.write_json(f"{PIXEL_ART_KEY}_{idx}", cells_to_wire(cells))

    def load_pixel_art(self) -> List[Cell]:
        return self.load_slot(self.slot())

    def save_pixel_art(self, cells: Sequence[Cell]):
        self.save_slot(self.slot(), cells)

    def clear(self) -> List[Cell]:
        cells = blank_grid()
        self.save_pixel_art(cells)
        return cells

    def reset(self) -> List[Cell]:
        cells = self.default_pixel_art()
        self.save_pixel_art(cells)
        return cells

    # --- export / import ---
    def export_document(self, cells: Optional[Sequence[Cell]] = None) -> dict:
        return export_document(self.slot(), cells if cells is not None else self.load_pixel_art())

    def export_json(self, cells: Optional[Sequence[Cell]] = None) -> str:
        return json.dumps(self.export_document(cells))

    def export_filename(self, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        stamp = now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"
        return f"towerjumper_pixel_slot-{self.slot()}_{stamp}.json"

    def import_document(self, text: str | bytes) -> List[Cell]:
        """Parse, resample and store into the active slot. State is untouched on error."""
        cells = parse_import(text, self.brush_color() or DEFAULT_COLOR)
        self.save_pixel_art(cells)
        return cells


class PixelEditor:
    """
    Editing session on the active slot.
    A stroke decides once, at pointer-down, whether it erases or paints:
    starting on a filled cell erases everything the stroke touches, starting
    on an empty cell paints with the brush color.
    """
    def __init__(self, store: CustomizationStore,
                 on_change: Optional[Callable[[List[Cell]], None]] = None):
        self.store = store
        self.on_change = on_change
        self.cells: List[Cell] = store.load_pixel_art()
        self.drawing = False
        self._paint_value: Cell = None

    def _changed(self):
        self.store.save_pixel_art(self.cells)
        if self.on_change is not None:
            self.on_change(list(self.cells))

    def begin_stroke(self, x: int, y: int):
        idx = cell_index(x, y)
        filled = idx is not None and self.cells[idx] is not None
        self._paint_value = None if filled else (self.store.brush_color() or DEFAULT_COLOR)
        self.drawing = True
        self.apply_at(x, y)

    def drag_to(self, x: int, y: int):
        if self.drawing:
            self.apply_at(x, y)

    def end_stroke(self):
        self.drawing = False

    def apply_at(self, x: int, y: int) -> bool:
        changed = False
        for xx, yy in brush_footprint(x, y, self.store.brush_size(), self.store.brush_shape()):
            idx = cell_index(xx, yy)
            if self.cells[idx] != self._paint_value:
                self.cells[idx] = self._paint_value
                changed = True
        if changed:
            self._changed()
        return changed

    def select_slot(self, idx) -> List[Cell]:
        self.store.set_slot(idx)
        self.cells = self.store.load_pixel_art()
        if self.on_change is not None:
            self.on_change(list(self.cells))
        return self.cells

    def select_design(self, idx) -> List[Cell]:
        """Design picker: switch to pixel mode and show the chosen slot."""
        self.store.set_render_mode("pixel")
        return self.select_slot(idx)

    def clear(self):
        self.cells = self.store.clear()
        if self.on_change is not None:
            self.on_change(list(self.cells))

    def reset(self):
        self.cells = self.store.reset()
        if self.on_change is not None:
            self.on_change(list(self.cells))

    def import_document(self, text: str | bytes) -> List[Cell]:
        cells = self.store.import_document(text)
        self.cells = list(cells)
        if self.on_change is not None:
            self.on_change(list(self.cells))
        return self.cells
