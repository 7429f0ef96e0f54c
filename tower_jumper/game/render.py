# tower_jumper/game/render.py
from __future__ import annotations
import math
from typing import Dict, Optional, Sequence, Tuple
import pygame
from .config import (
    PIXEL_GRID, PLATFORM_COLORS, PLATFORM_COLOR_BAND, PLATFORM_LABEL_EVERY,
    LABEL_COLOR, SHADOW_OFFSET, DEFAULT_COLOR,
)
from .pixel_art import Cell
from .simulation import SimulationState
from .theme import ThemeVisuals, THEME_VISUALS, DEFAULT_THEME


def platform_color(index: int) -> str:
    return PLATFORM_COLORS[(index // PLATFORM_COLOR_BAND) % len(PLATFORM_COLORS)]


def safe_color(value, fallback: str = DEFAULT_COLOR) -> pygame.Color:
    """Stored colors are free text; anything pygame can't parse draws as the fallback."""
    try:
        return pygame.Color(value or fallback)
    except (ValueError, TypeError):
        return pygame.Color(fallback)


def pixel_sprite(cells: Sequence[Cell], size: Tuple[int, int]) -> pygame.Surface:
    """Grid drawn 1 px per cell, then scaled nearest-neighbor so pixels stay crisp."""
    small = pygame.Surface((PIXEL_GRID, PIXEL_GRID), pygame.SRCALPHA)
    small.fill((0, 0, 0, 0))
    for i, value in enumerate(cells[: PIXEL_GRID * PIXEL_GRID]):
        if value:
            try:
                small.set_at((i % PIXEL_GRID, i // PIXEL_GRID), pygame.Color(value))
            except ValueError:
                continue
    return pygame.transform.scale(small, size)


class FrameRenderer:
    """Immediate-mode drawing of one simulation frame onto a pygame Surface."""

    def __init__(self, visuals: Optional[ThemeVisuals] = None):
        self.visuals = visuals or THEME_VISUALS[DEFAULT_THEME]
        self._fonts: Dict[str, pygame.font.Font] = {}
        self._sprite_key: Optional[Tuple] = None
        self._sprite: Optional[pygame.Surface] = None

    def set_visuals(self, visuals: ThemeVisuals):
        self.visuals = visuals

    def font(self, name: str) -> pygame.font.Font:
        if name not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            size = {"label": 14, "score": 30, "overlay": 40, "small": 20}[name]
            f = pygame.font.Font(None, size)
            if name in ("score", "overlay"):
                f.set_bold(True)
            self._fonts[name] = f
        return self._fonts[name]

    def _player_surface(self, state: SimulationState) -> pygame.Surface:
        p = state.player
        if p.mode == "pixel":
            key = ("pixel", p.w, p.h, tuple(p.pixels))
            if key != self._sprite_key:
                self._sprite = pixel_sprite(p.pixels, (p.w, p.h))
                self._sprite_key = key
            return self._sprite
        surf = pygame.Surface((p.w, p.h), pygame.SRCALPHA)
        surf.fill(safe_color(p.color))
        return surf

    def draw(self, surf: pygame.Surface, state: SimulationState):
        surf.fill(self.visuals.background)
        self.draw_platforms(surf, state)
        self.draw_player(surf, state)
        self.draw_labels(surf, state)
        self.draw_score(surf, state.score)

    def draw_platforms(self, surf: pygame.Surface, state: SimulationState):
        shadow = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
        dx, dy = SHADOW_OFFSET
        for plat in state.platforms:
            shadow.fill(self.visuals.platform_shadow, plat.rect.move(dx, dy))
        surf.blit(shadow, (0, 0))
        for plat in state.platforms:
            pygame.draw.rect(surf, pygame.Color(platform_color(plat.index)), plat.rect)

    def draw_player(self, surf: pygame.Surface, state: SimulationState):
        p = state.player
        sprite = self._player_surface(state)
        if p.angle:
            # canvas rotation is clockwise for positive angles, pygame's is counter-clockwise
            sprite = pygame.transform.rotate(sprite, -math.degrees(p.angle))
        center = (p.x + p.w / 2, p.y + p.h / 2)
        surf.blit(sprite, sprite.get_rect(center=(round(center[0]), round(center[1]))))

    def draw_labels(self, surf: pygame.Surface, state: SimulationState):
        font = self.font("label")
        for plat in state.platforms:
            if not plat.base and plat.index and plat.index % PLATFORM_LABEL_EVERY == 0:
                img = font.render(str(plat.index), True, LABEL_COLOR)
                r = img.get_rect(midright=(int(plat.x + plat.w - 4), int(plat.y + plat.h / 2)))
                surf.blit(img, r)

    def draw_score(self, surf: pygame.Surface, score: int):
        img = self.font("score").render(f"Score: {score}", True, self.visuals.score_color)
        surf.blit(img, img.get_rect(midtop=(surf.get_width() // 2, 10)))

    def draw_overlay(self, surf: pygame.Surface, title: str, lines: Sequence[str] = ()):
        veil = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
        veil.fill((0, 0, 0, 150))
        surf.blit(veil, (0, 0))
        cx, cy = surf.get_width() // 2, surf.get_height() // 3
        img = self.font("overlay").render(title, True, (255, 255, 255))
        surf.blit(img, img.get_rect(center=(cx, cy)))
        small = self.font("small")
        for i, line in enumerate(lines):
            txt = small.render(line, True, (220, 230, 245))
            surf.blit(txt, txt.get_rect(center=(cx, cy + 44 + i * 24)))
