# tower_jumper/game/level.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional
import pygame
from .config import (
    PLATFORM_HEIGHT, BASE_PLATFORM_HEIGHT, PLATFORM_GAP_Y, INITIAL_PLATFORMS,
    PLATFORM_BASE_WIDTH, PLATFORM_MIN_WIDTH, PLATFORM_RAMP_START, MOVING_PLATFORM_CHANCE,
    SPAWN_MARGIN_Y, SPAWN_MIN_SPAN_X, CULL_MARGIN_Y,
)


@dataclass(eq=False)
class Platform:
    x: float
    y: float
    w: float
    h: float
    moving: bool = False
    direction: int = 1      # +1 right, -1 left
    index: int = 0          # creation order, drives color bands and labels
    scored: bool = False    # set once on first landing, never cleared
    base: bool = False      # initial ground, never scores

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(round(self.w)), int(self.h))

    def update_movement(self, speed: float, canvas_w: int):
        """Translate a moving platform and bounce it off the screen edges."""
        if not self.moving:
            return
        self.x += self.direction * speed
        if self.x < 0 or self.x + self.w > canvas_w:
            self.direction *= -1


class PlatformField:
    """
    Insertion-ordered platform list plus the generator state that feeds it.
    Platforms spawn one per tick above the topmost one while there is room
    above the screen, and are culled once they scroll past the bottom.
    """
    def __init__(self, rng: random.Random, canvas_w: int, canvas_h: int):
        self.rng = rng
        self.canvas_w = canvas_w
        self.canvas_h = canvas_h
        self.platforms: List[Platform] = []
        self.next_index = 0

    def _init_start(self):
        self.platforms = [Platform(
            x=0.0, y=float(self.canvas_h - BASE_PLATFORM_HEIGHT),
            w=float(self.canvas_w), h=float(BASE_PLATFORM_HEIGHT),
            base=True, scored=True, index=0,
        )]
        self.next_index = 0
        for i in range(1, INITIAL_PLATFORMS + 1):
            self.next_index += 1
            self.platforms.append(Platform(
                x=self.rng.random() * (self.canvas_w - PLATFORM_BASE_WIDTH),
                y=float(self.canvas_h - i * PLATFORM_GAP_Y),
                w=float(PLATFORM_BASE_WIDTH),
                h=float(PLATFORM_HEIGHT),
                index=self.next_index,
            ))

    @classmethod
    def initial(cls, rng: random.Random, canvas_w: int, canvas_h: int) -> "PlatformField":
        field = cls(rng, canvas_w, canvas_h)
        field._init_start()
        return field

    def highest_y(self) -> Optional[float]:
        return min((p.y for p in self.platforms), default=None)

    def maybe_spawn(self, score: int, base_width: float) -> Optional[Platform]:
        """Spawn at most one platform above the topmost when it has dropped below the margin."""
        top = self.highest_y()
        if top is None or top <= SPAWN_MARGIN_Y:
            return None
        moving = score >= PLATFORM_RAMP_START and self.rng.random() < MOVING_PLATFORM_CHANCE
        self.next_index += 1
        width = max(float(PLATFORM_MIN_WIDTH), base_width)
        plat = Platform(
            x=self.rng.random() * max(SPAWN_MIN_SPAN_X, self.canvas_w - width),
            y=top - PLATFORM_GAP_Y,
            w=width,
            h=float(PLATFORM_HEIGHT),
            moving=moving,
            index=self.next_index,
            direction=-1 if self.rng.random() < 0.5 else 1,
        )
        self.platforms.append(plat)
        return plat

    def scroll(self, dy: float):
        for platform in self.platforms:
            platform.y += dy

    def update_movement(self, speed: float):
        for platform in self.platforms:
            platform.update_movement(speed, self.canvas_w)

    def cull(self):
        limit = self.canvas_h + CULL_MARGIN_Y
        self.platforms = [p for p in self.platforms if p.y < limit]
