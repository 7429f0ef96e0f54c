# tower_jumper/game/player.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Optional
from .config import (
    PLAYER_W, PLAYER_H, GRAVITY, JUMP_VY, PLAYER_SPEED, SPIN_SPEED, DEFAULT_COLOR,
)
from .level import Platform
from .pixel_art import Cell, blank_grid


@dataclass
class Player:
    """
    Climber with semi-implicit Euler physics, one step per tick:
    - vy grows by GRAVITY, then position moves by the new velocity
    - horizontal position wraps around the screen edges
    - landing is only resolved from above (vy >= 0)
    """
    x: float
    y: float
    w: int = PLAYER_W
    h: int = PLAYER_H
    vx: float = 0.0
    vy: float = 0.0
    grounded: bool = False
    support: Optional[Platform] = None      # platform under the feet, not owned
    mode: str = "color"                     # "color" | "pixel"
    color: str = DEFAULT_COLOR
    pixels: List[Cell] = field(default_factory=blank_grid)
    angle: float = 0.0
    spin_dir: int = 1

    def apply_input(self, left: bool, right: bool, want_jump: bool) -> bool:
        """Set vx from held directions (right wins a tie) and jump if grounded. Returns True on jump."""
        vx = 0.0
        if left:
            vx = -PLAYER_SPEED
        if right:
            vx = PLAYER_SPEED
        self.vx = vx

        if want_jump and self.grounded:
            self.vy = JUMP_VY
            self.grounded = False
            self.support = None
            return True
        return False

    def update_physics(self, canvas_w: int):
        self.vy += GRAVITY
        self.x += self.vx
        self.y += self.vy

        if self.x < -self.w:
            self.x = float(canvas_w)
        if self.x > canvas_w:
            self.x = float(-self.w)

    def resolve_landings(self, platforms: Iterable[Platform]) -> List[Platform]:
        """
        Swept landing test against every platform, in order.
        The band below a platform top grows with vy so fast falls can't tunnel;
        when several platforms qualify the last one wins.
        Returns the platforms landed on this tick.
        """
        self.grounded = False
        self.support = None
        landed: List[Platform] = []
        for plat in platforms:
            if (
                self.vy >= 0
                and self.x + self.w > plat.x
                and self.x < plat.x + plat.w
                and self.y + self.h >= plat.y
                and self.y + self.h <= plat.y + plat.h + self.vy
            ):
                self.y = plat.y - self.h
                self.vy = 0.0
                self.grounded = True
                self.support = plat
                landed.append(plat)
        return landed

    def carry(self, platform_speed: float):
        if self.grounded and self.support is not None and self.support.moving:
            self.x += self.support.direction * platform_speed

    def update_spin(self):
        if self.grounded:
            self.angle = 0.0
            return
        if self.vx > 0:
            self.spin_dir = 1
        elif self.vx < 0:
            self.spin_dir = -1
        if abs(self.vx) > 0:
            self.angle += SPIN_SPEED * self.spin_dir
