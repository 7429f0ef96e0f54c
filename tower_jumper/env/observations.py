# tower_jumper/env/observations.py
from __future__ import annotations
from typing import List, Optional, Tuple
import numpy as np

from tower_jumper.game.config import (
    SCROLL_MAX_SPEED, PLATFORM_MAX_SPEED, PLATFORM_BASE_WIDTH, PLAYER_SPEED, JUMP_VY,
)
from tower_jumper.game.level import Platform
from tower_jumper.game.simulation import SimulationState

# Number of platforms above the player described in the vector
NEAREST_PLATFORMS: int = 3
MAX_VY: float = abs(JUMP_VY) * 1.5
# Sentinel for "no platform": centered, a full screen away, no width, static
NO_PLATFORM: Tuple[float, float, float, float] = (0.0, 1.0, 0.0, 0.0)

OBS_SIZE = 7 + 4 * NEAREST_PLATFORMS


def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def observation_bounds() -> Tuple[np.ndarray, np.ndarray]:
    low = [0.0, 0.0, -1.0, -1.0, 0.0, 0.0, 0.0] + [-1.0, 0.0, 0.0, 0.0] * NEAREST_PLATFORMS
    high = [1.0] * OBS_SIZE
    return np.array(low, dtype=np.float32), np.array(high, dtype=np.float32)


def platforms_above(state: SimulationState, k: int = NEAREST_PLATFORMS) -> List[Platform]:
    """Closest platforms whose top is above the player's feet, nearest first."""
    feet = state.player.y + state.player.h
    above = [p for p in state.platforms if p.y < feet - 1e-6]
    above.sort(key=lambda p: feet - p.y)
    return above[:k]


def build_observation(state: SimulationState, k: int = NEAREST_PLATFORMS) -> np.ndarray:
    """
    Returns a fixed (7 + 4k,) float32 vector:
      [ x_norm, y_norm, vx_norm, vy_norm, grounded, scroll_norm, platform_speed_norm,
        then per platform above (nearest first):
        dx_norm, dy_norm, width_norm, moving ]
    - x_norm/y_norm in [0,1] over the canvas (wrap margins clamped)
    - vx_norm/vy_norm in [-1,1]
    - dx_norm: platform center minus player center over canvas width, [-1,1]
    - dy_norm: feet-to-platform-top distance over canvas height, [0,1]
    - missing platforms use NO_PLATFORM
    """
    p = state.player
    w, h = float(state.canvas_w), float(state.canvas_h)
    diff = state.difficulty

    feats: List[float] = [
        _clamp(p.x / max(1.0, w - p.w), 0.0, 1.0),
        _clamp(p.y / max(1.0, h - p.h), 0.0, 1.0),
        _clamp(p.vx / PLAYER_SPEED, -1.0, 1.0),
        _clamp(p.vy / MAX_VY, -1.0, 1.0),
        1.0 if p.grounded else 0.0,
        _clamp(diff.scroll_speed / SCROLL_MAX_SPEED, 0.0, 1.0),
        _clamp(diff.platform_speed / PLATFORM_MAX_SPEED, 0.0, 1.0),
    ]

    cx = p.x + p.w / 2
    feet = p.y + p.h
    near = platforms_above(state, k)
    for plat in near:
        feats.extend([
            _clamp((plat.x + plat.w / 2 - cx) / w, -1.0, 1.0),
            _clamp((feet - plat.y) / h, 0.0, 1.0),
            _clamp(plat.w / PLATFORM_BASE_WIDTH, 0.0, 1.0),
            1.0 if plat.moving else 0.0,
        ])
    for _ in range(k - len(near)):
        feats.extend(NO_PLATFORM)

    return np.asarray(feats, dtype=np.float32)
