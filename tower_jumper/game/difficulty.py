# tower_jumper/game/difficulty.py
from __future__ import annotations
import math
from dataclasses import dataclass
from .config import (
    SCROLL_RAMP_START, SCROLL_BASE_SPEED, SCROLL_LOG_ACCEL, SCROLL_MAX_SPEED, SCROLL_SMOOTHING,
    PLATFORM_RAMP_START, PLATFORM_DIFFICULTY_INTERVAL, PLATFORM_BASE_SPEED, PLATFORM_MAX_SPEED,
    PLATFORM_LOG_ACCEL, PLATFORM_SPEED_SMOOTHING,
    PLATFORM_BASE_WIDTH, PLATFORM_MIN_WIDTH, PLATFORM_WIDTH_LOG_FACTOR, PLATFORM_WIDTH_SMOOTHING,
)


def ease_towards(current: float, target: float, smoothing: float) -> float:
    return current + (target - current) * smoothing


def target_scroll_speed(score: int) -> float:
    if score < SCROLL_RAMP_START:
        return SCROLL_BASE_SPEED
    ramp = score - SCROLL_RAMP_START + 1
    return min(SCROLL_BASE_SPEED + SCROLL_LOG_ACCEL * math.log1p(ramp), SCROLL_MAX_SPEED)


def target_platform_speed(score: int) -> float:
    """Zero until the platform ramp starts, then log growth from the base speed."""
    if score < PLATFORM_RAMP_START:
        return 0.0
    normalized = (score - PLATFORM_RAMP_START) / PLATFORM_DIFFICULTY_INTERVAL
    target = PLATFORM_BASE_SPEED + PLATFORM_LOG_ACCEL * math.log1p(max(0.0, normalized))
    return min(target, PLATFORM_MAX_SPEED)


def target_platform_width(score: int) -> float:
    # The shrink is measured from the scroll ramp, not from zero.
    if score <= 0:
        return float(PLATFORM_BASE_WIDTH)
    ramp = max(0, score - SCROLL_RAMP_START)
    reduction = PLATFORM_WIDTH_LOG_FACTOR * math.log1p(ramp / PLATFORM_DIFFICULTY_INTERVAL)
    return max(float(PLATFORM_MIN_WIDTH), PLATFORM_BASE_WIDTH - reduction)


@dataclass
class DifficultyState:
    """Smoothed difficulty values; each moves a fixed fraction toward its target per tick."""
    scroll_speed: float = SCROLL_BASE_SPEED
    platform_speed: float = 0.0
    platform_width: float = float(PLATFORM_BASE_WIDTH)

    def ease(self, score: int) -> None:
        self.scroll_speed = ease_towards(self.scroll_speed, target_scroll_speed(score), SCROLL_SMOOTHING)
        self.platform_speed = ease_towards(self.platform_speed, target_platform_speed(score),
                                           PLATFORM_SPEED_SMOOTHING)
        self.platform_width = ease_towards(self.platform_width, target_platform_width(score),
                                           PLATFORM_WIDTH_SMOOTHING)
