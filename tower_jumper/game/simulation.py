# tower_jumper/game/simulation.py
"""
One game of Tower Jumper as plain data plus a per-tick `step`.

`step` owns physics, collisions, scoring, scrolling, difficulty easing,
platform generation/motion/culling and the fall-off check. It never
schedules frames, plays sounds, touches storage or draws; it reports what
happened through `state.events` and the caller reacts.
"""
from __future__ import annotations
import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set
from .config import (
    WIDTH, HEIGHT, PLAYER_W, SCROLL_START_SCORE, DEFAULT_COLOR,
)
from .difficulty import DifficultyState
from .level import Platform, PlatformField
from .pixel_art import Cell, blank_grid
from .player import Player

LEFT_KEYS = frozenset({"ArrowLeft", "KeyA"})
RIGHT_KEYS = frozenset({"ArrowRight", "KeyD"})
JUMP_KEYS = frozenset({"Space"})


@dataclass(frozen=True)
class InputSnapshot:
    left: bool = False
    right: bool = False
    jump: bool = False
    tap: bool = False


class InputState:
    """
    Written by key/pointer handlers between frames, sampled once per tick.
    The tap flag is one-shot: every snapshot consumes it.
    """
    def __init__(self):
        self.held: Set[str] = set()
        self.tap = False

    def key_down(self, code: str):
        self.held.add(code)

    def key_up(self, code: str):
        self.held.discard(code)

    def set_direction(self, direction: str, active: bool):
        """Touch buttons drive the same codes as the keyboard."""
        codes = LEFT_KEYS if direction == "left" else RIGHT_KEYS
        for code in codes:
            if active:
                self.held.add(code)
            else:
                self.held.discard(code)

    def pointer_tap(self):
        self.tap = True

    def release_all(self):
        self.held.clear()
        self.tap = False

    def snapshot(self) -> InputSnapshot:
        snap = InputSnapshot(
            left=bool(self.held & LEFT_KEYS),
            right=bool(self.held & RIGHT_KEYS),
            jump=bool(self.held & JUMP_KEYS),
            tap=self.tap,
        )
        self.tap = False
        return snap


@dataclass
class TickEvents:
    jumped: bool = False
    landed: bool = False
    scored: int = 0
    spawned: int = 0
    game_over: bool = False


@dataclass
class SimulationState:
    player: Player
    level: PlatformField
    difficulty: DifficultyState = field(default_factory=DifficultyState)
    score: int = 0
    scroll_y: float = 0.0
    ticks: int = 0
    game_over: bool = False
    events: TickEvents = field(default_factory=TickEvents)

    @property
    def platforms(self) -> List[Platform]:
        return self.level.platforms

    @property
    def canvas_w(self) -> int:
        return self.level.canvas_w

    @property
    def canvas_h(self) -> int:
        return self.level.canvas_h


def new_game(seed: Optional[int] = None,
             rng: Optional[random.Random] = None,
             mode: str = "color",
             color: str = DEFAULT_COLOR,
             pixels: Optional[Sequence[Cell]] = None,
             canvas_w: int = WIDTH,
             canvas_h: int = HEIGHT) -> SimulationState:
    """Fresh player on the ground plus the base platform and the first platforms above it."""
    rng = rng if rng is not None else random.Random(seed)
    player = Player(
        x=canvas_w / 2 - PLAYER_W / 2,
        y=float(canvas_h - 40),
        mode="pixel" if mode == "pixel" else "color",
        color=color,
        pixels=list(pixels) if pixels is not None else blank_grid(),
    )
    return SimulationState(player=player, level=PlatformField.initial(rng, canvas_w, canvas_h))


def _award(state: SimulationState, landed: Iterable[Platform]) -> int:
    gained = 0
    for plat in landed:
        if not plat.scored and not plat.base:
            plat.scored = True
            gained += 1
    state.score += gained
    return gained


def step(state: SimulationState, inputs: InputSnapshot) -> SimulationState:
    """Advance one tick. Mutates and returns `state`; a finished game is left untouched."""
    if state.game_over:
        return state

    events = TickEvents()
    state.events = events
    player = state.player
    diff = state.difficulty
    w, h = state.canvas_w, state.canvas_h

    events.jumped = player.apply_input(inputs.left, inputs.right, inputs.jump or inputs.tap)

    was_grounded = player.grounded
    player.update_physics(w)

    landed = player.resolve_landings(state.platforms)
    events.scored = _award(state, landed)
    events.landed = player.grounded and not was_grounded

    player.carry(diff.platform_speed)

    if state.score > SCROLL_START_SCORE:
        state.scroll_y += diff.scroll_speed
        state.level.scroll(diff.scroll_speed)
        player.y += diff.scroll_speed

    diff.ease(state.score)

    if state.level.maybe_spawn(state.score, diff.platform_width) is not None:
        events.spawned = 1

    state.level.update_movement(diff.platform_speed)
    state.level.cull()
    state.ticks += 1

    if player.y > h:
        state.game_over = True
        events.game_over = True
        return state

    player.update_spin()
    return state
