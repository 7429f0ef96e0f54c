# tower_jumper/tests/test_simulation.py
"""
Per-tick simulation: start layout, input, physics, landings, scoring,
scrolling, generation, platform motion, culling and the fall-off check.

Usage (from repo root):
  python -m pytest tower_jumper/tests/test_simulation.py
  python -m tower_jumper.tests.test_simulation
"""
from __future__ import annotations
import random

from tower_jumper.game.config import (
    WIDTH, HEIGHT, PLAYER_W, PLAYER_H, PLAYER_SPEED, JUMP_VY, GRAVITY, SPIN_SPEED,
    PLATFORM_GAP_Y, PLATFORM_HEIGHT, PLATFORM_BASE_WIDTH, CULL_MARGIN_Y,
)
from tower_jumper.game.level import Platform, PlatformField
from tower_jumper.game.simulation import InputSnapshot, InputState, new_game, step

NOOP = InputSnapshot()


class FixedRng:
    """random.Random stand-in returning a scripted sequence."""
    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


def run_until_grounded(state, max_ticks=60):
    for _ in range(max_ticks):
        step(state, NOOP)
        if state.player.grounded or state.game_over:
            return
    raise AssertionError("player never landed")


def test_new_game_layout_is_deterministic():
    s1, s2 = new_game(seed=7), new_game(seed=7)
    assert s1.player.x == WIDTH / 2 - PLAYER_W / 2
    assert s1.player.y == HEIGHT - 40
    assert s1.score == 0 and s1.scroll_y == 0.0
    assert len(s1.platforms) == 8

    base = s1.platforms[0]
    assert base.base and base.scored and base.index == 0
    assert (base.x, base.y, base.w) == (0.0, HEIGHT - 10, WIDTH)

    for i, plat in enumerate(s1.platforms[1:], start=1):
        assert plat.index == i
        assert plat.y == HEIGHT - i * PLATFORM_GAP_Y
        assert plat.w == PLATFORM_BASE_WIDTH and plat.h == PLATFORM_HEIGHT
        assert not plat.moving and not plat.scored
        assert 0 <= plat.x <= WIDTH - PLATFORM_BASE_WIDTH
    assert [p.x for p in s1.platforms] == [p.x for p in s2.platforms]


def test_first_tick_lands_on_base_without_scoring():
    s = new_game(seed=1)
    step(s, NOOP)
    assert s.player.grounded and s.player.support is s.platforms[0]
    assert s.events.landed
    assert s.score == 0


def test_landing_on_platform_three_scores_once():
    s = new_game(seed=3)
    p3 = s.platforms[3]
    assert p3.index == 3
    s.player.x = p3.x + 10
    s.player.y = p3.y - PLAYER_H - 20
    s.player.vy = 0.0

    run_until_grounded(s)
    assert s.player.support is p3
    assert s.player.y == p3.y - PLAYER_H
    assert s.score == 1 and p3.scored

    # resting on it for a while never scores again
    for _ in range(120):
        step(s, NOOP)
        assert p3.scored
    assert s.score == 1


def test_scored_flag_never_clears_and_one_point_per_platform():
    s = new_game(seed=11)
    for idx in (1, 2):
        plat = s.platforms[idx]
        s.player.x = plat.x + 5
        s.player.y = plat.y - PLAYER_H - 10
        s.player.vy = 0.0
        run_until_grounded(s)
        assert plat.scored
    assert s.score == 2
    # land on platform 1 again
    p1 = s.platforms[1]
    s.player.x = p1.x + 5
    s.player.y = p1.y - PLAYER_H - 10
    s.player.vy = 0.0
    run_until_grounded(s)
    assert s.score == 2 and p1.scored


def test_right_wins_when_both_directions_held():
    s = new_game(seed=1)
    step(s, InputSnapshot(left=True, right=True))
    assert s.player.vx == PLAYER_SPEED
    step(s, InputSnapshot(left=True))
    assert s.player.vx == -PLAYER_SPEED
    step(s, NOOP)
    assert s.player.vx == 0.0


def test_jump_only_when_grounded():
    s = new_game(seed=1)
    # airborne on the first tick: no jump
    step(s, InputSnapshot(jump=True))
    assert not s.events.jumped
    assert s.player.grounded
    step(s, InputSnapshot(tap=True))
    assert s.events.jumped
    assert s.player.vy == JUMP_VY + GRAVITY
    assert not s.player.grounded


def test_tap_flag_consumed_every_snapshot():
    inputs = InputState()
    inputs.pointer_tap()
    assert inputs.snapshot().tap
    assert not inputs.snapshot().tap

    inputs.key_down("KeyA")
    inputs.key_down("ArrowRight")
    snap = inputs.snapshot()
    assert snap.left and snap.right and not snap.jump
    inputs.key_up("KeyA")
    assert not inputs.snapshot().left

    inputs.set_direction("left", True)
    assert inputs.snapshot().left
    inputs.set_direction("left", False)
    assert not inputs.snapshot().left


def test_horizontal_wrap_around():
    s = new_game(seed=1)
    s.player.x = -PLAYER_W - 1
    step(s, NOOP)
    assert s.player.x == WIDTH

    s.player.x = WIDTH + 1
    step(s, NOOP)
    assert s.player.x == -PLAYER_W


def test_swept_landing_catches_fast_fall():
    rng = random.Random(0)
    level = PlatformField(rng, WIDTH, HEIGHT)
    plat = Platform(x=100, y=300, w=110, h=PLATFORM_HEIGHT, index=1)
    level.platforms = [plat]
    s = new_game(seed=0)
    s.level = level
    s.player.x = 120
    s.player.vy = 19.3
    s.player.y = plat.y - PLAYER_H - 5   # after the step the feet are 15 px inside
    step(s, NOOP)
    assert s.player.grounded and s.player.support is plat
    assert s.player.y == plat.y - PLAYER_H


def test_moving_up_never_lands():
    s = new_game(seed=0)
    plat = s.platforms[1]
    s.player.x = plat.x + 5
    s.player.y = plat.y - PLAYER_H + 2
    s.player.vy = -10.0
    step(s, NOOP)
    assert s.player.support is not plat


def test_last_candidate_wins():
    rng = random.Random(0)
    level = PlatformField(rng, WIDTH, HEIGHT)
    first = Platform(x=100, y=300, w=110, h=PLATFORM_HEIGHT, index=1)
    second = Platform(x=100, y=300, w=110, h=PLATFORM_HEIGHT, index=2)
    level.platforms = [first, second]
    s = new_game(seed=0)
    s.level = level
    s.player.x, s.player.y, s.player.vy = 120, 300 - PLAYER_H - 0.5, 0.0
    step(s, NOOP)
    assert s.player.support is second
    assert first.scored and second.scored and s.score == 2


def test_carried_by_moving_platform():
    s = new_game(seed=0)
    plat = s.platforms[1]
    plat.moving, plat.direction = True, -1
    plat.x = 150
    s.difficulty.platform_speed = 1.5
    s.player.x = plat.x + 20
    s.player.y = plat.y - PLAYER_H
    s.player.vy = 0.0
    x_before = s.player.x
    step(s, NOOP)
    assert s.player.support is plat
    assert s.player.x == x_before - 1.5


def test_scroll_starts_after_score_three():
    s = new_game(seed=5)
    s.score = 3
    step(s, NOOP)
    assert s.scroll_y == 0.0

    s.score = 4
    speed = s.difficulty.scroll_speed
    ys = [p.y for p in s.platforms]
    step(s, NOOP)
    assert s.scroll_y == speed
    for before, plat in zip(ys, s.platforms):
        assert plat.y == before + speed


def test_spawn_one_platform_when_room_above():
    level = PlatformField.initial(random.Random(2), WIDTH, HEIGHT)
    assert level.maybe_spawn(0, 110.0) is None          # topmost at y=40
    level.scroll(20)                                     # topmost at y=60
    level.rng = FixedRng([0.5, 0.9])
    plat = level.maybe_spawn(0, 90.0)
    assert plat is not None and level.platforms[-1] is plat
    assert plat.y == 60 - PLATFORM_GAP_Y
    assert plat.w == 90.0 and plat.index == 8
    assert plat.x == 0.5 * (WIDTH - 90.0)
    assert not plat.moving and plat.direction == 1
    # the new one is now topmost and above the margin
    assert level.maybe_spawn(0, 90.0) is None


def test_spawn_moving_only_past_platform_ramp():
    level = PlatformField.initial(random.Random(2), WIDTH, HEIGHT)
    level.scroll(20)
    level.rng = FixedRng([0.1, 0.25, 0.2])
    plat = level.maybe_spawn(120, 40.0)
    assert plat.moving and plat.direction == -1
    assert plat.w == 62.0                                # floored width
    assert plat.x == 0.25 * (WIDTH - 62.0)


def test_moving_platform_bounces_off_edges():
    plat = Platform(x=WIDTH - 62 - 0.5, y=100, w=62, h=PLATFORM_HEIGHT, moving=True, direction=1)
    plat.update_movement(1.0, WIDTH)
    assert plat.direction == -1
    plat = Platform(x=0.5, y=100, w=62, h=PLATFORM_HEIGHT, moving=True, direction=-1)
    plat.update_movement(1.0, WIDTH)
    assert plat.direction == 1
    still = Platform(x=10, y=100, w=62, h=PLATFORM_HEIGHT)
    still.update_movement(1.0, WIDTH)
    assert still.x == 10


def test_cull_preserves_order():
    level = PlatformField.initial(random.Random(4), WIDTH, HEIGHT)
    level.platforms[0].y = HEIGHT + CULL_MARGIN_Y
    level.platforms[3].y = HEIGHT + CULL_MARGIN_Y + 5
    keep = [p for i, p in enumerate(level.platforms) if i not in (0, 3)]
    level.cull()
    assert level.platforms == keep


def test_falling_off_ends_the_game():
    s = new_game(seed=9)
    s.score = 2
    s.player.y = HEIGHT + 1
    step(s, NOOP)
    assert s.game_over and s.events.game_over
    ticks = s.ticks
    step(s, NOOP)
    assert s.ticks == ticks


def test_spin_while_airborne_and_reset_on_ground():
    s = new_game(seed=1)
    step(s, NOOP)                                   # land on base
    step(s, InputSnapshot(jump=True, right=True))
    assert s.player.angle == SPIN_SPEED
    step(s, InputSnapshot(left=True))
    assert s.player.spin_dir == -1
    assert abs(s.player.angle) < 1e-12
    step(s, NOOP)                                   # no vx: angle frozen
    assert abs(s.player.angle) < 1e-12
    run_until_grounded(s)
    assert s.player.angle == 0.0


def main():
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
    print("✓ simulation tests passed")


if __name__ == "__main__":
    main()
