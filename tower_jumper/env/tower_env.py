# tower_jumper/env/tower_env.py
from __future__ import annotations
import random
from typing import Optional, Tuple, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from tower_jumper.game.config import WIDTH, HEIGHT, FPS
from tower_jumper.game.render import FrameRenderer
from tower_jumper.game.simulation import InputSnapshot, SimulationState, new_game, step
from tower_jumper.env.observations import OBS_SIZE, build_observation, observation_bounds

# action -> (left, right, jump)
ACTIONS: Tuple[Tuple[bool, bool, bool], ...] = (
    (False, False, False),  # 0 NOOP
    (True, False, False),   # 1 LEFT
    (False, True, False),   # 2 RIGHT
    (False, False, True),   # 3 JUMP
    (True, False, True),    # 4 LEFT + JUMP
    (False, True, True),    # 5 RIGHT + JUMP
)


class TowerEnv(gym.Env):
    """
    Tower Jumper Gymnasium environment (vector observations).
    - One simulation tick per display frame (60 Hz).
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Reward: +1 per new platform scored, -1 when the player falls off.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(len(ACTIONS))
        low, high = observation_bounds()
        self.observation_space = gym.spaces.Box(low=low, high=high, shape=(OBS_SIZE,), dtype=np.float32)

        self.state: Optional[SimulationState] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        self.screen = None
        self.canvas: Optional[pygame.Surface] = None
        self.clock = None
        self.renderer: Optional[FrameRenderer] = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # Layout seed drawn from the env RNG so reset(seed=s) is reproducible.
        self.current_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.state = new_game(rng=random.Random(self.current_seed))
        self.timestep = 0

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0}
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.state is not None

        left, right, jump = ACTIONS[int(action)]
        inputs = InputSnapshot(left=left, right=right, jump=jump)
        reward = 0.0
        landed = False

        for _ in range(self.frame_skip):
            step(self.state, inputs)
            ev = self.state.events
            reward += float(ev.scored)
            landed = landed or ev.landed
            if self.state.game_over:
                reward = -1.0
                break

        self.timestep += 1
        terminated = self.state.game_over
        truncated = (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions)

        obs = self._get_obs()
        info = {
            "score": self.state.score,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "grounded": self.state.player.grounded,
            "landed": landed,
            "scroll_y": self.state.scroll_y,
        }

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), bool(terminated), bool(truncated), info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.state is not None
        return build_observation(self.state)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.state is None:
            return None

        if self.renderer is None:
            self.renderer = FrameRenderer()
        if self.render_mode == "human":
            if self.screen is None:
                pygame.init()
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Tower Jumper (Gym Env)")
                self.clock = pygame.time.Clock()
            pygame.event.pump()
            self.renderer.draw(self.screen, self.state)
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        if self.canvas is None:
            self.canvas = pygame.Surface((WIDTH, HEIGHT))
        self.renderer.draw(self.canvas, self.state)
        arr = pygame.surfarray.array3d(self.canvas)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
