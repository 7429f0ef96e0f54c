# /experiments/sanity_rollout.py
"""
Sanity rollouts for TowerEnv:
- Runs RANDOM and/or CLIMB-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis
- Optionally saves per-episode action (and observation) traces

Usage examples (from repo root):
  # Both policies over 20 default seeds, frame_skip=4, save traces:
  python -m experiments.sanity_rollout --policies both --save-traces

  # Heuristic only, custom seeds, also save observations:
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333 --save-traces --save-obs

  # Quick random-only smoke:
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Tuple

import numpy as np

from tower_jumper.env.tower_env import ACTIONS, TowerEnv
from tower_jumper.game.config import FPS

NOOP, LEFT, RIGHT, JUMP, LEFT_JUMP, RIGHT_JUMP = range(len(ACTIONS))


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.randint(0, len(ACTIONS)))
    return act


def climb_heuristic_policy_init(dead_zone: float = 0.03):
    """
    Steer toward the nearest platform above:
      - grounded: jump, drifting toward its center
      - airborne: keep drifting toward it, stop when roughly under it
    """
    def act(obs: np.ndarray) -> int:
        grounded = obs[4] > 0.5
        dx, width = obs[7], obs[9]      # nearest platform above
        if width <= 0.0:                # nothing above
            return JUMP if grounded else NOOP
        if dx > dead_zone:
            return RIGHT_JUMP if grounded else RIGHT
        if dx < -dead_zone:
            return LEFT_JUMP if grounded else LEFT
        return JUMP if grounded else NOOP
    return act


# ------------------------ Rollout core ------------------------

CSV_HEADER = [
    "env_name", "policy_name", "seed",
    "frame_skip", "sim_fps", "decision_hz",
    "episode_len_decisions", "return_sum", "score", "scroll_px",
    "terminated", "truncated", "grounded_ratio",
]


@dataclass
class EpisodeResult:
    policy_name: str
    seed: int
    frame_skip: int
    length: int = 0
    return_sum: float = 0.0
    score: int = 0
    scroll_px: float = 0.0
    terminated: bool = False
    truncated: bool = False
    grounded_steps: int = 0
    actions: List[int] = field(default_factory=list)
    observations: List[np.ndarray] = field(default_factory=list)

    @property
    def grounded_ratio(self) -> float:
        return self.grounded_steps / max(1, self.length)

    def csv_row(self) -> list:
        decision_hz = FPS / max(1, self.frame_skip)
        return [
            "TowerEnv", self.policy_name, self.seed,
            self.frame_skip, FPS, decision_hz,
            self.length, f"{self.return_sum:.1f}", self.score, f"{self.scroll_px:.1f}",
            int(self.terminated), int(self.truncated), f"{self.grounded_ratio:.3f}",
        ]


def make_policy(policy_name: str, seed: int) -> Tuple[Callable[[np.ndarray], int], int]:
    """Returns (policy, action_rng_seed); the heuristic has no RNG and reports -1."""
    if policy_name == "random":
        return random_policy_init(10_000 + seed), 10_000 + seed
    if policy_name == "heuristic":
        return climb_heuristic_policy_init(), -1
    raise ValueError(f"Unknown policy {policy_name!r}")


def append_csv(csv_path: Path, row: list):
    new_file = not csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if new_file:
            w.writerow(CSV_HEADER)
        w.writerow(row)


def run_one_episode(policy_name: str, seed: int, frame_skip: int, steps_limit: int,
                    keep_obs: bool = False) -> EpisodeResult:
    env = TowerEnv(frame_skip=frame_skip)
    policy, _ = make_policy(policy_name, seed)
    result = EpisodeResult(policy_name, seed, frame_skip)
    info = {}
    try:
        obs, info = env.reset(seed=seed)
        if keep_obs:
            result.observations.append(obs.copy())
        while result.length < steps_limit:
            a = int(policy(obs))
            obs, r, term, trunc, info = env.step(a)
            result.actions.append(a)
            result.return_sum += float(r)
            result.length += 1
            result.grounded_steps += int(bool(info.get("grounded", False)))
            if keep_obs:
                result.observations.append(obs.copy())
            if term or trunc:
                result.terminated, result.truncated = bool(term), bool(trunc)
                break
    finally:
        env.close()

    result.score = int(info.get("score", 0))
    result.scroll_px = float(info.get("scroll_y", 0.0))
    return result


def save_trace(result: EpisodeResult, out_dir: Path, steps_limit: int):
    """<out>/traces/<policy>/<seed>_{actions.npy,obs.npy,meta.txt}"""
    trace_dir = out_dir / "traces" / result.policy_name
    trace_dir.mkdir(parents=True, exist_ok=True)
    stem = trace_dir / str(result.seed)
    np.save(f"{stem}_actions.npy", np.asarray(result.actions, dtype=np.int8))
    if result.observations:
        np.save(f"{stem}_obs.npy", np.asarray(result.observations, dtype=np.float32))
    _, action_seed = make_policy(result.policy_name, result.seed)
    meta = {
        "seed": result.seed,
        "frame_skip": result.frame_skip,
        "policy": result.policy_name,
        "action_rng_seed": action_seed,
        "steps_limit": steps_limit,
    }
    Path(f"{stem}_meta.txt").write_text("\n".join(f"{k}={v}" for k, v in meta.items()), encoding="utf-8")


def parse_seeds(text: str) -> List[int]:
    seeds = [int(s) for s in text.split(",") if s.strip()]
    return seeds or list(range(101, 121))


def main(argv=None):
    ap = argparse.ArgumentParser(description="Sanity rollouts for TowerEnv")
    ap.add_argument("--policies", default="both", choices=["random", "heuristic", "both"])
    ap.add_argument("--seeds", default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim ticks per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", default="experiments/runs",
                    help="Directory to store episodes.csv and traces/")
    ap.add_argument("--save-traces", action="store_true")
    ap.add_argument("--save-obs", action="store_true",
                    help="Also save observations per step (larger files)")
    args = ap.parse_args(argv)

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    seeds = parse_seeds(args.seeds)
    episodes_csv = out_dir / "episodes.csv"
    policies = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={policies} on {len(seeds)} seeds "
          f"(frame_skip={args.frame_skip}, decision_hz≈{FPS / max(1, args.frame_skip):.1f})")
    print(f"Writing summaries to {episodes_csv}")

    for policy_name in policies:
        for seed in seeds:
            res = run_one_episode(policy_name, seed, args.frame_skip, args.steps,
                                  keep_obs=args.save_traces and args.save_obs)
            append_csv(episodes_csv, res.csv_row())
            if args.save_traces:
                save_trace(res, out_dir, args.steps)
            print(f"[{policy_name}] seed={seed}  len={res.length}  score={res.score}  "
                  f"ret={res.return_sum:.1f}  term={res.terminated} trunc={res.truncated}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
