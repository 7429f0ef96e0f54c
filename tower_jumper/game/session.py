# tower_jumper/game/session.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional
from .audio import AudioController
from .clock import FrameClock
from .customization import CustomizationStore
from .pixel_art import Cell
from .scores import HighScoreLedger, ScoreEntry
from .simulation import InputState, SimulationState, new_game, step
from .theme import DEFAULT_THEME, THEME_VISUALS, Theme, ThemeState, ThemeVisuals

log = logging.getLogger(__name__)


@dataclass
class Overlay:
    kind: str           # "start" | "paused" | "game_over"
    score: int = 0

    @property
    def title(self) -> str:
        return {"start": "Tower Jumper", "paused": "Paused", "game_over": "Game Over"}[self.kind]

    @property
    def button(self) -> str:
        return {"start": "Start", "paused": "Resume", "game_over": "Restart"}[self.kind]


class GameSession:
    """
    Glue between the shell and the simulation: the start/resume/toggle-pause
    entry points, the frame loop on a FrameClock, input flags, and the
    collaborators that react to tick events (ledger, audio, renderer).
    """
    def __init__(self,
                 clock: FrameClock,
                 customization: CustomizationStore,
                 ledger: HighScoreLedger,
                 theme: Optional[ThemeState] = None,
                 audio: Optional[AudioController] = None,
                 render: Optional[Callable[[SimulationState], None]] = None,
                 seed: Optional[int] = None):
        self.clock = clock
        self.customization = customization
        self.ledger = ledger
        self.theme = theme
        self.audio = audio
        self.render = render
        self.rng = random.Random(seed)

        self.inputs = InputState()
        self.state: Optional[SimulationState] = None
        self.paused = True
        self.loop_active = False        # a game is running or paused (not over)
        self._frame: Optional[int] = None
        self.overlay: Optional[Overlay] = Overlay("start")
        self.last_scores: List[ScoreEntry] = ledger.entries()
        self.visuals: ThemeVisuals = theme.visuals if theme is not None else THEME_VISUALS[DEFAULT_THEME]

        if theme is not None:
            theme.subscribe(self._on_theme_change)

    # --- collaborators ---
    def _on_theme_change(self, theme: Theme):
        self.visuals = THEME_VISUALS[theme]

    def _click(self):
        if self.audio is not None:
            self.audio.play_click()

    def _music(self):
        if self.audio is not None:
            self.audio.play_music_if_allowed()

    def _request_frame(self):
        if self._frame is None:
            self._frame = self.clock.request(self.tick)

    def _cancel_frame(self):
        if self._frame is not None:
            self.clock.cancel(self._frame)
            self._frame = None

    # --- shell entry points ---
    def is_paused(self) -> bool:
        return self.paused

    def start_game(self):
        self._click()
        self.overlay = None
        c = self.customization
        self.state = new_game(rng=self.rng, mode=c.render_mode(), color=c.color(),
                              pixels=c.load_pixel_art())
        self.inputs.tap = False
        self.paused = False
        self.loop_active = True
        self._music()
        self._cancel_frame()
        self._request_frame()
        log.info("game started")

    def toggle_pause(self):
        if not self.loop_active:
            return
        self.paused = not self.paused
        self._click()
        if self.paused:
            self._cancel_frame()
            self.overlay = Overlay("paused", self.state.score if self.state else 0)
        else:
            self.overlay = None
            self._music()
            self._request_frame()

    def resume_game(self):
        if not self.loop_active:
            return
        self._click()
        self.overlay = None
        self.paused = False
        self._music()
        self._request_frame()

    def activate_overlay(self):
        """The overlay's single button (Space or click while it is shown)."""
        if self.overlay is None:
            return
        if self.overlay.kind == "paused":
            self.resume_game()
        else:
            self.start_game()

    # --- input handlers: flags only ---
    def key_down(self, code: str):
        if self.audio is not None:
            self.audio.on_user_gesture()
        if code == "Space" and self.overlay is not None:
            self.activate_overlay()
            return
        self.inputs.key_down(code)
        if code == "Escape":
            self.toggle_pause()

    def key_up(self, code: str):
        self.inputs.key_up(code)

    def pointer_down(self):
        if self.audio is not None:
            self.audio.on_user_gesture()
        if not self.paused:
            self.inputs.pointer_tap()

    # --- avatar hooks (editor / picker) ---
    def set_player_pixels(self, cells: List[Cell]):
        if self.state is not None:
            self.state.player.mode = "pixel"
            self.state.player.pixels = list(cells)

    def set_player_color(self, color: str):
        if self.state is not None:
            self.state.player.mode = "color"
            self.state.player.color = color

    # --- frame callback ---
    def tick(self):
        self._frame = None
        if self.paused or self.state is None:
            return

        state = step(self.state, self.inputs.snapshot())
        events = state.events

        if events.landed and self.audio is not None:
            self.audio.play_land()

        if events.game_over:
            self._game_over()
            return

        if self.render is not None:
            self.render(state)
        self._request_frame()

    def _game_over(self):
        score = self.state.score
        self.last_scores = self.ledger.record(score)
        self.overlay = Overlay("game_over", score)
        self._cancel_frame()
        self.loop_active = False
        log.info("game over at score %d", score)
