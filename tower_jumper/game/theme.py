# tower_jumper/game/theme.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Tuple
from .config import THEME_KEY
from .storage import SafeStore

log = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"
    NEON = "neon"


DEFAULT_THEME = Theme.DARK


@dataclass(frozen=True)
class ThemeVisuals:
    background: RGBA
    score_color: RGBA
    platform_shadow: RGBA


THEME_VISUALS: Dict[Theme, ThemeVisuals] = {
    Theme.DARK: ThemeVisuals((14, 18, 32, 255), (245, 248, 255, 255), (0, 0, 0, 61)),
    Theme.LIGHT: ThemeVisuals((236, 240, 247, 255), (28, 34, 52, 255), (40, 50, 80, 46)),
    Theme.NEON: ThemeVisuals((10, 2, 24, 255), (0, 255, 204, 255), (255, 0, 200, 90)),
}


def parse_theme(value) -> Theme:
    try:
        return Theme(value)
    except ValueError:
        return DEFAULT_THEME


ThemeObserver = Callable[[Theme], None]


class ThemeState:
    """
    The single active theme. Observers are called synchronously, in
    subscription order, from inside `apply` and only when the theme changes.
    """
    def __init__(self, store: SafeStore):
        self.store = store
        self._observers: List[ThemeObserver] = []
        self.current: Theme = parse_theme(store.read(THEME_KEY, DEFAULT_THEME.value))

    @property
    def visuals(self) -> ThemeVisuals:
        return THEME_VISUALS[self.current]

    def subscribe(self, observer: ThemeObserver) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)
        return unsubscribe

    def apply(self, theme, persist: bool = False) -> Theme:
        target = parse_theme(theme)
        changed = target != self.current
        self.current = target
        if persist:
            self.store.set(THEME_KEY, target.value)
        if changed:
            log.debug("theme -> %s", target.value)
            for observer in list(self._observers):
                observer(target)
        return target

    def cycle(self, persist: bool = True) -> Theme:
        order = list(Theme)
        return self.apply(order[(order.index(self.current) + 1) % len(order)], persist=persist)


class PausableGame(Protocol):
    def is_paused(self) -> bool: ...
    def toggle_pause(self) -> None: ...


class SettingsPanel:
    """
    Modal settings panel. Opening pauses a running game; closing resumes it
    only when this panel caused the pause and the game is still paused.
    """
    def __init__(self, game: Optional[PausableGame] = None):
        self.game = game
        self.is_open = False
        self.paused_by_panel = False

    def open(self):
        if self.is_open:
            return
        self.is_open = True
        if self.game is not None:
            if not self.game.is_paused():
                self.game.toggle_pause()
                self.paused_by_panel = True
            else:
                self.paused_by_panel = False

    def close(self):
        if not self.is_open:
            return
        self.is_open = False
        if self.paused_by_panel and self.game is not None and self.game.is_paused():
            self.game.toggle_pause()
        self.paused_by_panel = False

    def toggle(self):
        if self.is_open:
            self.close()
        else:
            self.open()
