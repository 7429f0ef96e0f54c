# tower_jumper/tests/test_theme.py
"""
Theme state and the settings panel's pause coupling.

Usage (from repo root):
  python -m pytest tower_jumper/tests/test_theme.py
  python -m tower_jumper.tests.test_theme
"""
from __future__ import annotations

from tower_jumper.game.config import THEME_KEY
from tower_jumper.game.storage import MemoryBackend, SafeStore
from tower_jumper.game.theme import (
    THEME_VISUALS, SettingsPanel, Theme, ThemeState, parse_theme,
)


class FakeGame:
    def __init__(self, paused=False):
        self.paused = paused
        self.toggles = 0

    def is_paused(self):
        return self.paused

    def toggle_pause(self):
        self.paused = not self.paused
        self.toggles += 1


def make_theme(data=None):
    backend = MemoryBackend(data)
    return ThemeState(SafeStore(backend)), backend


def test_stored_theme_and_unknown_values():
    theme, _ = make_theme({THEME_KEY: "neon"})
    assert theme.current is Theme.NEON
    theme, _ = make_theme({THEME_KEY: "sepia"})
    assert theme.current is Theme.DARK
    assert parse_theme(None) is Theme.DARK
    assert parse_theme("light") is Theme.LIGHT


def test_observers_run_synchronously_only_on_change():
    theme, _ = make_theme()
    seen = []
    theme.subscribe(lambda t: seen.append(("a", t, theme.visuals)))
    theme.subscribe(lambda t: seen.append(("b", t, theme.visuals)))

    theme.apply("light")
    assert seen == [
        ("a", Theme.LIGHT, THEME_VISUALS[Theme.LIGHT]),
        ("b", Theme.LIGHT, THEME_VISUALS[Theme.LIGHT]),
    ]
    theme.apply(Theme.LIGHT)
    assert len(seen) == 2


def test_unsubscribe():
    theme, _ = make_theme()
    seen = []
    stop = theme.subscribe(seen.append)
    stop()
    stop()
    theme.apply("neon")
    assert seen == []


def test_persist_flag():
    theme, backend = make_theme()
    theme.apply("neon")
    assert THEME_KEY not in backend.data
    theme.apply("light", persist=True)
    assert backend.data[THEME_KEY] == "light"
    assert theme.cycle() is Theme.NEON
    assert backend.data[THEME_KEY] == "neon"
    assert theme.cycle() is Theme.DARK


def test_panel_pauses_running_game_and_resumes_on_close():
    game = FakeGame(paused=False)
    panel = SettingsPanel(game)
    panel.open()
    assert game.paused and panel.paused_by_panel
    panel.open()
    assert game.toggles == 1
    panel.close()
    assert not game.paused and not panel.paused_by_panel
    assert game.toggles == 2


def test_panel_leaves_already_paused_game_paused():
    game = FakeGame(paused=True)
    panel = SettingsPanel(game)
    panel.toggle()
    assert panel.is_open and not panel.paused_by_panel
    panel.toggle()
    assert game.paused and game.toggles == 0


def test_panel_does_not_toggle_after_external_resume():
    game = FakeGame(paused=False)
    panel = SettingsPanel(game)
    panel.open()
    game.toggle_pause()                 # resumed elsewhere while open
    panel.close()
    assert not game.paused
    assert game.toggles == 2


def test_panel_without_game():
    panel = SettingsPanel()
    panel.open()
    panel.close()
    assert not panel.is_open


def main():
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
    print("✓ theme tests passed")


if __name__ == "__main__":
    main()
