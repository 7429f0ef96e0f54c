# tower_jumper/game/audio.py
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Protocol, Tuple
import pygame
from .config import (
    MUSIC_VOLUME_KEY, MUSIC_MUTED_KEY, SFX_VOLUME_KEY, SFX_MUTED_KEY,
    DEFAULT_MUSIC_VOLUME, DEFAULT_SFX_VOLUME, CLICK_VOLUME, LAND_VOLUME,
    MUSIC_FILE, CLICK_FILE, LAND_FILE,
)
from .storage import SafeStore, clamp

log = logging.getLogger(__name__)

AUTOPLAY_BLOCKED_MSG = "Autoplay blocked. Click or press any key to enable audio."


class AudioHandle(Protocol):
    @property
    def playing(self) -> bool: ...
    def play(self) -> None: ...
    def pause(self) -> None: ...
    def rewind(self) -> None: ...
    def set_volume(self, volume: float) -> None: ...


class MixerSound:
    """Short effect; rewinding stops the previous play so it restarts from 0."""
    def __init__(self, sound: "pygame.mixer.Sound"):
        self.sound = sound
        self._channel: Optional["pygame.mixer.Channel"] = None

    @property
    def playing(self) -> bool:
        return self._channel is not None and self._channel.get_busy()

    def play(self):
        self._channel = self.sound.play()

    def pause(self):
        self.sound.stop()

    def rewind(self):
        self.sound.stop()

    def set_volume(self, volume: float):
        self.sound.set_volume(volume)


class MixerMusic:
    """Looping background track on pygame.mixer.music."""
    def __init__(self, path: Path):
        self.path = path
        self._started = False
        self._paused = True

    @property
    def playing(self) -> bool:
        return not self._paused

    def play(self):
        if not self._started:
            pygame.mixer.music.load(str(self.path))
            pygame.mixer.music.play(loops=-1)
            self._started = True
        else:
            pygame.mixer.music.unpause()
        self._paused = False

    def pause(self):
        if self._started:
            pygame.mixer.music.pause()
        self._paused = True

    def rewind(self):
        if self._started:
            pygame.mixer.music.rewind()

    def set_volume(self, volume: float):
        pygame.mixer.music.set_volume(volume)


class AudioController:
    """
    Background music plus click/land effects. Every handle is optional and
    every playback failure is swallowed; a refused music start waits for the
    next user gesture (`on_user_gesture`) to retry.
    """
    def __init__(self, store: SafeStore,
                 music: Optional[AudioHandle] = None,
                 click: Optional[AudioHandle] = None,
                 land: Optional[AudioHandle] = None):
        self.store = store
        self.music = music
        self.click = click
        self.land = land
        self.message = ""
        self.needs_gesture = False

        self.music_volume = store.read_clamped_float(MUSIC_VOLUME_KEY, DEFAULT_MUSIC_VOLUME, 0.0, 1.0)
        self.music_muted = store.read_flag(MUSIC_MUTED_KEY)
        self.sfx_volume = store.read_clamped_float(SFX_VOLUME_KEY, DEFAULT_SFX_VOLUME, 0.0, 1.0)
        self.sfx_muted = store.read_flag(SFX_MUTED_KEY)
        self._apply_music_volume()

    def _apply_music_volume(self):
        if self.music is None:
            return
        try:
            self.music.set_volume(0.0 if self.music_muted else self.music_volume)
        except Exception as e:
            log.debug("music volume failed: %s", e)

    # --- music ---
    def set_music_volume(self, volume: float) -> float:
        self.music_volume = clamp(float(volume), 0.0, 1.0)
        self.store.set(MUSIC_VOLUME_KEY, self.music_volume)
        self._apply_music_volume()
        return self.music_volume

    def toggle_music_mute(self, game_running: bool = False) -> bool:
        self.play_click()
        self.music_muted = not self.music_muted
        self.store.write_flag(MUSIC_MUTED_KEY, self.music_muted)
        self._apply_music_volume()
        if self.music_muted:
            self.pause_music()
        elif game_running:
            self.play_music_if_allowed()
        return self.music_muted

    def play_music_if_allowed(self):
        if self.music is None or self.music_muted or self.music_volume <= 0:
            return
        try:
            self.music.play()
        except Exception as e:
            log.debug("music playback refused: %s", e)
            self.needs_gesture = True
            self.message = AUTOPLAY_BLOCKED_MSG

    def pause_music(self):
        if self.music is None or not self.music.playing:
            return
        try:
            self.music.pause()
        except Exception as e:
            log.debug("music pause failed: %s", e)

    def on_user_gesture(self):
        if not self.needs_gesture:
            return
        self.needs_gesture = False
        self.message = ""
        self.play_music_if_allowed()

    # --- effects ---
    def set_sfx_volume(self, volume: float) -> float:
        self.sfx_volume = clamp(float(volume), 0.0, 1.0)
        self.store.set(SFX_VOLUME_KEY, self.sfx_volume)
        if not self.sfx_muted:
            self.play_click()
        return self.sfx_volume

    def toggle_sfx_mute(self) -> bool:
        self.sfx_muted = not self.sfx_muted
        self.store.write_flag(SFX_MUTED_KEY, self.sfx_muted)
        if not self.sfx_muted:
            self.play_click()
        return self.sfx_muted

    def _play_effect(self, handle: Optional[AudioHandle], base_volume: float):
        if handle is None or self.sfx_muted:
            return
        try:
            handle.set_volume(base_volume * self.sfx_volume)
            handle.rewind()
            handle.play()
        except Exception as e:
            log.debug("effect playback failed: %s", e)

    def play_click(self):
        self._play_effect(self.click, CLICK_VOLUME)

    def play_land(self):
        self._play_effect(self.land, LAND_VOLUME)


def load_handles(assets_dir: Path) -> Tuple[Optional[AudioHandle], Optional[AudioHandle],
                                             Optional[AudioHandle], str]:
    """Open the mixer and the three audio files. Anything missing comes back as None."""
    try:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
    except pygame.error as e:
        log.info("audio disabled: %s", e)
        return None, None, None, ""

    message = ""
    music_path = assets_dir / MUSIC_FILE
    music: Optional[AudioHandle] = MixerMusic(music_path) if music_path.exists() else None
    if music is None:
        message = f"Music file not found. Confirm {music_path} exists."

    def sound(name: str) -> Optional[AudioHandle]:
        path = assets_dir / name
        if not path.exists():
            return None
        try:
            return MixerSound(pygame.mixer.Sound(str(path)))
        except pygame.error as e:
            log.debug("could not load %s: %s", path, e)
            return None

    return music, sound(CLICK_FILE), sound(LAND_FILE), message
