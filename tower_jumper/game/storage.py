# tower_jumper/game/storage.py
"""
String key/value persistence with fallible backends.

Backends may raise on any call (missing directory, corrupt file, full disk).
`SafeStore` is the only thing the rest of the game talks to: reads fall back
to the given default, writes that fail are dropped.
"""
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .config import SAVE_ENV_VAR, DEFAULT_SAVE_FILE

log = logging.getLogger(__name__)


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def to_int(value: Any, fallback: int = 0) -> int:
    """parseInt-like: leading integer of a string, else fallback."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value else fallback
    if value is None:
        return fallback
    text = str(value).strip()
    digits = ""
    for i, ch in enumerate(text):
        if ch.isdigit() or (i == 0 and ch in "+-"):
            digits += ch
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return fallback


def to_float(value: Any, fallback: float = 0.0) -> float:
    if value is None:
        return fallback
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback
    return fallback if parsed != parsed else parsed


class StorageBackend(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...


class MemoryBackend:
    """In-process backend (tests, headless env)."""
    def __init__(self, data: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(data or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileBackend:
    """
    All keys in one JSON object on disk.
    The file is read lazily on first access and rewritten on every set.
    An unreadable file reads as empty and is replaced by the next set.
    """
    def __init__(self, path: os.PathLike | str):
        self.path = Path(path).expanduser()
        self._cache: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._cache is None:
            self._cache = {}
            if self.path.exists():
                try:
                    with self.path.open("r", encoding="utf-8") as f:
                        data = json.load(f)
                except (OSError, ValueError) as e:
                    log.warning("save file %s unreadable, starting fresh: %s", self.path, e)
                    return self._cache
                if isinstance(data, dict):
                    self._cache = {str(k): str(v) for k, v in data.items()}
                else:
                    log.warning("save file %s is not a JSON object, starting fresh", self.path)
        return self._cache

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write beside the target and swap, so a crash never leaves half a file.
        tmp = self.path.with_name(self.path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self.path)


def default_save_path() -> Path:
    return Path(os.environ.get(SAVE_ENV_VAR) or DEFAULT_SAVE_FILE).expanduser()


def _stringify(value: Any) -> str:
    # String(true) in the save file format is "true"; keep floats/ints plain.
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SafeStore:
    """Exception-safe typed access on top of a backend."""

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    def get(self, key: str) -> Optional[str]:
        try:
            return self.backend.get_item(key)
        except Exception as e:
            log.debug("storage read failed for %s: %s", key, e)
            return None

    def set(self, key: str, value: Any) -> None:
        try:
            self.backend.set_item(key, _stringify(value))
        except Exception as e:
            log.debug("storage write failed for %s: %s", key, e)

    def read(self, key: str, fallback: Any) -> Any:
        value = self.get(key)
        return fallback if value is None else value

    def read_json(self, key: str, fallback: Any) -> Any:
        raw = self.get(key)
        if not raw:
            return fallback
        try:
            return json.loads(raw)
        except ValueError:
            return fallback

    def write_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value, separators=(",", ":")))

    def read_clamped_int(self, key: str, fallback: int, lo: int, hi: int) -> int:
        return int(clamp(to_int(self.get(key), fallback), lo, hi))

    def write_clamped_int(self, key: str, value: int, lo: int, hi: int) -> int:
        clamped = int(clamp(value, lo, hi))
        self.set(key, clamped)
        return clamped

    def read_clamped_float(self, key: str, fallback: float, lo: float, hi: float) -> float:
        return clamp(to_float(self.get(key), fallback), lo, hi)

    def read_flag(self, key: str, default: bool = False) -> bool:
        return self.read(key, "1" if default else "0") == "1"

    def write_flag(self, key: str, value: bool) -> None:
        self.set(key, "1" if value else "0")


def open_store(path: os.PathLike | str | None = None) -> SafeStore:
    return SafeStore(JsonFileBackend(path if path is not None else default_save_path()))
