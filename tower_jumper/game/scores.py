# tower_jumper/game/scores.py
from __future__ import annotations
import time
from dataclasses import dataclass, asdict
from typing import List, Optional
from .config import HS_KEY, NAME_KEY, HIGH_SCORE_LIMIT, DEFAULT_PLAYER_NAME
from .storage import SafeStore, to_int


@dataclass
class ScoreEntry:
    name: str
    score: int
    t: int      # epoch milliseconds

    @classmethod
    def from_json(cls, raw) -> Optional["ScoreEntry"]:
        if not isinstance(raw, dict) or "score" not in raw:
            return None
        return cls(
            name=str(raw.get("name") or DEFAULT_PLAYER_NAME),
            score=to_int(raw.get("score"), 0),
            t=to_int(raw.get("t"), 0),
        )


class HighScoreLedger:
    """Persisted top-N list, highest first."""

    def __init__(self, store: SafeStore, limit: int = HIGH_SCORE_LIMIT, clock=time.time):
        self.store = store
        self.limit = limit
        self.clock = clock

    def entries(self) -> List[ScoreEntry]:
        raw = self.store.read_json(HS_KEY, [])
        if not isinstance(raw, list):
            return []
        parsed = (ScoreEntry.from_json(item) for item in raw)
        return [e for e in parsed if e is not None]

    def player_name(self) -> str:
        return self.store.read(NAME_KEY, "")

    def set_player_name(self, name: str):
        self.store.set(NAME_KEY, (name or "").strip())

    def record(self, score: int) -> List[ScoreEntry]:
        entries = self.entries()
        entries.append(ScoreEntry(
            name=self.player_name() or DEFAULT_PLAYER_NAME,
            score=int(score),
            t=int(self.clock() * 1000),
        ))
        # sort is stable: on ties, earlier entries stay ahead
        entries.sort(key=lambda e: e.score, reverse=True)
        trimmed = entries[: self.limit]
        self.store.write_json(HS_KEY, [asdict(e) for e in trimmed])
        return trimmed
