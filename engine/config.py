# config.py
"""
Configuration for the snake game.

Defaults come from environment variables so you can override them without
changing code; the options dialog stores the player's choices in a small
JSON file. Relevant env vars:

- SNAKE_SETTINGS_PATH
- SNAKE_LEVEL, SNAKE_SPEED_INDEX
- SNAKE_EFFECTS_VOLUME, SNAKE_MUSIC_VOLUME (0..10)
"""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Union

from constants import FRAME_DELTAS_MS, LAST_LEVEL

VOLUME_STEPS = 10


def _i(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _s(name: str, default: str) -> str:
    return os.getenv(name, default)


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


# --------- Storage ---------
SETTINGS_PATH = _s("SNAKE_SETTINGS_PATH", "storage/settings.json")

# --------- Defaults ---------
DEFAULT_LEVEL          = _i("SNAKE_LEVEL", 1)
DEFAULT_SPEED_INDEX    = _i("SNAKE_SPEED_INDEX", 1)        # 0 slow, 1 normal, 2 fast
DEFAULT_EFFECTS_VOLUME = _i("SNAKE_EFFECTS_VOLUME", 8)
DEFAULT_MUSIC_VOLUME   = _i("SNAKE_MUSIC_VOLUME", 5)


@dataclass
class Settings:
    chosen_level: int = DEFAULT_LEVEL
    last_level: int = LAST_LEVEL
    speed_index: int = DEFAULT_SPEED_INDEX
    effects_volume: int = DEFAULT_EFFECTS_VOLUME
    music_volume: int = DEFAULT_MUSIC_VOLUME

    def clamped(self) -> "Settings":
        last = _clamp(self.last_level, 1, LAST_LEVEL)
        return Settings(
            chosen_level=_clamp(self.chosen_level, 1, last),
            last_level=last,
            speed_index=_clamp(self.speed_index, 0, len(FRAME_DELTAS_MS) - 1),
            effects_volume=_clamp(self.effects_volume, 0, VOLUME_STEPS),
            music_volume=_clamp(self.music_volume, 0, VOLUME_STEPS),
        )


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Stored settings, or defaults when the file is missing or unreadable."""
    p = Path(path or SETTINGS_PATH)
    if not p.exists():
        return Settings().clamped()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("settings file must hold a JSON object")
        known = {f.name for f in fields(Settings)}
        return Settings(**{k: int(v) for k, v in raw.items() if k in known}).clamped()
    except (OSError, ValueError, TypeError) as e:
        print(f"[CFG] Could not read {p} ({e}); using defaults.")
        return Settings().clamped()


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> Path:
    p = Path(path or SETTINGS_PATH)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(asdict(settings.clamped()), indent=2), encoding="utf-8")
    return p


def frame_delta_ms(settings: Settings) -> int:
    return FRAME_DELTAS_MS[settings.clamped().speed_index]
