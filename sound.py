# sound.py
# Effects and music are synthesised on startup; there are no asset files.
from __future__ import annotations

from typing import Dict, Optional

import numpy as np
import pygame

from engine.config import VOLUME_STEPS
from models import Outcome

SAMPLE_RATE = 22050

EFFECTS = ("boom", "food", "menu", "mystery", "obstacle", "start", "wall")

_OUTCOME_EFFECT = {
    Outcome.ATE_FOOD: "food",
    Outcome.ATE_MYSTERY: "mystery",
    Outcome.OUT_OF_FIELD: "wall",
    Outcome.OBSTACLE: "obstacle",
    Outcome.SELF_HIT: "boom",
}

# (frequency Hz, beats); 0 Hz is a rest
MELODY = [
    (330, 1), (392, 1), (440, 2), (392, 1), (330, 1), (294, 2),
    (262, 1), (294, 1), (330, 2), (0, 1), (392, 1), (330, 2),
]
BEAT_MS = 220


def effect_for(outcome: Outcome) -> Optional[str]:
    """Name of the effect the loop plays for a step outcome, None for a quiet tick."""
    return _OUTCOME_EFFECT.get(outcome)


class SoundPlayer:
    """Interface of the audio collaborator; every method may be a no-op."""

    def play(self, name: str):
        raise NotImplementedError

    def play_music(self):
        raise NotImplementedError

    def stop_music(self):
        raise NotImplementedError

    def set_volume(self, effects: int, music: int):
        raise NotImplementedError


class NoSound(SoundPlayer):
    def __init__(self, effects: int = 0, music: int = 0):
        self.effects_volume, self.music_volume = effects, music

    def play(self, name: str):
        if name not in EFFECTS:
            raise KeyError(name)

    def play_music(self): pass
    def stop_music(self): pass

    def set_volume(self, effects: int, music: int):
        self.effects_volume, self.music_volume = effects, music


# ── synthesis ─────────────────────────────────────────
def _envelope(n: int) -> np.ndarray:
    env = np.ones(n)
    attack, release = max(1, n // 50), max(1, n // 8)
    env[:attack] = np.linspace(0.0, 1.0, attack)
    env[-release:] = np.linspace(1.0, 0.0, release)
    return env


def _wave(freq, ms: int, shape: str = "sine") -> np.ndarray:
    """Float samples in [-1, 1]; `freq` may be a (start, end) sweep."""
    n = max(1, int(SAMPLE_RATE * ms / 1000))
    if isinstance(freq, tuple):
        f = np.linspace(freq[0], freq[1], n)
    else:
        f = np.full(n, float(freq))
    phase = np.cumsum(f) / SAMPLE_RATE
    if shape == "square":
        s = np.where(phase % 1.0 < 0.5, 1.0, -1.0)
    elif shape == "tri":
        s = 4.0 * np.abs(phase % 1.0 - 0.5) - 1.0
    elif shape == "noise":
        s = np.random.default_rng(7).uniform(-1.0, 1.0, n) * np.linspace(1.0, 0.0, n) ** 2
    else:
        s = np.sin(2 * np.pi * phase)
    return s * _envelope(n)


def _effect_samples() -> Dict[str, np.ndarray]:
    return {
        "boom": _wave(0, 450, "noise"),
        "food": _wave((520, 880), 90, "square") * 0.5,
        "menu": _wave(660, 35, "square") * 0.4,
        "mystery": np.concatenate([_wave(f, 60, "tri") for f in (440, 660, 550, 880)]),
        "obstacle": _wave((240, 90), 300, "tri"),
        "start": np.concatenate([_wave(f, 110, "square") * 0.5 for f in (262, 330, 392, 523)]),
        "wall": _wave(110, 320, "square") * 0.6,
    }


def _music_samples() -> np.ndarray:
    notes = [
        _wave(f, BEAT_MS * beats) * 0.3 if f else np.zeros(int(SAMPLE_RATE * BEAT_MS * beats / 1000))
        for f, beats in MELODY
    ]
    return np.concatenate(notes)


def _to_sound(samples: np.ndarray, channels: int) -> pygame.mixer.Sound:
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    if channels > 1:
        pcm = np.repeat(pcm[:, None], channels, axis=1)
    return pygame.sndarray.make_sound(np.ascontiguousarray(pcm))


class PygameSounds(SoundPlayer):
    """Plays through pygame.mixer, which must already be initialised."""

    def __init__(self, effects: int, music: int):
        _, _, channels = pygame.mixer.get_init()
        self.chunks = {name: _to_sound(s, channels) for name, s in _effect_samples().items()}
        self.music = _to_sound(_music_samples(), channels)
        self.music_channel: Optional[pygame.mixer.Channel] = None
        self.set_volume(effects, music)

    def play(self, name: str):
        self.chunks[name].play()

    def play_music(self):
        if self.music_channel is None or not self.music_channel.get_busy():
            self.music_channel = self.music.play(loops=-1)

    def stop_music(self):
        self.music.stop()
        self.music_channel = None

    def set_volume(self, effects: int, music: int):
        self.effects_volume, self.music_volume = effects, music
        for chunk in self.chunks.values():
            chunk.set_volume(effects / VOLUME_STEPS)
        self.music.set_volume(music / VOLUME_STEPS)


def create_player(effects: int, music: int, enabled: bool = True) -> SoundPlayer:
    """Real player if the mixer comes up, silent one otherwise."""
    if not enabled:
        return NoSound(effects, music)
    try:
        pygame.mixer.pre_init(SAMPLE_RATE, -16, 1, 512)
        pygame.mixer.init()
        pygame.mixer.set_num_channels(8)
    except pygame.error as e:
        print(f"[SND] Audio unavailable ({e}); continuing without sound.")
        return NoSound(effects, music)
    return PygameSounds(effects, music)
