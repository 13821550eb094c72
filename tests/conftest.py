"""
Shared fixtures for the snake game tests.

Randomness is substituted with ScriptedRandom: `random()` returns the
scripted values first and then a fixed default, while integer draws
(coordinates, sprite variants) still come from the seeded generator.
"""

import os
import random

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from engine.world import World  # noqa: E402


class ScriptedRandom(random.Random):
    values = ()
    default = 0.99

    def random(self):
        if self.values:
            return self.values.pop(0)
        return self.default

    # keeps randint/randrange on the bit generator instead of random()
    def getrandbits(self, k):
        return super().getrandbits(k)


def scripted(*values, default=0.99, seed=0):
    rng = ScriptedRandom(seed)
    rng.values = list(values)
    rng.default = default
    return rng


@pytest.fixture
def quiet_rng():
    """No obstacles, no mystery items, no fat or lean food."""
    return scripted()


@pytest.fixture
def world(quiet_rng):
    """Fresh level-1 world with the item list emptied."""
    w = World(rng=quiet_rng)
    w.things.clear()
    return w
