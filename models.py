# models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

Coords = Tuple[int, int]


class Direction(Enum):
    UP = (0, -1)
    RIGHT = (1, 0)
    DOWN = (0, 1)
    LEFT = (-1, 0)

    @property
    def delta(self) -> Coords:
        return self.value

    def right(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 1) % 4]

    def left(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) - 1) % 4]


_CLOCKWISE = (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)


class Kind(Enum):
    FOOD = "food"
    FAT = "fat"
    LEAN = "lean"
    MYSTERY = "mystery"
    OBSTACLE = "obstacle"
    WALL = "wall"


# number of sprite variants per kind
SPRITE_COUNTS = {
    Kind.FOOD: 3,
    Kind.FAT: 3,
    Kind.LEAN: 3,
    Kind.MYSTERY: 4,
    Kind.OBSTACLE: 3,
    Kind.WALL: 1,
}


class Outcome(Enum):
    NOTHING = "nothing"
    ATE_FOOD = "ate_food"
    ATE_MYSTERY = "ate_mystery"
    OUT_OF_FIELD = "out_of_field"
    SELF_HIT = "self_hit"
    OBSTACLE = "obstacle"

    @property
    def failed(self) -> bool:
        return self in (Outcome.OUT_OF_FIELD, Outcome.SELF_HIT, Outcome.OBSTACLE)


@dataclass
class Cell:
    """One snake segment.

    ``prev_dir`` is the heading the cell was entered with and ``dir`` the
    heading it is left with, so ``dir != prev_dir`` marks a corner.
    """
    coords: Coords
    dir: Direction
    prev_dir: Direction
    even: bool


@dataclass(eq=False)
class Thing:
    """An item lying in the field. ``lifetime`` of None never expires."""
    kind: Kind
    sprite_index: int
    coords: Coords
    lifetime: Optional[int] = None

    @property
    def expired(self) -> bool:
        return self.lifetime == 0
