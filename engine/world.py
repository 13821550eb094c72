from __future__ import annotations
import random
from typing import Dict, List, Optional

from constants import FIELD_SIZE, LAST_LEVEL
from models import SPRITE_COUNTS, Cell, Coords, Direction, Kind, Outcome, Thing

# ---------------- Tunables ----------------
FOOD_GROW = 3
FAT_GROW = 6
MYSTERY_GROW = 15
MYSTERY_SCORE = 5

LEAN_AFTER_FOOD = 5     # eaten food before lean items may show up
LEAN_P = 0.5
FAT_P = 0.1
OBSTACLE_P = 0.015
MYSTERY_P = 0.0025

FOOD_LIFETIME = 60
LEAN_LIFETIME = 60
OBSTACLE_LIFETIME = 60
MYSTERY_LIFETIME = 120

HEAD_CLEARANCE = 3      # nothing spawns closer than this to the head on both axes
SPAWN_ATTEMPTS = 1000   # random draws before falling back to a full scan
INIT_LENGTH = 3


class World:
    """Snake on a square field plus the things lying around.

    Driven from outside: call ``turn_left``/``turn_right`` on input and
    ``step`` once per tick. ``step`` reports how the tick went; a failed
    outcome ends the round and the world must not be stepped again.
    """

    def __init__(self, level: int = 1, rng: Optional[random.Random] = None,
                 seed: Optional[int] = None, size: int = FIELD_SIZE):
        if not 1 <= level <= LAST_LEVEL:
            raise ValueError(f"unknown level {level}, expected 1..{LAST_LEVEL}")
        self.size = size
        self.level = level
        self.rng = rng if rng is not None else random.Random(seed)

        cx = cy = size // 2
        self.snake: List[Cell] = [
            Cell((cx, cy + i), Direction.UP, Direction.UP, i % 2 == 0)
            for i in range(INIT_LENGTH)
        ]
        self.things: List[Thing] = build_walls(level, size)
        self.walls = {t.coords for t in self.things}
        self.score = 0
        self.grow = 0           # ticks left during which the tail stays
        self.eaten_food = 0     # food eaten since the last lean item
        self.add_food()

    # --------------- observation ---------------
    @property
    def head(self) -> Cell:
        return self.snake[0]

    def render_spec(self) -> Dict:
        """Plain snapshot of everything a renderer needs."""
        return {
            "size": self.size,
            "level": self.level,
            "score": self.score,
            "snake": [
                {"coords": list(c.coords), "dir": c.dir.name,
                 "prev_dir": c.prev_dir.name, "even": c.even}
                for c in self.snake
            ],
            "things": [
                {"kind": t.kind.value, "sprite_index": t.sprite_index,
                 "coords": list(t.coords), "lifetime": t.lifetime}
                for t in self.things
            ],
        }

    # --------------- input ---------------
    def turn_left(self):
        self.head.dir = self.head.dir.left()

    def turn_right(self):
        self.head.dir = self.head.dir.right()

    # --------------- tick ---------------
    def step(self) -> Outcome:
        head = self.head
        dx, dy = head.dir.delta
        nx, ny = head.coords[0] + dx, head.coords[1] + dy
        if not (1 <= nx <= self.size and 1 <= ny <= self.size) or (nx, ny) in self.walls:
            return Outcome.OUT_OF_FIELD

        if self.grow == 0:
            self.snake.pop()
        else:
            assert self.grow > 0, "growth counter cannot be negative"
            self.grow -= 1

        if any(c.coords == (nx, ny) for c in self.snake):
            return Outcome.SELF_HIT

        self.snake.insert(0, Cell((nx, ny), head.dir, head.dir, not head.even))
        assert len(self.snake) >= INIT_LENGTH, "snake cannot be shorter than 3"

        outcome = Outcome.NOTHING
        # spawns during the pass land in self.things but not in the snapshot
        for thing in list(self.things):
            hit = thing.coords == (nx, ny)
            if thing.expired and not hit:
                self.things.remove(thing)
                if thing.kind in (Kind.FOOD, Kind.LEAN):
                    self.add_food()
            elif hit:
                if thing.kind is Kind.OBSTACLE:
                    return Outcome.OBSTACLE
                self.things.remove(thing)
                outcome = self._eat(thing)
            elif thing.lifetime is not None:
                thing.lifetime -= 1

        if self.rng.random() < OBSTACLE_P:
            self._spawn(Kind.OBSTACLE, OBSTACLE_LIFETIME)
        if self.rng.random() < MYSTERY_P:
            self._spawn(Kind.MYSTERY, MYSTERY_LIFETIME)
        return outcome

    def _eat(self, thing: Thing) -> Outcome:
        if thing.kind is Kind.MYSTERY:
            if self.rng.random() < 0.5:
                self.score += MYSTERY_SCORE
                self.eaten_food += 1
            else:
                self.grow += MYSTERY_GROW
            return Outcome.ATE_MYSTERY

        self.score += 1
        if thing.kind is Kind.LEAN:
            self.eaten_food = 0
        else:
            self.eaten_food += 1
            self.grow += FAT_GROW if thing.kind is Kind.FAT else FOOD_GROW
        self.add_food()
        return Outcome.ATE_FOOD

    # --------------- spawning ---------------
    def add_food(self) -> Optional[Thing]:
        spot = self.empty_spot()
        if spot is None:
            return None
        if self.eaten_food >= LEAN_AFTER_FOOD and self.rng.random() < LEAN_P:
            return self._place(Kind.LEAN, spot, LEAN_LIFETIME)
        if self.rng.random() < FAT_P:
            return self._place(Kind.FAT, spot, None)
        x, y = spot
        on_edge = x in (1, self.size) or y in (1, self.size)
        return self._place(Kind.FOOD, spot, None if on_edge else FOOD_LIFETIME)

    def _spawn(self, kind: Kind, lifetime: Optional[int]) -> Optional[Thing]:
        spot = self.empty_spot()
        if spot is None:
            return None
        return self._place(kind, spot, lifetime)

    def _place(self, kind: Kind, spot: Coords, lifetime: Optional[int]) -> Thing:
        thing = Thing(kind, self.rng.randrange(SPRITE_COUNTS[kind]), spot, lifetime)
        self.things.append(thing)
        return thing

    def _is_empty(self, spot: Coords, taken) -> bool:
        hx, hy = self.head.coords
        if abs(spot[0] - hx) < HEAD_CLEARANCE and abs(spot[1] - hy) < HEAD_CLEARANCE:
            return False
        return spot not in taken

    def empty_spot(self) -> Optional[Coords]:
        """Random free cell away from the head, or None if the field is packed."""
        taken = {c.coords for c in self.snake}
        taken.update(t.coords for t in self.things)
        for _ in range(SPAWN_ATTEMPTS):
            spot = (self.rng.randint(1, self.size), self.rng.randint(1, self.size))
            if self._is_empty(spot, taken):
                return spot
        free = [
            (x, y)
            for x in range(1, self.size + 1)
            for y in range(1, self.size + 1)
            if self._is_empty((x, y), taken)
        ]
        return self.rng.choice(free) if free else None


def build_walls(level: int, size: int = FIELD_SIZE) -> List[Thing]:
    """Static wall layout for a level; level 1 is the open field."""
    walls: List[Thing] = []
    if level == 2:
        mid = size // 2
        for y in (size // 4, size - size // 4 + 1):
            for x in range(size // 4, size - size // 4 + 2):
                if abs(x - mid) > 2:
                    walls.append(Thing(Kind.WALL, 0, (x, y)))
    return walls
