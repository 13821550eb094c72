# sprites.py
# Which picture to use for a snake segment, keyed off its headings.
from __future__ import annotations

from models import Cell, Direction

U, D, L, R = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT

HEAD_STRAIGHT = {D: 0, U: 1, L: 2, R: 3}

# (dir, prev_dir) -> picture
HEAD_TURN = {
    (L, D): 0, (R, D): 1, (L, U): 2, (R, U): 3,
    (U, R): 4, (D, R): 5, (U, L): 6, (D, L): 7,
}

# straight pieces alternate by `even`, corners ignore it
BODY_STRAIGHT = {
    (U, U, False): 0, (D, D, True): 0,
    (U, U, True): 1, (D, D, False): 1,
    (L, L, False): 2, (R, R, True): 2,
    (L, L, True): 3, (R, R, False): 3,
}
BODY_CORNER = {
    (U, R): 4, (L, D): 4,
    (U, L): 5, (R, D): 5,
    (D, R): 6, (L, U): 6,
    (D, L): 7, (R, U): 7,
}

TAIL = {U: 0, D: 1, L: 2, R: 3}


def head_sprite(cell: Cell):
    """('headstraight' | 'headturn', index) for the head cell."""
    if cell.dir == cell.prev_dir:
        return "headstraight", HEAD_STRAIGHT[cell.dir]
    try:
        return "headturn", HEAD_TURN[(cell.dir, cell.prev_dir)]
    except KeyError:
        raise ValueError(f"impossible head headings {cell.dir.name}/{cell.prev_dir.name}") from None


def body_sprite(cell: Cell) -> int:
    if cell.dir == cell.prev_dir:
        return BODY_STRAIGHT[(cell.dir, cell.prev_dir, cell.even)]
    try:
        return BODY_CORNER[(cell.dir, cell.prev_dir)]
    except KeyError:
        raise ValueError(f"impossible body headings {cell.dir.name}/{cell.prev_dir.name}") from None


def tail_sprite(cell: Cell) -> int:
    return TAIL[cell.dir]
