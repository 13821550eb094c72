"""
Tests for sprites.py - picture selection from segment headings.
"""

import pytest

from engine.world import World
from models import Cell, Direction
from sprites import BODY_CORNER, HEAD_TURN, body_sprite, head_sprite, tail_sprite

U, D, L, R = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT


def cell(d, prev, even=False):
    return Cell((5, 5), d, prev, even)


class TestHead:
    def test_straight(self):
        assert head_sprite(cell(D, D)) == ("headstraight", 0)
        assert head_sprite(cell(U, U)) == ("headstraight", 1)
        assert head_sprite(cell(L, L)) == ("headstraight", 2)
        assert head_sprite(cell(R, R)) == ("headstraight", 3)

    def test_turn(self):
        assert head_sprite(cell(R, U)) == ("headturn", 3)
        assert head_sprite(cell(D, L)) == ("headturn", 7)

    def test_every_quarter_turn_has_a_picture(self):
        for d in Direction:
            assert head_sprite(cell(d.left(), d))[0] == "headturn"
            assert head_sprite(cell(d.right(), d))[0] == "headturn"
        assert sorted(HEAD_TURN.values()) == list(range(8))

    def test_reversal_is_a_programming_error(self):
        with pytest.raises(ValueError):
            head_sprite(cell(U, D))


class TestBody:
    def test_straight_pieces_alternate(self):
        assert body_sprite(cell(U, U, False)) == 0
        assert body_sprite(cell(U, U, True)) == 1
        assert body_sprite(cell(D, D, True)) == 0
        assert body_sprite(cell(L, L, False)) == 2
        assert body_sprite(cell(R, R, False)) == 3

    def test_corners_ignore_even(self):
        for key, idx in BODY_CORNER.items():
            assert body_sprite(cell(*key, even=True)) == idx
            assert body_sprite(cell(*key, even=False)) == idx

    def test_reversal_is_a_programming_error(self):
        with pytest.raises(ValueError):
            body_sprite(cell(L, R))


class TestTail:
    def test_by_heading(self):
        assert [tail_sprite(cell(d, d)) for d in (U, D, L, R)] == [0, 1, 2, 3]


class TestFromWorld:
    def test_turn_shows_up_as_corner(self, world):
        world.turn_left()
        world.step()
        assert head_sprite(world.snake[0]) == ("headstraight", 2)
        assert body_sprite(world.snake[1]) in range(4, 8)

    def test_every_segment_of_a_game_has_a_picture(self):
        w = World(seed=3)
        for i in range(60):
            if i % 10 == 0:
                w.turn_left()
            elif i % 5 == 0:
                w.turn_right()
            if w.step().failed:
                break
            head_sprite(w.snake[0])
            for c in w.snake[1:-1]:
                body_sprite(c)
            tail_sprite(w.snake[-1])
