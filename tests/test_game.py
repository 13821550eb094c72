"""
Tests for the game loop helpers in game.py and the launcher in start.py.
"""

from pathlib import Path

import pygame
import pytest

import game
from conftest import scripted
from constants import FIELD_SIZE
from engine.config import load_settings, save_settings, Settings
from engine.world import World
from game import QUIT_MSG, Game, Renderer, TurnGate
from models import Direction, Kind, Outcome, Thing
from sound import effect_for
from sprites import head_sprite
from start import build_parser, session_settings

MID = FIELD_SIZE // 2


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k)


class TrackedWorld(World):
    """World that records every outcome and refuses to step after a failure."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.outcomes = []

    def step(self):
        assert not (self.outcomes and self.outcomes[-1].failed), "stepped after a failure"
        outcome = super().step()
        self.outcomes.append(outcome)
        return outcome


class RecordingSounds:
    def __init__(self):
        self.played = []

    def play(self, name):
        self.played.append(name)

    def play_music(self):
        pass

    def stop_music(self):
        pass

    def set_volume(self, effects, music):
        pass


class FakeRenderer:
    """Keeps what the head looked like on every redraw."""

    def __init__(self):
        self.heads = []
        self.ticks = 0

    def draw_world(self, world):
        self.heads.append(head_sprite(world.head)[0])

    def messages(self, lines):
        pass

    def banner(self, text):
        pass

    def tick(self, fps=30):
        self.ticks += 1


class TestTurnGate:
    """Only the first turn in a tick reaches the world."""

    def test_first_turn_applies(self, world):
        gate = TurnGate()
        assert gate.turn(world, left=True) is True
        assert world.head.dir is Direction.LEFT

    def test_second_turn_in_the_same_tick_is_ignored(self, world):
        gate = TurnGate()
        gate.turn(world, left=False)
        assert gate.turn(world, left=False) is False
        assert world.head.dir is Direction.RIGHT

    def test_reopens_after_step(self, world):
        gate = TurnGate()
        gate.turn(world, left=False)
        world.step()
        gate.reopen()
        assert gate.turn(world, left=False) is True
        assert world.head.dir is Direction.DOWN

    def test_gate_prevents_reversal(self, world):
        """Mashing the same key cannot fold the snake back onto itself."""
        gate = TurnGate()
        for _ in range(3):
            gate.turn(world, left=True)
        assert world.step() is Outcome.NOTHING


class TestQuitMessages:
    def test_every_failure_has_a_message(self):
        for outcome in Outcome:
            if outcome.failed:
                assert outcome in QUIT_MSG

    def test_leaving_by_hand(self):
        assert QUIT_MSG[None] == "You have exited the game."


class ScriptedRound:
    """Item-free worlds with quiet randomness and queued input batches."""

    def __init__(self):
        self.worlds = []
        self.batches = []
        self.food = []

    def world(self, level=1, rng=None):
        w = TrackedWorld(level=level, rng=scripted())
        w.things = [Thing(Kind.FOOD, 0, at) for at in self.food]
        self.worlds.append(w)
        return w

    def events(self):
        return self.batches.pop(0) if self.batches else []


@pytest.fixture
def round_script(monkeypatch):
    script = ScriptedRound()
    monkeypatch.setattr(game, "World", script.world)
    monkeypatch.setattr(game, "frame_delta_ms", lambda settings: 0)
    monkeypatch.setattr(pygame.event, "get", script.events)
    return script


@pytest.fixture
def looped(round_script):
    return Game(Settings(chosen_level=1), RecordingSounds(), FakeRenderer())


class TestPlayRound:
    """The loop side of a round: input, stepping, sounds and redraws."""

    def test_straight_run_ends_on_the_first_failure(self, round_script, looped):
        round_script.food = [(MID, MID - 2)]
        outcome, score = looped.play_round(1)
        w = round_script.worlds[0]
        assert outcome is Outcome.OUT_OF_FIELD
        assert len(w.outcomes) == MID
        assert w.outcomes[1] is Outcome.ATE_FOOD
        assert score == w.score >= 1

    def test_one_effect_per_step_outcome(self, round_script, looped):
        round_script.food = [(MID, MID - 2)]
        looped.play_round(1)
        w = round_script.worlds[0]
        assert looped.sounds.played == [effect_for(o) for o in w.outcomes if effect_for(o)]
        assert looped.sounds.played[0] == "food"
        assert looped.sounds.played[-1] == "wall"

    def test_field_redrawn_after_every_successful_step(self, round_script, looped):
        looped.play_round(1)
        # the first frame plus one per step that did not end the round
        assert len(looped.ui.heads) == len(round_script.worlds[0].outcomes)

    def test_turning_head_is_shown_before_the_step(self, round_script, looped):
        round_script.batches = [[key(pygame.K_LEFT), key(pygame.K_LEFT)], [key(pygame.K_ESCAPE)]]
        assert looped.play_round(1) == (None, 0)
        w = round_script.worlds[0]
        assert w.outcomes == [Outcome.NOTHING]
        assert w.head.dir is Direction.LEFT
        assert w.head.coords == (MID - 1, MID)
        assert looped.ui.heads == ["headstraight", "headturn", "headstraight"]
        assert looped.sounds.played == []

    def test_gate_reopens_every_tick(self, round_script, looped):
        round_script.batches = [[key(pygame.K_LEFT)], [key(pygame.K_LEFT)], [key(pygame.K_ESCAPE)]]
        looped.play_round(1)
        w = round_script.worlds[0]
        assert w.outcomes == [Outcome.NOTHING, Outcome.NOTHING]
        assert w.head.dir is Direction.DOWN
        assert w.head.coords == (MID - 1, MID + 1)

    def test_window_close_leaves_without_stepping(self, round_script, looped):
        round_script.batches = [[pygame.event.Event(pygame.QUIT)]]
        assert looped.play_round(1) == (None, 0)
        assert round_script.worlds[0].outcomes == []

    def test_run_reports_the_round(self, round_script, looped, monkeypatch, capsys):
        monkeypatch.setattr(looped, "start_menu", lambda: True)
        monkeypatch.setattr(looped, "game_over", lambda outcome, score: False)
        looped.run()
        assert looped.sounds.played[0] == "start"
        assert "[GAME] level 1: score 0, out_of_field" in capsys.readouterr().out


class TestRenderer:
    @pytest.fixture
    def ui(self):
        try:
            ui = Renderer(width=320, height=320)
        except pygame.error as e:
            pytest.skip(f"no video driver: {e}")
        yield ui
        pygame.display.quit()

    def test_field_and_wall_ring_fit_the_window(self, ui):
        assert ui.cell * (FIELD_SIZE + 2) <= min(ui.W, ui.H)

    @pytest.mark.parametrize("level", [1, 2])
    def test_draws_whole_games(self, ui, level):
        w = World(level=level, seed=level)
        for i in range(300):
            if i % 7 == 0:
                w.turn_left()
            elif i % 11 == 0:
                w.turn_right()
            ui.draw_world(w)
            if w.step().failed:
                w = World(level=level, seed=i)
            ui.draw_world(w)

    def test_text_screens(self, ui):
        ui.messages(["You have hit the wall.", "Game over.", "Score 3."])
        ui.messages([])


class TestLauncher:
    def test_defaults(self, tmp_path):
        args = build_parser().parse_args(["--settings", str(tmp_path / "s.json")])
        assert args.level is None and args.speed is None and args.seed is None
        assert args.mute is False
        assert args.settings == tmp_path / "s.json"

    def test_overrides_do_not_touch_the_file(self, tmp_path):
        path = tmp_path / "s.json"
        save_settings(Settings(chosen_level=1, speed_index=0), path)
        args = build_parser().parse_args(
            ["--settings", str(path), "--level", "2", "--speed", "fast", "--mute"])
        s = session_settings(args)
        assert (s.chosen_level, s.speed_index) == (2, 2)
        stored = load_settings(path)
        assert (stored.chosen_level, stored.speed_index) == (1, 0)

    def test_bad_level_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--level", "5"])

    def test_bad_speed_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--speed", "ludicrous"])

    def test_settings_path_is_a_path(self):
        assert isinstance(build_parser().parse_args([]).settings, Path)
