# start.py - launcher
"""
Launcher for the snake game.

Examples
--------
# Play with the stored settings
python start.py

# Fast game on level 2 without sound, settings kept in a custom file
python start.py --speed fast --level 2 --mute --settings ~/.snake.json

# Reproducible item spawns
python start.py --seed 42
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

import pygame

from constants import LAST_LEVEL, SPEEDS, WIN_H, WIN_W
from engine.config import SETTINGS_PATH, load_settings
from game import Game, Renderer
from sound import create_player


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Grid snake arcade game.")
    p.add_argument("--width", type=int, default=WIN_W)
    p.add_argument("--height", type=int, default=WIN_H)
    p.add_argument("--fullscreen", action="store_true", help="Use the whole screen.")
    p.add_argument("--settings", type=Path, default=Path(SETTINGS_PATH),
                   help="JSON file the options dialog reads and writes.")
    p.add_argument("--level", type=int, choices=range(1, LAST_LEVEL + 1),
                   help="Start level for this session (stored setting is kept).")
    p.add_argument("--speed", choices=SPEEDS, help="Speed for this session.")
    p.add_argument("--seed", type=int, default=None, help="Seed item spawning.")
    p.add_argument("--mute", action="store_true", help="Disable all sound.")
    return p


def session_settings(args: argparse.Namespace):
    """Stored settings with the command line overrides applied."""
    settings = load_settings(args.settings)
    if args.level is not None:
        settings = replace(settings, chosen_level=args.level)
    if args.speed is not None:
        settings = replace(settings, speed_index=SPEEDS.index(args.speed))
    return settings


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = session_settings(args)

    renderer = Renderer(args.width, args.height, fullscreen=args.fullscreen)
    sounds = create_player(settings.effects_volume, settings.music_volume, enabled=not args.mute)
    print(f"[GAME] {type(sounds).__name__}, speed {SPEEDS[settings.speed_index]}, level {settings.chosen_level}")
    try:
        Game(settings, sounds, renderer, settings_path=args.settings, seed=args.seed).run()
    except KeyboardInterrupt:
        print("\n[GAME] Interrupted.")
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
