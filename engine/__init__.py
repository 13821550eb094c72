"""
Simulation core of the snake game.

Nothing in here knows about windows, sound or input devices; the game
loop in ``game.py`` drives it and draws whatever it reports.
"""

from .world import World, build_walls
from .config import Settings, load_settings, save_settings, frame_delta_ms

__all__ = [
    'World', 'build_walls',
    'Settings', 'load_settings', 'save_settings', 'frame_delta_ms',
]
