# widgets.py
# Keyboard-driven text menus drawn by the game's renderer.
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence, Union

import pygame


class DialogResult(Enum):
    OK = "ok"
    CANCEL = "cancel"


# a menu closes with a DialogResult (Space / Esc) or the index of the widget that closed it
DialogReturn = Union[DialogResult, int]


class Widget:
    can_activate = False

    def present(self) -> str:
        raise NotImplementedError

    def feed(self, event) -> bool:
        """Handle a key event; True closes the parent menu."""
        return False


class Message(Widget):
    def __init__(self, content: str):
        self.content = content

    def present(self) -> str:
        return self.content


class Action(Widget):
    can_activate = True

    def __init__(self, content: str):
        self.content = content

    def present(self) -> str:
        return self.content

    def feed(self, event) -> bool:
        return event.type == pygame.KEYDOWN and event.key == pygame.K_RETURN


class Choice(Widget):
    can_activate = True

    def __init__(self, name: str, options: Sequence[str], chosen: int = 0):
        if not options:
            raise ValueError("a choice needs at least one option")
        self.name = name
        self.options = list(options)
        self.chosen = chosen % len(self.options)

    @property
    def result(self) -> int:
        return self.chosen

    def present(self) -> str:
        return f"{self.name} > {self.options[self.chosen]} <"

    def feed(self, event) -> bool:
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_LEFT:
                self.chosen = (self.chosen - 1) % len(self.options)
            elif event.key == pygame.K_RIGHT:
                self.chosen = (self.chosen + 1) % len(self.options)
        return False


class Menu:
    def __init__(self, widgets: Sequence[Widget], sounds=None):
        self.widgets = list(widgets)
        self.sounds = sounds
        self.active = [i for i, w in enumerate(self.widgets) if w.can_activate]
        self.selected = 0       # position within self.active

    @property
    def selected_index(self) -> Optional[int]:
        return self.active[self.selected] if self.active else None

    def lines(self) -> List[str]:
        out = []
        for i, w in enumerate(self.widgets):
            text = w.present()
            out.append(f"- {text} -" if i == self.selected_index else text)
        return out

    def feed(self, event) -> Optional[DialogReturn]:
        if event.type == pygame.QUIT:
            return DialogResult.CANCEL
        if event.type != pygame.KEYDOWN:
            return None
        if event.key == pygame.K_ESCAPE:
            return DialogResult.CANCEL
        if event.key == pygame.K_SPACE:
            return DialogResult.OK
        if not self.active:
            return None
        if event.key in (pygame.K_DOWN, pygame.K_UP):
            step = 1 if event.key == pygame.K_DOWN else -1
            self.selected = (self.selected + step) % len(self.active)
            if self.sounds is not None:
                self.sounds.play("menu")
            return None
        idx = self.selected_index
        if self.widgets[idx].feed(event):
            return idx
        return None

    def run(self, renderer) -> DialogReturn:
        while True:
            renderer.messages(self.lines())
            for event in pygame.event.get():
                result = self.feed(event)
                if result is not None:
                    return result
            renderer.tick()
