import random, time
from typing import List, Optional

import pygame

from constants import FIELD_SIZE, WIN_W, WIN_H, SPEEDS, LAST_LEVEL, BANNER_DUR
from engine.config import Settings, VOLUME_STEPS, frame_delta_ms, save_settings
from engine.world import World
from models import Direction, Kind, Outcome
from sound import SoundPlayer, effect_for
from sprites import head_sprite, body_sprite, tail_sprite
from widgets import Action, Choice, DialogResult, Menu, Message

# ── colours ──────────────────────────────────────────────
BG          = (0,    0,   0)
GRASS_A     = (46,  110,  52)
GRASS_B     = (52,  120,  58)
WALL_COL    = (120,  72,  48)
WALL_EDGE   = (80,   46,  30)
SNAKE_H     = (70,  210, 110)
SNAKE_A     = (50,  180,  90)
SNAKE_B     = (40,  160,  78)
EYE_COL     = (15,   15,  20)
TXT         = (60,   90, 255)
SCORE_COL   = (250, 220,  40)

THING_COLS = {
    Kind.FOOD:     [(225, 80, 80), (235, 130, 60), (210, 60, 120)],
    Kind.FAT:      [(240, 200, 60), (250, 170, 40), (230, 220, 110)],
    Kind.LEAN:     [(90, 220, 220), (120, 200, 255), (150, 240, 180)],
    Kind.MYSTERY:  [(170, 90, 230), (200, 110, 210), (140, 100, 250), (220, 140, 255)],
    Kind.OBSTACLE: [(130, 130, 135), (105, 100, 95), (150, 145, 160)],
    Kind.WALL:     [WALL_COL],
}

LINE_INTERVAL = 10
POLL_FPS = 250          # input polling rate between ticks

# which cell edges a body corner picture joins
CORNER_EDGES = {4: ("left", "top"), 5: ("right", "top"), 6: ("left", "bottom"), 7: ("right", "bottom")}
# head-turn picture -> (facing, edge the neck comes from)
HEAD_TURN_SHAPE = {
    0: (Direction.LEFT, "top"), 1: (Direction.RIGHT, "top"),
    2: (Direction.LEFT, "bottom"), 3: (Direction.RIGHT, "bottom"),
    4: (Direction.UP, "left"), 5: (Direction.DOWN, "left"),
    6: (Direction.UP, "right"), 7: (Direction.DOWN, "right"),
}
HEAD_STRAIGHT_FACING = [Direction.DOWN, Direction.UP, Direction.LEFT, Direction.RIGHT]
TAIL_POINTING = [Direction.DOWN, Direction.UP, Direction.RIGHT, Direction.LEFT]

QUIT_MSG = {
    None: "You have exited the game.",
    Outcome.OUT_OF_FIELD: "You have hit the wall.",
    Outcome.SELF_HIT: "You have hit yourself.",
    Outcome.OBSTACLE: "You have hit an obstacle.",
}


class TurnGate:
    """First turn key in a tick wins; the rest wait for the next step."""

    def __init__(self):
        self.turned = False

    def turn(self, world: World, left: bool) -> bool:
        if self.turned:
            return False
        if left: world.turn_left()
        else: world.turn_right()
        self.turned = True
        return True

    def reopen(self):
        self.turned = False


# ── window & drawing ──────────────────────────────────
class Renderer:
    def __init__(self, width=WIN_W, height=WIN_H, fullscreen=False, size=FIELD_SIZE):
        pygame.init(); pygame.font.init()
        flags = pygame.FULLSCREEN if fullscreen else pygame.DOUBLEBUF
        self.scr = pygame.display.set_mode((0, 0) if fullscreen else (width, height), flags)
        pygame.display.set_caption("Snake")
        pygame.mouse.set_visible(False)
        self.clock = pygame.time.Clock()
        self.size = size
        self._calc_layout(*self.scr.get_size())

    def _calc_layout(self, w, h):
        self.W, self.H = w, h
        # 2 for the wall around the field
        self.cell = min(w, h) // (self.size + 2)
        self.border_x = (w - self.cell * (self.size + 2)) // 2
        self.border_y = (h - self.cell * (self.size + 2)) // 2
        self.font = pygame.font.Font(None, 72 if w >= 1536 else 42)
        self.small_f = pygame.font.Font(None, max(12, int(self.cell * 0.9)))
        self.background = self._grass()

    def _grass(self):
        g = self.cell
        surf = pygame.Surface((g * self.size, g * self.size))
        for x in range(self.size):
            for y in range(self.size):
                surf.fill(GRASS_A if (x + y) % 2 else GRASS_B, (x * g, y * g, g, g))
        return surf

    def _rect(self, x, y):
        g = self.cell
        return pygame.Rect(self.border_x + g * x, self.border_y + g * y, g, g)

    # ── field ─────────────────────────────
    def draw_world(self, world: World):
        self.scr.fill(BG)
        self.scr.blit(self.background, self._rect(1, 1).topleft)
        edge = self.size + 1
        for b in range(edge + 1):
            for x, y in ((b, 0), (b, edge), (0, b), (edge, b)):
                self._wall(self._rect(x, y))

        snake = world.snake
        assert len(snake) >= 3, "the snake cannot be shorter than 3"
        self._head(snake[0])
        for c in snake[1:-1]:
            self._body(c)
        self._tail(snake[-1])

        for t in world.things:
            self._thing(t)

        surf = self.font.render(str(world.score), True, SCORE_COL)
        self.scr.blit(surf, (self.W - surf.get_width() - 40, 40))
        pygame.display.flip()

    def _wall(self, r):
        pygame.draw.rect(self.scr, WALL_COL, r)
        pygame.draw.rect(self.scr, WALL_EDGE, r, max(1, self.cell // 8))

    def _edge_rect(self, r, edge, thick):
        pad = (r.width - thick) // 2
        return {
            "top":    pygame.Rect(r.x + pad, r.y, thick, r.height // 2 + thick // 2),
            "bottom": pygame.Rect(r.x + pad, r.centery - thick // 2, thick, r.height - r.height // 2 + thick // 2),
            "left":   pygame.Rect(r.x, r.y + pad, r.width // 2 + thick // 2, thick),
            "right":  pygame.Rect(r.centerx - thick // 2, r.y + pad, r.width - r.width // 2 + thick // 2, thick),
        }[edge]

    def _eyes(self, r, facing: Direction):
        dx, dy = facing.delta
        off = self.cell // 5
        px, py = -dy * off, dx * off
        cx, cy = r.centerx + dx * off, r.centery + dy * off
        rad = max(1, self.cell // 10)
        pygame.draw.circle(self.scr, EYE_COL, (cx + px, cy + py), rad)
        pygame.draw.circle(self.scr, EYE_COL, (cx - px, cy - py), rad)

    def _head(self, cell):
        r = self._rect(*cell.coords)
        name, idx = head_sprite(cell)
        pygame.draw.rect(self.scr, SNAKE_H, r.inflate(-2, -2), border_radius=self.cell // 3)
        if name == "headstraight":
            facing = HEAD_STRAIGHT_FACING[idx]
        else:
            facing, neck = HEAD_TURN_SHAPE[idx]
            pygame.draw.rect(self.scr, SNAKE_H, self._edge_rect(r, neck, self.cell * 2 // 3))
        self._eyes(r, facing)

    def _body(self, cell):
        r = self._rect(*cell.coords)
        idx = body_sprite(cell)
        thick = self.cell * 2 // 3
        if idx < 4:
            col = SNAKE_A if idx % 2 == 0 else SNAKE_B
            shape = r.inflate(thick - r.width, 0) if idx < 2 else r.inflate(0, thick - r.height)
            pygame.draw.rect(self.scr, col, shape)
        else:
            for e in CORNER_EDGES[idx]:
                pygame.draw.rect(self.scr, SNAKE_A, self._edge_rect(r, e, thick))

    def _tail(self, cell):
        r = self._rect(*cell.coords)
        dx, dy = TAIL_POINTING[tail_sprite(cell)].delta
        half = self.cell // 3
        tip = (r.centerx + dx * r.width // 2, r.centery + dy * r.height // 2)
        back = (r.centerx - dx * r.width // 2, r.centery - dy * r.height // 2)
        base = [(back[0] - dy * half, back[1] - dx * half), (back[0] + dy * half, back[1] + dx * half)]
        pygame.draw.polygon(self.scr, SNAKE_B, [tip, *base])

    def _thing(self, t):
        r = self._rect(*t.coords)
        col = THING_COLS[t.kind][t.sprite_index]
        if t.kind is Kind.WALL:
            self._wall(r)
        elif t.kind is Kind.OBSTACLE:
            pygame.draw.polygon(self.scr, col, [r.midtop, r.midright, r.midbottom, r.midleft])
        elif t.kind is Kind.MYSTERY:
            pygame.draw.rect(self.scr, col, r.inflate(-4, -4), border_radius=4)
            q = self.small_f.render("?", True, TXT)
            self.scr.blit(q, q.get_rect(center=r.center))
        else:
            shrink = {Kind.FAT: 0, Kind.FOOD: -self.cell // 5, Kind.LEAN: -self.cell // 3}[t.kind]
            pygame.draw.ellipse(self.scr, col, r.inflate(shrink, shrink))

    # ── text screens ───────────────────────
    def messages(self, lines: List[str]):
        self.scr.fill(BG)
        surfs = [self.font.render(line, True, TXT) for line in lines]
        total = sum(s.get_height() for s in surfs) + (len(surfs) - 1) * LINE_INTERVAL
        y = (self.H - total) // 2
        for s in surfs:
            self.scr.blit(s, ((self.W - s.get_width()) // 2, y))
            y += s.get_height() + LINE_INTERVAL
        pygame.display.flip()

    def banner(self, text: str):
        self.messages([text])
        pygame.time.wait(int(BANNER_DUR * 1000))

    def tick(self, fps=30):
        self.clock.tick(fps)


# ── main game ─────────────────────────────────────
class Game:
    def __init__(self, settings: Settings, sounds: SoundPlayer, renderer: Renderer,
                 settings_path=None, seed: Optional[int] = None):
        self.settings = settings
        self.sounds = sounds
        self.ui = renderer
        self.settings_path = settings_path
        self.rng = random.Random(seed)

    # ── menus ─────────────────────────────
    def start_menu(self) -> bool:
        """True to play, False to leave."""
        while True:
            menu = Menu([Action("Start the game"), Action("Options"), Action("Exit"),
                         Message("You can also press ESC to exit")], self.sounds)
            result = menu.run(self.ui)
            if result in (0, DialogResult.OK):
                return True
            if result == 1:
                self.options_dialog()
            else:
                return False

    def options_dialog(self):
        s = self.settings
        volumes = [str(v) for v in range(VOLUME_STEPS + 1)]
        speed = Choice("Speed", SPEEDS, s.speed_index)
        level = Choice("Level", [str(n) for n in range(1, s.last_level + 1)], s.chosen_level - 1)
        effects = Choice("Effects", volumes, s.effects_volume)
        music = Choice("Music", volumes, s.music_volume)
        menu = Menu([speed, level, effects, music, Action("Save settings"),
                     Action("Discard changes"), Message("ESC to discard changes")], self.sounds)
        if menu.run(self.ui) != 4:
            return
        s.speed_index = speed.result
        s.chosen_level = level.result + 1
        s.effects_volume, s.music_volume = effects.result, music.result
        self.sounds.set_volume(s.effects_volume, s.music_volume)
        path = save_settings(s, self.settings_path)
        print(f"[CFG] Settings saved to {path}")

    def game_over(self, outcome: Optional[Outcome], score: int) -> bool:
        """True to play again."""
        menu = Menu([Message(QUIT_MSG[outcome]), Message("Game over."), Message(f"Score {score}."),
                     Message("Press SPACE to play again,"), Message("ESC to exit.")])
        return menu.run(self.ui) == DialogResult.OK

    # ── one round ─────────────────────────
    def play_round(self, level: int):
        """Run until death or Esc; returns (fatal outcome or None, score)."""
        world = World(level=level, rng=self.rng)
        gate = TurnGate()
        delta = frame_delta_ms(self.settings)
        self.ui.draw_world(world)
        while True:
            if not self._wait_tick(world, gate, pygame.time.get_ticks() + delta):
                return None, world.score

            outcome = world.step()
            gate.reopen()
            effect = effect_for(outcome)
            if effect: self.sounds.play(effect)
            if outcome.failed:
                return outcome, world.score

            self.ui.draw_world(world)

    def _wait_tick(self, world: World, gate: TurnGate, next_frame: int) -> bool:
        """Handle input until the next step is due; False when the player leaves."""
        while True:
            for e in pygame.event.get():
                if e.type == pygame.QUIT or (e.type == pygame.KEYDOWN and e.key == pygame.K_ESCAPE):
                    return False
                if e.type == pygame.KEYDOWN and e.key in (pygame.K_LEFT, pygame.K_RIGHT):
                    # the head turns on screen now, the body follows on the next step
                    if gate.turn(world, left=e.key == pygame.K_LEFT):
                        self.ui.draw_world(world)
            if pygame.time.get_ticks() >= next_frame:
                return True
            self.ui.tick(POLL_FPS)

    def run(self):
        if not self.start_menu():
            return
        level = min(self.settings.chosen_level, LAST_LEVEL)
        self.sounds.play_music()
        self.sounds.play("start")
        while True:
            self.ui.banner(f"Level {level}")
            t0 = time.perf_counter()
            outcome, score = self.play_round(level)
            why = outcome.value if outcome else "quit"
            print(f"[GAME] level {level}: score {score}, {why}, {time.perf_counter() - t0:.1f}s")
            if not self.game_over(outcome, score):
                break
            self.sounds.play("start")
        self.sounds.stop_music()
