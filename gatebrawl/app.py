"""The game window: switches screens, runs the clock and draws with pygame."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Callable, Optional

from .canvas import ButtonItem, Canvas, PixmapItem, RectItem, TextItem
from .events import Key, KeyDispatcher, Scheduler
from .screens import BeginScreen, EndScreen, FailScreen, PlayScreen, Screen
from .storage import Database, StorageError

WIDTH = 1000
HEIGHT = 600
LEVEL_COUNT = 2
TIPS = (
    "Press A to move left, D to move right, J to attack, K to dash, "
    "and L to activate the healing skill."
)
_TIPS_DELAY_MS = 1000


def _decline(question: str) -> bool:
    return False


class Game:
    """Owns the canvas and the current screen, and moves between screens."""

    def __init__(
        self,
        db_path: str | os.PathLike[str] = "database.sqlite",
        *,
        ask: Optional[Callable[[str], bool]] = None,
        clock: Optional[Callable[[], int]] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.keys = KeyDispatcher()
        self.canvas = Canvas(WIDTH, HEIGHT, self.keys)
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.db_path = db_path
        self.ask = ask if ask is not None else _decline
        self.clock = clock
        self.messages: list[str] = []
        self.screen: Optional[Screen] = None
        self.closed = False
        with Database(db_path) as db:
            db.ensure_schema()
        self.return_main()
        self.scheduler.call_later(_TIPS_DELAY_MS, lambda: self.messages.append(TIPS))

    def _queued(self, handler: Callable[..., object]) -> Callable[..., None]:
        """Wrap ``handler`` so it runs on the next scheduler pass, not inside the emit."""

        def post(*args: object) -> None:
            self.scheduler.call_later(0, lambda: handler(*args))

        return post

    def _close_screen(self) -> None:
        if self.screen is not None:
            self.screen.close()
            self.screen = None

    def create_play_screen(self, level_id: int) -> Screen:
        """Show level ``level_id``, or the victory screen past the last level."""
        self._close_screen()
        if level_id > LEVEL_COUNT:
            end = EndScreen(self.canvas)
            end.return_main.connect(self._queued(self.return_main))
            self.screen = end
            return end
        play = PlayScreen(
            self.canvas, level_id, self.db_path, self.scheduler, self.ask, clock=self.clock
        )
        self.screen = play
        if level_id == 1:
            play.start_level()
        play.create_play_screen.connect(self._queued(self.create_play_screen))
        play.create_fail_screen.connect(self._queued(self.create_fail_screen))
        return play

    def create_fail_screen(self) -> Screen:
        self._close_screen()
        fail = FailScreen(self.canvas)
        fail.return_main.connect(self._queued(self.return_main))
        self.screen = fail
        return fail

    def return_main(self) -> Screen:
        self._close_screen()
        begin = BeginScreen(self.canvas)
        begin.create_play_screen.connect(self._queued(self.create_play_screen))
        self.screen = begin
        return begin

    def close(self) -> bool:
        """Offer to save a running level and shut down; return whether it was saved."""
        if self.closed:
            return False
        saved = False
        if isinstance(self.screen, PlayScreen):
            saved = self.screen.close_event()
        self._close_screen()
        self.scheduler.cancel_all()
        self.closed = True
        return saved

    def tick(self, now_ms: int) -> None:
        """Run due timers, then advance the running level by one frame."""
        if self.closed:
            return
        self.scheduler.run_due(now_ms)
        screen = self.screen
        if isinstance(screen, PlayScreen) and screen.level is not None and screen.level.running:
            screen.level.tick()


def _button_at(canvas: Canvas, x: float, y: float) -> Optional[ButtonItem]:
    for item in reversed(canvas.items()):
        if isinstance(item, ButtonItem):
            rect = item.bounding_rect()
            if rect.left <= x < rect.right and rect.top <= y < rect.bottom:
                return item
    return None


_COLORS = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "gray": (160, 160, 164),
    "darkgray": (128, 128, 128),
    "red": (255, 0, 0),
    "green": (0, 200, 0),
    "yellow": (255, 255, 0),
}


def _rgb(name: Optional[str], default=(0, 0, 0)):
    return _COLORS.get(name or "", default)


class _Frontend:
    """Draws the canvas in a pygame window and feeds it input."""

    def __init__(self, pygame, width: int, height: int, res_dir: str) -> None:
        self.pg = pygame
        self.res_dir = Path(res_dir)
        self.surface = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Gate Brawl")
        self.game: Optional[Game] = None
        self._images: dict = {}
        self._fonts: dict = {}
        self._keys = {
            pygame.K_a: Key.A,
            pygame.K_d: Key.D,
            pygame.K_SPACE: Key.SPACE,
            pygame.K_j: Key.J,
            pygame.K_k: Key.K,
            pygame.K_l: Key.L,
        }

    def _font(self, size: float):
        size = max(1, int(size))
        font = self._fonts.get(size)
        if font is None:
            font = self.pg.font.SysFont("arial", size, bold=True)
            self._fonts[size] = font
        return font

    def _image(self, name: str, width: float, height: float):
        key = (name, max(1, int(width)), max(1, int(height)))
        if key not in self._images:
            try:
                loaded = self.pg.image.load(str(self.res_dir / name)).convert_alpha()
                self._images[key] = self.pg.transform.smoothscale(loaded, key[1:])
            except (self.pg.error, OSError):
                self._images[key] = None
        return self._images[key]

    def _layer(self, width: float, height: float):
        return self.pg.Surface((max(1, int(width)), max(1, int(height))), self.pg.SRCALPHA)

    def _draw_rect(self, item: RectItem, alpha: int) -> None:
        rect = item.rect
        if rect.width < 1 or rect.height < 1:
            return
        layer = self._layer(rect.width, rect.height)
        if item.color is not None:
            layer.fill((*_rgb(item.color), alpha))
        if item.pen_width > 0 and item.pen_color:
            self.pg.draw.rect(layer, (*_rgb(item.pen_color), alpha), layer.get_rect(), 1)
        self.surface.blit(layer, (item.x + rect.left, item.y + rect.top))

    def _draw_pixmap(self, item: PixmapItem, alpha: int) -> None:
        image = self._image(item.image, item.width, item.height)
        if image is None:
            image = self._layer(item.width, item.height)
            image.fill((*_rgb("darkgray"), alpha))
        elif alpha < 255:
            image = image.copy()
            image.set_alpha(alpha)
        self.surface.blit(image, (item.x, item.y))

    def _draw_text(self, item: TextItem, alpha: int) -> None:
        if not item.text:
            return
        rendered = self._font(item.font_size).render(item.text, True, _rgb(item.color))
        if alpha < 255:
            rendered.set_alpha(alpha)
        self.surface.blit(rendered, (item.x + 4, item.y + 4))

    def _draw_button(self, item: ButtonItem) -> None:
        box = self.pg.Rect(int(item.x), int(item.y), int(item.width), int(item.height))
        self.pg.draw.rect(self.surface, (225, 225, 225), box)
        label = self._font(item.height * 0.4).render(item.text, True, (0, 0, 0))
        self.surface.blit(label, label.get_rect(center=box.center))

    def draw(self) -> None:
        canvas = self.game.canvas
        background = None
        if canvas.background_picture:
            background = self._image(canvas.background_picture, canvas.width, canvas.height)
        if background is not None:
            self.surface.blit(background, (0, 0))
        else:
            self.surface.fill(_rgb(canvas.background_color, (255, 255, 255)))
        for item in canvas.items():
            if item.opacity <= 0:
                continue
            alpha = int(255 * min(1.0, item.opacity))
            if isinstance(item, RectItem):
                self._draw_rect(item, alpha)
            elif isinstance(item, PixmapItem):
                self._draw_pixmap(item, alpha)
            elif isinstance(item, TextItem):
                self._draw_text(item, alpha)
            elif isinstance(item, ButtonItem):
                self._draw_button(item)

    def _wrap(self, text: str, font, max_width: int) -> list[str]:
        lines: list[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}".strip()
            if current and font.size(candidate)[0] > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines

    def _modal(self, text: str, hint: str, answers: Optional[dict]):
        """Show a message box until it is answered; None if the window was closed."""
        pg = self.pg
        clock = pg.time.Clock()
        font = self._font(18)
        width, height = self.surface.get_size()
        box_width = min(600, width - 40)
        lines = self._wrap(text, font, box_width - 40) + ["", hint]
        while True:
            for event in pg.event.get():
                if event.type == pg.QUIT:
                    pg.event.post(pg.event.Event(pg.QUIT))
                    return None
                if event.type == pg.KEYDOWN:
                    if answers is None:
                        return True
                    if event.key in answers:
                        return answers[event.key]
                if event.type == pg.MOUSEBUTTONDOWN and answers is None:
                    return True
            self.draw()
            line_height = font.get_linesize()
            box = pg.Rect(0, 0, box_width, line_height * len(lines) + 40)
            box.center = (width // 2, height // 2)
            pg.draw.rect(self.surface, (240, 240, 240), box)
            pg.draw.rect(self.surface, (0, 0, 0), box, 1)
            for row, line in enumerate(lines):
                rendered = font.render(line, True, (0, 0, 0))
                self.surface.blit(rendered, (box.left + 20, box.top + 20 + row * line_height))
            pg.display.flip()
            clock.tick(30)

    def ask(self, question: str) -> bool:
        pg = self.pg
        answers = {pg.K_y: True, pg.K_RETURN: True, pg.K_n: False, pg.K_ESCAPE: False}
        return bool(self._modal(question, "[Y] yes / [N] no", answers))

    def info(self, text: str) -> None:
        self._modal(text, "press any key", None)

    def run(self) -> None:
        pg = self.pg
        game = self.game
        clock = pg.time.Clock()
        running = True
        while running:
            for event in pg.event.get():
                if event.type == pg.QUIT:
                    running = False
                elif event.type == pg.KEYDOWN and event.key in self._keys:
                    game.keys.press(self._keys[event.key])
                elif event.type == pg.KEYUP and event.key in self._keys:
                    game.keys.release(self._keys[event.key])
                elif event.type == pg.MOUSEBUTTONDOWN and event.button == 1:
                    button = _button_at(game.canvas, *event.pos)
                    if button is not None:
                        button.click()
            if not running:
                break
            game.tick(pg.time.get_ticks())
            while game.messages:
                self.info(game.messages.pop(0))
            self.draw()
            pg.display.flip()
            clock.tick(60)
        game.close()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="gatebrawl", description="A two-level side-scrolling brawler.")
    parser.add_argument("--db", default="database.sqlite", help="SQLite file with level data and saves")
    parser.add_argument("--resources", default=".", help="directory that holds the res/ images")
    args = parser.parse_args(argv)

    os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
    import pygame

    pygame.init()
    try:
        frontend = _Frontend(pygame, WIDTH, HEIGHT, args.resources)
        frontend.game = Game(args.db, ask=frontend.ask)
        frontend.run()
    except StorageError as exc:
        print(f"gatebrawl: {exc}", file=sys.stderr)
        return 1
    finally:
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())