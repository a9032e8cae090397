"""The screens the game moves between: title, play, victory and defeat."""

from __future__ import annotations

import os
from typing import Callable, Optional

from .canvas import ButtonItem, Canvas, TextItem
from .events import Scheduler, Signal
from .level import Level
from .storage import Database

START_BACKGROUND = "res/beginscenebackground.png"
NEXT_LEVEL_BACKGROUND = "res/next_level.png"

TITLE = "Welcome to our Game！！！"
START_LABEL = "开始游戏"
END_TEXT = "你已经全部通关了"
RETURN_LABEL = "返回"
FAIL_TEXT = "游戏失败！"
MENU_LABEL = "返回主菜单"

LOAD_QUESTION = "检测到存档，是否要加载存档？"
SAVE_QUESTION = "是否要存档？"

_BUTTON_WIDTH = 200
_BUTTON_HEIGHT = 50
_HEADLINE_SIZE = 36
_NEXT_LEVEL_DELAY_MS = 2000
_RESULT_DELAY_MS = 1000


def _decline(question: str) -> bool:
    return False


class Screen:
    """Something shown on the canvas until it is closed."""

    def __init__(self, canvas: Canvas) -> None:
        self.canvas = canvas
        self.closed = False

    def close(self) -> None:
        """Take the screen off the canvas; closing twice does nothing."""
        if self.closed:
            return
        self.closed = True
        self.canvas.clear()


def _centered_headline(canvas: Canvas, text: str, color: str) -> TextItem:
    item = canvas.create_text(text, _HEADLINE_SIZE)
    item.color = color
    rect = item.bounding_rect()
    item.set_pos(canvas.width / 2 - rect.width / 2, canvas.height / 2 - rect.height)
    return item


def _centered_button(canvas: Canvas, label: str) -> ButtonItem:
    return canvas.create_button(
        canvas.width / 2 - _BUTTON_WIDTH / 2,
        canvas.height / 2 + 50,
        _BUTTON_WIDTH,
        _BUTTON_HEIGHT,
        label,
    )


class BeginScreen(Screen):
    """The title screen with a start button that asks for level 1."""

    def __init__(self, canvas: Canvas) -> None:
        super().__init__(canvas)
        self.create_play_screen = Signal()
        canvas.set_background_picture(START_BACKGROUND)

        self.title = canvas.create_text(TITLE, _HEADLINE_SIZE)
        self.title.color = "white"
        rect = self.title.bounding_rect()
        self.title.set_pos((canvas.width - rect.width) / 2, (canvas.height - rect.height) / 4)

        self.button = canvas.create_button(
            (canvas.width - _BUTTON_WIDTH) / 2,
            canvas.height * 0.6,
            _BUTTON_WIDTH,
            _BUTTON_HEIGHT,
            START_LABEL,
        )
        self.button.clicked.connect(lambda: self.create_play_screen.emit(1))


class EndScreen(Screen):
    """Shown once every level is cleared."""

    def __init__(self, canvas: Canvas) -> None:
        super().__init__(canvas)
        self.return_main = Signal()
        canvas.clear()
        canvas.set_background_picture(START_BACKGROUND)
        self.text = _centered_headline(canvas, END_TEXT, "white")
        self.button = _centered_button(canvas, RETURN_LABEL)
        self.button.clicked.connect(self.return_main.emit)


class FailScreen(Screen):
    """Shown when the player dies."""

    def __init__(self, canvas: Canvas) -> None:
        super().__init__(canvas)
        self.return_main = Signal()
        canvas.clear()
        canvas.set_background_picture(START_BACKGROUND)
        self.text = _centered_headline(canvas, FAIL_TEXT, "red")
        self.button = _centered_button(canvas, MENU_LABEL)
        self.button.clicked.connect(self.return_main.emit)


class PlayScreen(Screen):
    """Runs one level; level 2 starts by itself after a short pause."""

    def __init__(
        self,
        canvas: Canvas,
        level_id: int,
        db_path: str | os.PathLike[str],
        scheduler: Scheduler,
        ask: Optional[Callable[[str], bool]] = None,
        *,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        super().__init__(canvas)
        self.level_id = level_id
        self.db_path = db_path
        self.scheduler = scheduler
        self.ask = ask if ask is not None else _decline
        self.clock = clock
        self.level: Optional[Level] = None
        self.started = False

        self.create_play_screen = Signal()
        self.create_fail_screen = Signal()

        canvas.clear()
        if level_id == 2:
            canvas.set_background_color("black")
            canvas.set_background_picture(NEXT_LEVEL_BACKGROUND)
            self._later(_NEXT_LEVEL_DELAY_MS, self.start_level)

    def _later(self, delay_ms: int, callback: Callable[[], object]) -> None:
        def run() -> None:
            if not self.closed:
                callback()

        self.scheduler.call_later(delay_ms, run)

    def start_level(self) -> None:
        """Build the level, offering to resume a saved game if there is one."""
        self.canvas.clear()
        if self.started:
            return
        self.started = True
        read_user = False
        with Database(self.db_path) as db:
            saved = db.query(
                "SELECT class FROM user WHERE levelid = ?", ("class",), (self.level_id,)
            )
            if saved:
                if self.ask(LOAD_QUESTION):
                    read_user = True
                else:
                    db.execute("DELETE FROM user WHERE levelid = ?", (self.level_id,))
        self.level = Level(self.canvas, self.level_id, read_user, self.db_path, clock=self.clock)
        self.level.completed.connect(self.level_completed)
        self.level.failed.connect(self.level_failed)

    def level_completed(self) -> None:
        """Ask for the next level a second from now."""
        self._later(_RESULT_DELAY_MS, lambda: self.create_play_screen.emit(self.level_id + 1))

    def level_failed(self) -> None:
        """Ask for the defeat screen a second from now."""
        self._later(_RESULT_DELAY_MS, self.create_fail_screen.emit)

    def close_event(self) -> bool:
        """Offer to save the running level; return whether it was saved."""
        if self.level is None:
            return False
        return self.level.close_event(lambda: self.ask(SAVE_QUESTION))

    def close(self) -> None:
        if self.closed:
            return
        if self.level is not None:
            self.level.stop()
        super().close()