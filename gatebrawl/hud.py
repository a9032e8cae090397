"""The player's status panel: health bar and skill cooldowns."""

from __future__ import annotations

import time
from typing import Callable, Optional

from .actors import Player
from .canvas import Canvas, RectItem
from .effects import Element

_BAR_WIDTH = 70
_DIMMED = 0.4


def _now_ms() -> int:
    return int(time.time() * 1000)


def _outline(item: RectItem) -> None:
    item.pen_color = "white"
    item.pen_width = 0.5
    item.color = None


class PlayerInfo(Element):
    """Draws the player's avatar, health and the dash and healing cooldowns."""

    def __init__(self, canvas: Canvas, player: Player, clock: Optional[Callable[[], int]] = None) -> None:
        super().__init__(canvas)
        self.player = player
        self._clock = clock if clock is not None else _now_ms

        self.avatar = canvas.create_pixmap("res/Player/Still/1/0.png", 20, 40, 10)
        self.avatar.set_pos(10, 10)
        self.health_back = canvas.create_rect(0, 0, _BAR_WIDTH, 5, "gray", 1)
        self.health_bar = canvas.create_rect(0, 0, _BAR_WIDTH, 5, "red", 2)
        self.health_back.set_pos(50, 15)
        self.health_bar.set_pos(50, 15)

        self.fast_move_pic = canvas.create_pixmap("res/Player/FastMove/1/0.png", 30, 20, 1)
        self.fast_move_pic.set_pos(40, 30)
        self.fast_move_bound = canvas.create_rect(50, 30, 25, 20, "white", -1)
        _outline(self.fast_move_bound)

        self.add_blood_pic = canvas.create_pixmap("res/addblood.jpg", 20, 20, 1)
        self.add_blood_pic.set_pos(90, 29)
        self.add_blood_bound = canvas.create_rect(87, 30, 25, 20, "white", -1)
        _outline(self.add_blood_bound)

        self.fast_move_cd = canvas.create_text("0", 15, 100)
        self.fast_move_cd.set_pos(49, 30)
        self.fast_move_cd.color = "white"
        self.add_blood_cd = canvas.create_text("0", 15, 100)
        self.add_blood_cd.set_pos(85, 30)
        self.add_blood_cd.color = "white"

    def _show_cooldown(self, now: int, last: int, delay: int, bound, picture, label) -> None:
        if now - last < delay:
            bound.opacity = _DIMMED
            picture.opacity = _DIMMED
            label.set_text(f"{(last + delay - now) / 1000.0:.1f}")
        else:
            bound.opacity = 1.0
            picture.opacity = 1.0
            label.set_text("")

    def show(self) -> bool:
        player = self.player
        self.health_bar.set_rect(0, 0, _BAR_WIDTH * max(0.0, player.health) / player.max_health, 5)
        now = self._clock()
        self._show_cooldown(
            now, player.pre_fast_move, player.fast_move_delay,
            self.fast_move_bound, self.fast_move_pic, self.fast_move_cd,
        )
        self._show_cooldown(
            now, player.pre_add_blood, player.add_blood_cd,
            self.add_blood_bound, self.add_blood_pic, self.add_blood_cd,
        )
        return True