"""Short-lived visual elements: attack slashes and floating numbers."""

from __future__ import annotations

from typing import Optional

from .canvas import Canvas, PixmapItem, TextItem


class Element:
    """Something drawn once per frame; ``show`` returns False when it is finished."""

    def __init__(self, canvas: Canvas) -> None:
        self.canvas = canvas

    def show(self) -> bool:
        return False


class AttackEffect(Element):
    """An attack animation facing ``direction`` (True is right)."""

    def __init__(self, canvas: Canvas, direction: bool, x: float, y: float, width: float, height: float) -> None:
        super().__init__(canvas)
        self.direction = bool(direction)
        self.frame = 0
        self.item: Optional[PixmapItem] = None


class PlayerAttackEffect(AttackEffect):
    """The player's slash: each image is held for two frames."""

    TOTAL_FRAMES = 12

    def __init__(self, canvas: Canvas, direction: bool, x: float, y: float, width: float, height: float) -> None:
        super().__init__(canvas, direction, x, y, width, height)
        self.item = canvas.create_pixmap(self._image(0), width, height, 100)
        self.item.set_pos(x, y)

    def _image(self, index: int) -> str:
        return f"res/Player/AttackEffect/{int(self.direction)}/{index}.png"

    def show(self) -> bool:
        if self.frame == self.TOTAL_FRAMES:
            self.canvas.remove(self.item)
            return False
        if self.frame % 2 == 0:
            self.item.set_image(self._image(self.frame // 2))
        self.frame += 1
        return True


class _FloatingNumber(Element):
    """A number that rises above a character and then disappears."""

    LIFETIME = 16
    STEP_FRAMES = 5
    RISE = 10

    def __init__(self, canvas: Canvas, x: float, y: float, text: str, color: str) -> None:
        super().__init__(canvas)
        self.x = x
        self.y = y
        self.frame = 0
        self.item: TextItem = canvas.create_text(text, 20, 3)
        self.item.color = color
        self.item.set_pos(x, y)

    def show(self) -> bool:
        if self.frame == self.LIFETIME:
            self.canvas.remove(self.item)
            return False
        if self.frame % self.STEP_FRAMES == 0:
            self.item.set_pos(self.x, self.y - (self.frame // self.STEP_FRAMES + 1) * self.RISE)
        self.frame += 1
        return True


class HitNum(_FloatingNumber):
    """Red damage number."""

    def __init__(self, canvas: Canvas, x: float, y: float, damage: int) -> None:
        super().__init__(canvas, x, y, f"-{int(damage)}", "red")


class AddBlood(_FloatingNumber):
    """Green healing number."""

    def __init__(self, canvas: Canvas, x: float, y: float, amount: float) -> None:
        super().__init__(canvas, x, y, f"+{int(amount)}", "green")