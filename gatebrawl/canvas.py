"""A retained scene of rectangles, images, text and buttons."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .events import KeyDispatcher, Signal

# Rough glyph metrics used to size text items.
_GLYPH_WIDTH = 0.6
_LINE_HEIGHT = 1.2
_TEXT_MARGIN = 4.0


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in scene coordinates."""

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def translated(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.width, self.height)

    def intersects(self, other: "Rect") -> bool:
        """True when the two rectangles share an area; touching edges do not count."""
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )


class Item:
    """Something placed in the scene at a position with a stacking order."""

    def __init__(self, z: float = 0.0) -> None:
        self.x = 0.0
        self.y = 0.0
        self.z = z
        self.opacity = 1.0

    def set_pos(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def _local_rect(self) -> Rect:
        return Rect(0.0, 0.0, 0.0, 0.0)

    def bounding_rect(self) -> Rect:
        """The item's bounding rectangle in scene coordinates."""
        return self._local_rect().translated(self.x, self.y)

    def collides_with(self, other: "Item") -> bool:
        return self.bounding_rect().intersects(other.bounding_rect())


class RectItem(Item):
    """A filled rectangle with an outline pen."""

    def __init__(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: Optional[str] = "black",
        z: float = 0.0,
        pen_width: float = 1.0,
    ) -> None:
        super().__init__(z)
        self.rect = Rect(x, y, width, height)
        self.color = color
        self.pen_color = "black"
        self.pen_width = pen_width

    def set_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.rect = Rect(x, y, width, height)

    def _local_rect(self) -> Rect:
        half = self.pen_width / 2
        r = self.rect
        return Rect(r.left - half, r.top - half, r.width + 2 * half, r.height + 2 * half)


class PixmapItem(Item):
    """An image stretched to a fixed size."""

    def __init__(self, image: str, width: float, height: float, z: float = 0.0) -> None:
        super().__init__(z)
        self.image = image
        self.width = width
        self.height = height

    def set_image(self, image: str) -> None:
        """Show another image at the item's current size."""
        self.image = image

    def _local_rect(self) -> Rect:
        return Rect(0.0, 0.0, self.width, self.height)


class TextItem(Item):
    """A line of bold text."""

    def __init__(self, text: str, font_size: float, z: float = 0.0, color: str = "black") -> None:
        super().__init__(z)
        self.text = text
        self.font_size = font_size
        self.color = color

    def set_text(self, text: str) -> None:
        self.text = text

    def _local_rect(self) -> Rect:
        width = len(self.text) * self.font_size * _GLYPH_WIDTH + 2 * _TEXT_MARGIN
        height = self.font_size * _LINE_HEIGHT + 2 * _TEXT_MARGIN
        return Rect(0.0, 0.0, width, height)


class ButtonItem(Item):
    """A clickable button with a label."""

    def __init__(self, x: float, y: float, width: float, height: float, text: str, z: float = 0.0) -> None:
        super().__init__(z)
        self.width = width
        self.height = height
        self.text = text
        self.clicked = Signal()
        self.set_pos(x, y)

    def click(self) -> None:
        self.clicked.emit()

    def _local_rect(self) -> Rect:
        return Rect(0.0, 0.0, self.width, self.height)


class Canvas:
    """The game's scene: a fixed-size area holding items and a background."""

    def __init__(self, width: float = 1000, height: float = 600, keys: Optional[KeyDispatcher] = None) -> None:
        self.width = width
        self.height = height
        self.keys = keys if keys is not None else KeyDispatcher()
        self.background_color: Optional[str] = None
        self.background_picture: Optional[str] = None
        self._items: list[Item] = []

    def _add(self, item: Item) -> Item:
        self._items.append(item)
        return item

    def clear(self) -> None:
        """Remove every item and the background."""
        self._items.clear()
        self.background_color = None
        self.background_picture = None

    def create_rect(self, x, y, width, height, color="black", z=0.0) -> RectItem:
        return self._add(RectItem(x, y, width, height, color, z))

    def create_pixmap(self, image, width, height, z=0.0) -> PixmapItem:
        return self._add(PixmapItem(image, width, height, z))

    def create_text(self, text, font_size, z=0.0) -> TextItem:
        return self._add(TextItem(text, font_size, z))

    def create_button(self, x, y, width, height, text, z=0.0) -> ButtonItem:
        return self._add(ButtonItem(x, y, width, height, text, z))

    def is_crash(self, a: Item, b: Item) -> bool:
        return a.collides_with(b)

    def remove(self, item: Item) -> bool:
        """Take ``item`` out of the scene; return False if it was not there."""
        for index, existing in enumerate(self._items):
            if existing is item:
                del self._items[index]
                return True
        return False

    def set_background_color(self, color: str) -> None:
        self.background_color = color
        self.background_picture = None

    def set_background_picture(self, image: str) -> None:
        """Use ``image``, stretched over the whole scene, as background."""
        self.background_picture = image
        self.background_color = None

    def items(self) -> list[Item]:
        """Items in drawing order: lower z first, then in order of creation."""
        return sorted(self._items, key=lambda item: item.z)

    def __contains__(self, item: object) -> bool:
        return any(existing is item for existing in self._items)

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class Ground:
    """A platform that characters stand on."""

    item: RectItem


class Gate:
    """A door image that sends the player to the ``to`` position."""

    def __init__(self, canvas: Canvas, x, y, width, height, to, image: str) -> None:
        self.canvas = canvas
        self.to = (float(to[0]), float(to[1]))
        self.item = canvas.create_pixmap(image, width, height, -1)
        self.item.set_pos(x, y)