"""The player, the enemies and their artificial intelligence."""

from __future__ import annotations

from typing import Callable, Optional

from .canvas import Canvas
from .character import Character, Stats
from .effects import AddBlood
from .events import Key
from .states import State

_HEAL_AMOUNT = 10.0


class Player(Character):
    """The character steered from the keyboard."""

    ATTACK_FRAMES = 15
    MOVE_FRAMES = 14
    JUMP_FRAMES = 10
    FAST_MOVE_FRAMES = 12

    # Held keys are re-applied every tick, in this order.
    _HELD_ORDER = (Key.A, Key.D, Key.SPACE, Key.J, Key.K)

    def __init__(
        self,
        canvas: Canvas,
        stats: Stats,
        image: str,
        on_ground: Callable[[Character], bool],
        *,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        super().__init__(canvas, stats, image, on_ground, clock=clock)
        self.held: set[int] = set()
        self._held_actions = {
            Key.A: self.add_move_left_state,
            Key.D: self.add_move_right_state,
            Key.SPACE: self.add_jump_state,
            Key.J: self.add_attack_state,
            Key.K: self.add_fast_move_state,
        }

    def key_press(self, key: int) -> None:
        """Start holding a movement key, or use the healing skill on L."""
        if key in self._held_actions:
            self.held.add(int(key))
        elif key == Key.L:
            self._heal()

    def key_release(self, key: int) -> None:
        self.held.discard(int(key))
        if key == Key.D:
            self.del_move_right_state()
        elif key == Key.A:
            self.del_move_left_state()

    def tick(self) -> None:
        """Re-apply the state of every key that is held down."""
        for key in self._HELD_ORDER:
            if key in self.held:
                self._held_actions[key]()

    def _heal(self) -> None:
        now = self._clock()
        if now - self.pre_add_blood < self.add_blood_cd:
            return
        self.pre_add_blood = now
        amount = min(_HEAL_AMOUNT, self.max_health - self.health)
        self.health += amount
        self.element_added.emit(AddBlood(self.canvas, self.x, self.y, amount))

    def show_still(self) -> None:
        self.item.set_image(f"res/Player/Still/{int(self.direction)}/0.png")

    def show_walk(self, frame: int) -> None:
        self.item.set_image(f"res/Player/Walk/{int(self.direction)}/{frame // 2}.png")

    def show_attack(self, frame: int) -> None:
        self.item.set_image(f"res/Player/Attack/{int(self.direction)}/{frame}.png")

    def show_fast_move(self, frame: int) -> None:
        self.item.set_image(f"res/Player/FastMove/{int(self.direction)}/{frame}.png")


class Enemy(Character):
    """A computer-controlled fighter that guards its starting point."""

    CHASE_HEIGHT = 100
    CHASE_DISTANCE = 150

    def __init__(
        self,
        canvas: Canvas,
        stats: Stats,
        image: str,
        on_ground: Callable[[Character], bool],
        *,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        super().__init__(canvas, stats, image, on_ground, clock=clock)
        self.origin_x = stats.x
        self.origin_y = stats.y
        self.turn_back = False

    def _walk_right(self, distance: Optional[float] = None) -> None:
        self.del_move_left_state()
        if self.turn_back:
            self.del_move_right_state()
            self.turn_back = False
        self.add_move_right_state(distance)

    def _walk_left(self, distance: Optional[float] = None) -> None:
        self.del_move_right_state()
        if self.turn_back:
            self.del_move_left_state()
            self.turn_back = False
        self.add_move_left_state(distance)

    def _strike(self) -> None:
        self.del_move_left_state()
        self.del_move_right_state()
        self.add_attack_state()

    def ai(self, player: Character) -> None:
        """Decide this frame's busy states from the player's position."""
        if State.ATTACK in self.busy:
            return
        half = self.width / 2
        far = (
            abs(player.y - self.y) > self.CHASE_HEIGHT
            or abs(player.x + half - (self.x + half)) > self.CHASE_DISTANCE
        )
        if far:
            if abs(self.origin_x - self.x) >= self.move_speed:
                if self.origin_x > self.x:
                    self._walk_right()
                else:
                    self._walk_left()
            else:
                self.del_move_left_state()
                self.del_move_right_state()
                self.turn_back = False
        elif player.x < self.x:
            if player.x + player.width / 2 < self.x - self.attack_width:
                self._walk_left()
            elif self.direction:
                self._walk_left(0)
                self.turn_back = True
            else:
                self._strike()
        else:
            if self.x + self.width + self.attack_width < player.x + player.width / 2:
                self._walk_right()
            elif not self.direction:
                self._walk_right(0)
                self.turn_back = True
            else:
                self._strike()

    def show_still(self) -> None:
        self.item.set_image(f"res/Player/Still/{int(self.direction)}/0.png")

    def show_walk(self, frame: int) -> None:
        self.item.set_image(f"res/Player/Walk/{int(self.direction)}/{frame // 2}.png")

    def show_attack(self, frame: int) -> None:
        pass

    def show_fast_move(self, frame: int) -> None:
        pass


class Enemy1(Enemy):
    """The common foot soldier."""

    ATTACK_FRAMES = 6
    MOVE_FRAMES = 6
    JUMP_FRAMES = 10
    FAST_MOVE_FRAMES = 12

    def show_still(self) -> None:
        self.item.set_image(f"res/Enemy1/still/{int(self.direction)}/0.png")

    def show_walk(self, frame: int) -> None:
        self.item.set_image(f"res/Enemy1/walk/{int(self.direction)}/{frame // 2}.png")

    def show_attack(self, frame: int) -> None:
        self.item.set_image(f"res/Enemy1/attack/{int(self.direction)}/{frame}.png")


class Boss(Enemy):
    """The level's strongest enemy, with a longer attack animation."""

    ATTACK_FRAMES = 7
    MOVE_FRAMES = 6
    JUMP_FRAMES = 10
    FAST_MOVE_FRAMES = 12

    def show_still(self) -> None:
        self.item.set_image(f"res/Boss/still/{int(self.direction)}/0.png")

    def show_walk(self, frame: int) -> None:
        self.item.set_image(f"res/Boss/walk/{int(self.direction)}/{frame // 2}.png")

    def show_attack(self, frame: int) -> None:
        self.item.set_image(f"res/Boss/attack/{int(self.direction)}/{frame}.png")