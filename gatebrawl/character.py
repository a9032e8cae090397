"""The fighter shared by the player and the enemies: stats, busy states and movement."""

from __future__ import annotations

import time
from dataclasses import dataclass, fields
from typing import Callable, Iterable, Optional

from .canvas import Canvas, RectItem
from .effects import HitNum, PlayerAttackEffect
from .events import Signal
from .states import MoveStateInfo, State, StateInfo

_INT_FIELDS = frozenset(
    {
        "attack_delay",
        "fast_move_delay",
        "attack_pre_time",
        "add_blood_cd",
        "pre_attack",
        "pre_fast_move",
        "pre_add_blood",
    }
)

# Threshold below which the landing search stops refining.
_LANDING_EPS = 0.01


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Stats:
    """A character's numbers, with fields in the order of the storage columns."""

    health: float
    ad: float
    move_speed: float
    fast_move_speed: float
    jump_speed: float
    attack_delay: int
    fast_move_delay: int
    attack_pre_time: int
    x: float
    y: float
    width: float
    height: float
    add_blood_cd: int
    pre_attack: int
    pre_fast_move: int
    pre_add_blood: int
    max_health: float

    @classmethod
    def from_row(cls, row: Iterable) -> "Stats":
        """Build stats from a row whose values follow the storage column order."""
        values = list(row)
        names = [f.name for f in fields(cls)]
        if len(values) != len(names):
            raise ValueError(f"expected {len(names)} values, got {len(values)}")
        converted = (
            int(float(value)) if name in _INT_FIELDS else float(value)
            for name, value in zip(names, values)
        )
        return cls(*converted)


class Character:
    """A fighter on the canvas that moves, jumps, falls, dashes and attacks."""

    ATTACK_FRAMES = 6
    MOVE_FRAMES = 6
    JUMP_FRAMES = 10
    FAST_MOVE_FRAMES = 12
    ATTACK_WIDTH = 20.0

    def __init__(
        self,
        canvas: Canvas,
        stats: Stats,
        image: str,
        on_ground: Callable[["Character"], bool],
        *,
        attack_frames: Optional[int] = None,
        move_frames: Optional[int] = None,
        jump_frames: Optional[int] = None,
        fast_move_frames: Optional[int] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.canvas = canvas
        self.on_ground = on_ground
        self._clock = clock if clock is not None else _now_ms

        self.health = stats.health
        self.max_health = stats.max_health
        self.ad = stats.ad
        self.move_speed = stats.move_speed
        self.fast_move_speed = stats.fast_move_speed
        self.jump_speed = stats.jump_speed
        self.attack_delay = stats.attack_delay
        self.fast_move_delay = stats.fast_move_delay
        self.attack_pre_time = stats.attack_pre_time
        self.x = stats.x
        self.y = stats.y
        self.width = stats.width
        self.height = stats.height
        self.add_blood_cd = stats.add_blood_cd
        self.pre_attack = stats.pre_attack
        self.pre_fast_move = stats.pre_fast_move
        self.pre_add_blood = stats.pre_add_blood

        self.attack_frames = self.ATTACK_FRAMES if attack_frames is None else attack_frames
        self.move_frames = self.MOVE_FRAMES if move_frames is None else move_frames
        self.jump_frames = self.JUMP_FRAMES if jump_frames is None else jump_frames
        self.fast_move_frames = self.FAST_MOVE_FRAMES if fast_move_frames is None else fast_move_frames

        self.direction = True  # True faces right
        self.attack_width = self.ATTACK_WIDTH
        self.attack_height = self.height
        self.busy: dict[State, StateInfo] = {}

        self.attacked = Signal()
        self.died = Signal()
        self.element_added = Signal()

        self.item = canvas.create_pixmap(image, self.width, self.height, 1)
        self.item.set_pos(self.x, self.y)
        self.health_back: RectItem = canvas.create_rect(0, 0, self.width, 5, "gray", 1)
        self.health_bar: RectItem = canvas.create_rect(0, 0, self.width, 5, "red", 2)
        self.health_back.set_pos(self.x, self.y - 7)
        self.health_bar.set_pos(self.x, self.y - 7)

    @property
    def stats(self) -> Stats:
        """The character's current numbers."""
        return Stats(
            self.health, self.ad, self.move_speed, self.fast_move_speed, self.jump_speed,
            self.attack_delay, self.fast_move_delay, self.attack_pre_time,
            self.x, self.y, self.width, self.height, self.add_blood_cd,
            self.pre_attack, self.pre_fast_move, self.pre_add_blood, self.max_health,
        )

    # --- drawing -------------------------------------------------------

    def walk(self, x: float, y: float) -> None:
        """Place the character at (x, y)."""
        self.x = x
        self.y = y
        self.item.set_pos(x, y)
        self.update_health_display()

    def update_health_display(self) -> None:
        self.health_back.set_pos(self.x, self.y - 7)
        self.health_bar.set_pos(self.x, self.y - 7)
        self.health_bar.set_rect(0, 0, self.width * (max(0.0, self.health) / self.max_health), 5)

    def show_still(self) -> None:
        pass

    def show_walk(self, frame: int) -> None:
        pass

    def show_attack(self, frame: int) -> None:
        pass

    def show_fast_move(self, frame: int) -> None:
        pass

    def is_dead(self) -> bool:
        return self.health <= 0

    # --- entering and leaving states ------------------------------------

    def _attack_interruptible(self) -> bool:
        info = self.busy.get(State.ATTACK)
        return info is None or info.frame > 3

    def del_state(self, state: State) -> None:
        self.busy.pop(state, None)

    def add_attack_state(self) -> None:
        blocking = (State.JUMP, State.DROP, State.ATTACK, State.FAST_MOVE)
        if any(state in self.busy for state in blocking):
            return
        self.busy[State.ATTACK] = StateInfo()
        self.del_state(State.MOVE_LEFT)
        self.del_state(State.MOVE_RIGHT)

    def add_fast_move_state(self) -> None:
        if State.FAST_MOVE in self.busy:
            return
        if self._attack_interruptible():
            self.del_state(State.ATTACK)
            self.del_state(State.MOVE_LEFT)
            self.del_state(State.MOVE_RIGHT)
            self.busy[State.FAST_MOVE] = StateInfo()

    def _add_move_state(self, state: State, distance: Optional[float]) -> None:
        if state in self.busy or State.FAST_MOVE in self.busy:
            return
        if self._attack_interruptible():
            speed = self.move_speed if distance is None else distance
            self.busy[state] = MoveStateInfo(0, speed)
            self.del_state(State.ATTACK)

    def add_move_left_state(self, distance: Optional[float] = None) -> None:
        """Start walking left, ``distance`` per frame (the move speed by default)."""
        self._add_move_state(State.MOVE_LEFT, distance)

    def add_move_right_state(self, distance: Optional[float] = None) -> None:
        """Start walking right, ``distance`` per frame (the move speed by default)."""
        self._add_move_state(State.MOVE_RIGHT, distance)

    def add_jump_state(self) -> None:
        if any(state in self.busy for state in (State.DROP, State.JUMP, State.FAST_MOVE)):
            return
        if self._attack_interruptible():
            self.busy[State.JUMP] = StateInfo()
            self.del_state(State.ATTACK)

    def add_drop_state(self) -> None:
        if State.DROP in self.busy:
            return
        self.del_state(State.ATTACK)
        self.del_state(State.JUMP)
        self.busy[State.DROP] = StateInfo()

    def del_move_left_state(self) -> None:
        if State.MOVE_LEFT in self.busy:
            self.del_state(State.MOVE_LEFT)
            self.show_still()

    def del_move_right_state(self) -> None:
        if State.MOVE_RIGHT in self.busy:
            self.del_state(State.MOVE_RIGHT)
            self.show_still()

    # --- one frame of each state ---------------------------------------

    def attack(self) -> None:
        info = self.busy.get(State.ATTACK)
        if info is None:
            return
        now = self._clock()
        if now - self.pre_attack < self.attack_delay and info.frame == 0:
            del self.busy[State.ATTACK]
            self.show_still()
            return
        if info.frame == self.attack_frames:
            self.show_still()
            del self.busy[State.ATTACK]
            return
        if info.frame == self.attack_pre_time:
            self.pre_attack = now
            if self.direction:
                area = self.canvas.create_rect(
                    self.x, self.y, self.attack_width + self.width, self.attack_height, "yellow", 2
                )
                effect_x = self.x + self.width
            else:
                area = self.canvas.create_rect(
                    self.x - self.attack_width, self.y, self.attack_width + self.width,
                    self.attack_height, "yellow", 2,
                )
                effect_x = self.x - self.attack_width
            area.opacity = 0.0
            effect = PlayerAttackEffect(
                self.canvas, self.direction, effect_x, self.y, self.attack_width, self.attack_height
            )
            self.attacked.emit(area, self.ad)
            self.canvas.remove(area)
            self.element_added.emit(effect)
        self.show_attack(info.frame)
        info.frame += 1

    def _step_walk(self, state: State, dx_sign: int) -> None:
        info = self.busy[state]
        if info.frame == self.move_frames:
            info.frame = 0
            return
        self.show_walk(info.frame)
        step = min(getattr(info, "speed", self.move_speed), self.move_speed)
        x = self.x + dx_sign * step
        if dx_sign < 0:
            x = max(x, 0.0)
        else:
            x = min(x, self.canvas.width - self.width)
        self.walk(x, self.y)
        info.frame += 1
        if not self.on_ground(self) and State.JUMP not in self.busy and State.DROP not in self.busy:
            self.busy[State.DROP] = StateInfo()

    def move_left(self) -> None:
        if State.MOVE_LEFT not in self.busy:
            return
        self.direction = False
        self._step_walk(State.MOVE_LEFT, -1)

    def move_right(self) -> None:
        if State.MOVE_RIGHT not in self.busy:
            return
        self.direction = True
        self._step_walk(State.MOVE_RIGHT, 1)

    def jump(self) -> None:
        info = self.busy.get(State.JUMP)
        if info is None:
            return
        if info.frame == self.jump_frames:
            del self.busy[State.JUMP]
            self.busy[State.DROP] = StateInfo()
            return
        self.show_still()
        self.walk(self.x, self.y - self.jump_speed)
        info.frame += 1

    def drop(self) -> None:
        info = self.busy.get(State.DROP)
        if info is None:
            return
        if self.on_ground(self):
            # Rise as far as possible while still touching the ground.
            low, high, best = 0.0, self.jump_speed, 0.0
            start_y = self.y
            while high - low > _LANDING_EPS:
                mid = (low + high) / 2
                self.walk(self.x, start_y - mid)
                if self.on_ground(self):
                    best = mid
                    low = mid + _LANDING_EPS
                else:
                    high = mid - _LANDING_EPS
            self.walk(self.x, start_y - best)
            del self.busy[State.DROP]
        else:
            self.show_still()
            self.walk(self.x, self.y + self.jump_speed)
            info.frame += 1

    def fast_move(self) -> None:
        info = self.busy.get(State.FAST_MOVE)
        if info is None:
            return
        now = self._clock()
        if now - self.pre_fast_move < self.fast_move_delay and info.frame == 0:
            del self.busy[State.FAST_MOVE]
            self.show_still()
            return
        if info.frame == self.fast_move_frames:
            del self.busy[State.FAST_MOVE]
            self.show_still()
            return
        if info.frame == 0:
            self.pre_fast_move = now
        self.show_fast_move(info.frame)
        x = self.x + (1 if self.direction else -1) * self.fast_move_speed
        x = min(x, self.canvas.width - self.width)
        x = max(x, 0.0)
        self.walk(x, self.y)
        info.frame += 1
        if not self.on_ground(self):
            self.busy.clear()
            self.busy[State.DROP] = StateInfo()

    # --- combat ---------------------------------------------------------

    def receive_attack(self, area, damage: float) -> bool:
        """Take ``damage`` if ``area`` overlaps the character; return whether it hit."""
        if self.is_dead():
            return False
        if not self.canvas.is_crash(self.item, area) or State.FAST_MOVE in self.busy:
            return False
        dealt = min(self.health, damage)
        self.health -= dealt
        self.update_health_display()
        self.element_added.emit(HitNum(self.canvas, self.x, self.y, int(dealt)))
        if self.is_dead():
            self.died.emit(self)
        return True

    def destroy(self) -> None:
        """Remove the character's items from the canvas."""
        self.canvas.remove(self.item)
        self.canvas.remove(self.health_back)
        self.canvas.remove(self.health_bar)