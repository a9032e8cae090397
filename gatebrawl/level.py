"""One level: its fighters, platforms, gates and the per-frame update."""

from __future__ import annotations

import logging
import os
from dataclasses import astuple
from typing import Callable, Optional

from .actors import Boss, Enemy, Enemy1, Player
from .canvas import Canvas, Gate, Ground
from .character import Character, Stats
from .effects import Element
from .events import Signal
from .hud import PlayerInfo
from .states import State, StateInfo
from .storage import STAT_COLUMNS, Database, StorageError

log = logging.getLogger(__name__)

BACKGROUND = "res/playscenebackground.png"
PLAYER_IMAGE = "res/Player/Still/1/0.png"
ENEMY_IMAGE = "res/Enemy1/walk/1/0.png"
GATE_UP = "res/Gate/up.jpg"
GATE_DOWN = "res/Gate/down.jpg"

# Platforms of each level: (x, y, width, height, color).
_GROUNDS = {
    1: [
        (0, 200, 1000, 20, "gray"),
        (0, 400, 1000, 20, "gray"),
        (0, 580, 1000, 20, "gray"),
    ],
    2: [
        (0, 200, 1000, 20, "gray"),
        (0, 400, 1000, 20, "darkgray"),
        (0, 580, 1000, 20, "darkgray"),
    ],
}

_GATE_LAYOUT = [
    (10, 490, 130, 130, (300, 300), GATE_UP),
    (20, 300, 130, 130, (500, 500), GATE_DOWN),
    (830, 300, 130, 130, (300, 100), GATE_UP),
    (820, 100, 130, 130, (300, 300), GATE_DOWN),
]
_GATES = {1: _GATE_LAYOUT, 2: _GATE_LAYOUT}

# Enemy kinds in the order they are loaded.
_ENEMY_CLASSES = {"Enemy1": Enemy1, "Boss": Boss}


def _table(read_user: bool) -> str:
    return "user" if read_user else "origin"


def _class_name(character: Character) -> str:
    if isinstance(character, Player):
        return "Player"
    if isinstance(character, Boss):
        return "Boss"
    return "Enemy1"


class Level:
    """A running level, loaded from the start data or from a saved game."""

    def __init__(
        self,
        canvas: Canvas,
        level_id: int,
        read_user: bool,
        db_path: str | os.PathLike[str],
        *,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.canvas = canvas
        self.level_id = level_id
        self.db_path = db_path
        self._clock = clock

        self.completed = Signal()
        self.failed = Signal()

        self.player: Optional[Player] = None
        self.characters: list[Character] = []
        self.enemies: list[Enemy] = []
        self.grounds: list[Ground] = []
        self.elements: list[Element] = []
        self.gates: list[Gate] = []
        self.running = True
        self._keys_connected = False
        self._completion_sent = False

        canvas.set_background_picture(BACKGROUND)
        table = _table(read_user)
        with Database(db_path) as db:
            self._create_player(db, table)
            self._create_grounds()
            self._create_enemies(db, table)
            db.execute("DELETE FROM user WHERE levelid = ?", (level_id,))
        self._create_gates()
        self.elements.append(PlayerInfo(canvas, self.player, clock=clock))
        self._connect()

    # --- construction ---------------------------------------------------

    def _load_stats(self, db: Database, table: str, kind: str) -> list[Stats]:
        rows = db.query(
            f"SELECT * FROM {table} WHERE levelid = ? AND class = ?",
            STAT_COLUMNS,
            (self.level_id, kind),
        )
        return [Stats.from_row(row) for row in rows]

    def _create_player(self, db: Database, table: str) -> None:
        found = self._load_stats(db, table, "Player")
        if not found:
            raise StorageError(f"no Player row for level {self.level_id} in table {table!r}")
        self.player = Player(self.canvas, found[0], PLAYER_IMAGE, self.on_ground, clock=self._clock)
        self.characters.append(self.player)
        self.player.busy[State.DROP] = StateInfo()

    def _create_grounds(self) -> None:
        for x, y, width, height, color in _GROUNDS.get(self.level_id, []):
            self.grounds.append(Ground(self.canvas.create_rect(x, y, width, height, color)))

    def _create_enemies(self, db: Database, table: str) -> None:
        for kind, cls in _ENEMY_CLASSES.items():
            for stats in self._load_stats(db, table, kind):
                self.enemies.append(cls(self.canvas, stats, ENEMY_IMAGE, self.on_ground, clock=self._clock))
        for enemy in self.enemies:
            self.characters.append(enemy)
            enemy.busy[State.DROP] = StateInfo()

    def _create_gates(self) -> None:
        for x, y, width, height, to, image in _GATES.get(self.level_id, []):
            self.gates.append(Gate(self.canvas, x, y, width, height, to, image))

    def _connect(self) -> None:
        player = self.player
        self.canvas.keys.pressed.connect(player.key_press)
        self.canvas.keys.released.connect(player.key_release)
        self._keys_connected = True
        player.element_added.connect(self.add_element)
        for enemy in self.enemies:
            player.attacked.connect(enemy.receive_attack)
            enemy.attacked.connect(player.receive_attack)
            enemy.element_added.connect(self.add_element)

    def _disconnect_keys(self) -> None:
        if self._keys_connected and self.player is not None:
            self.canvas.keys.pressed.disconnect(self.player.key_press)
            self.canvas.keys.released.disconnect(self.player.key_release)
        self._keys_connected = False

    # --- per frame --------------------------------------------------------

    def on_ground(self, character: Character) -> bool:
        """True when the character touches any platform."""
        return any(self.canvas.is_crash(character.item, ground.item) for ground in self.grounds)

    def _step(self, character: Character) -> None:
        if not character.busy:
            character.show_still()
            return
        actions = {
            State.MOVE_LEFT: character.move_left,
            State.MOVE_RIGHT: character.move_right,
            State.JUMP: character.jump,
            State.ATTACK: character.attack,
            State.DROP: character.drop,
            State.FAST_MOVE: character.fast_move,
        }
        for state in sorted(character.busy):
            actions[state]()

    def _remove_enemy(self, enemy: Enemy) -> None:
        self.enemies.remove(enemy)
        if self.player is not None:
            self.player.attacked.disconnect(enemy.receive_attack)
            enemy.attacked.disconnect(self.player.receive_attack)
        enemy.destroy()

    def tick(self) -> None:
        """Advance the level by one frame."""
        if not self.running:
            return
        if self.player is not None:
            self.player.tick()

        survivors: list[Character] = []
        for character in list(self.characters):
            if not character.is_dead():
                self._step(character)
                survivors.append(character)
                continue
            if character is self.player:
                self.characters = survivors + [
                    c for c in self.characters if c not in survivors and c is not character
                ]
                self._disconnect_keys()
                character.destroy()
                self.player = None
                self.failed.emit()
                self.stop()
                return
            self._remove_enemy(character)
        self.characters = survivors

        if not self.enemies and not self._completion_sent:
            self._completion_sent = True
            self.completed.emit()
        for enemy in self.enemies:
            if not enemy.is_dead():
                enemy.ai(self.player)

        self.elements = [element for element in self.elements if element.show()]

        for gate in self.gates:
            if self.canvas.is_crash(gate.item, self.player.item):
                self.player.busy.clear()
                self.player.walk(*gate.to)
                self.player.add_drop_state()

    def add_element(self, element: Element) -> None:
        self.elements.append(element)

    # --- saving and closing ---------------------------------------------

    def close_event(self, ask: Callable[[], bool]) -> bool:
        """Save the game if ``ask`` answers yes; return whether it was saved."""
        if ask():
            self.save()
            return True
        return False

    def save(self) -> None:
        """Replace this level's saved game with the current fighters."""
        columns = ", ".join(("class",) + STAT_COLUMNS + ("levelid",))
        placeholders = ", ".join("?" for _ in range(len(STAT_COLUMNS) + 2))
        sql = f"INSERT INTO user ({columns}) VALUES ({placeholders})"
        with Database(self.db_path) as db:
            db.execute("DELETE FROM user WHERE levelid = ?", (self.level_id,))
            if self.player is None:
                log.warning("no player to save")
            to_save = ([self.player] if self.player is not None else []) + list(self.enemies)
            for character in to_save:
                values = (_class_name(character),) + astuple(character.stats) + (self.level_id,)
                db.execute(sql, values)
        log.debug("level %s saved", self.level_id)

    def stop(self) -> None:
        """Stop updating the level and stop listening to the keyboard."""
        self._disconnect_keys()
        self.running = False