from dataclasses import replace

import pytest

from gatebrawl.actors import Player
from gatebrawl.canvas import Canvas
from gatebrawl.character import Stats
from gatebrawl.events import Key
from gatebrawl.hud import PlayerInfo


class FakeClock:
    def __init__(self, now=100_000):
        self.now = now

    def __call__(self):
        return self.now


def make_stats(**overrides):
    base = Stats(
        health=100.0, ad=3.0, move_speed=5.0, fast_move_speed=8.0, jump_speed=6.5,
        attack_delay=500, fast_move_delay=1000, attack_pre_time=1,
        x=500.0, y=300.0, width=30.0, height=50.0, add_blood_cd=3000,
        pre_attack=0, pre_fast_move=0, pre_add_blood=0, max_health=100.0,
    )
    return replace(base, **overrides)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def canvas():
    return Canvas(1000, 600)


def make_hud(canvas, clock, **overrides):
    player = Player(canvas, make_stats(**overrides), "res/Player/Still/1/0.png", lambda c: True, clock=clock)
    return player, PlayerInfo(canvas, player, clock=clock)


def test_show_keeps_element_alive(canvas, clock):
    _, hud = make_hud(canvas, clock)
    assert hud.show() is True
    assert hud.show() is True


def test_full_health_bar(canvas, clock):
    _, hud = make_hud(canvas, clock)
    hud.show()
    assert hud.health_bar.rect.width == 70


def test_health_bar_shrinks_and_clamps(canvas, clock):
    player, hud = make_hud(canvas, clock)
    hud.show()
    full = hud.health_bar.rect.width
    player.health = player.max_health / 2
    hud.show()
    assert hud.health_bar.rect.width == full / 2
    player.health = -5
    hud.show()
    assert hud.health_bar.rect.width == 0


def test_ready_skills_are_bright_and_unlabelled(canvas, clock):
    _, hud = make_hud(canvas, clock)
    hud.show()
    assert hud.fast_move_cd.text == ""
    assert hud.add_blood_cd.text == ""
    assert hud.fast_move_pic.opacity == 1.0
    assert hud.add_blood_bound.opacity == 1.0


def test_heal_cooldown_dims_and_counts_down(canvas, clock):
    player, hud = make_hud(canvas, clock, health=50.0)
    player.key_press(Key.L)
    hud.show()
    assert hud.add_blood_pic.opacity == 0.4
    assert hud.add_blood_bound.opacity == 0.4
    assert hud.add_blood_cd.text == "3.0"
    clock.now += player.add_blood_cd
    hud.show()
    assert hud.add_blood_cd.text == ""
    assert hud.add_blood_pic.opacity == 1.0


def test_fast_move_cooldown_label(canvas, clock):
    player, hud = make_hud(canvas, clock)
    player.pre_fast_move = clock.now - 500
    hud.show()
    assert hud.fast_move_bound.opacity == 0.4
    assert hud.fast_move_cd.text == "0.5"


def test_outlines_have_no_fill(canvas, clock):
    _, hud = make_hud(canvas, clock)
    assert hud.fast_move_bound.color is None
    assert hud.add_blood_bound.pen_color == "white"
    assert hud.avatar in canvas