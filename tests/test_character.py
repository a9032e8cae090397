from dataclasses import astuple

import pytest

from gatebrawl.canvas import Canvas
from gatebrawl.character import Character, Stats
from gatebrawl.effects import HitNum, PlayerAttackEffect
from gatebrawl.states import MoveStateInfo, State, StateInfo


class Clock:
    def __init__(self, now=100_000):
        self.now = now

    def __call__(self):
        return self.now


class GroundFlag:
    def __init__(self, value=True):
        self.value = value

    def __call__(self, character):
        return self.value


def make_stats(**overrides):
    base = dict(
        health=100.0, ad=3.0, move_speed=5.0, fast_move_speed=8.0, jump_speed=6.5,
        attack_delay=500, fast_move_delay=1000, attack_pre_time=1,
        x=500.0, y=300.0, width=30.0, height=50.0, add_blood_cd=3000,
        pre_attack=0, pre_fast_move=0, pre_add_blood=0, max_health=100.0,
    )
    base.update(overrides)
    return Stats(**base)


def make_character(canvas=None, grounded=True, clock=None, **overrides):
    canvas = canvas if canvas is not None else Canvas(1000, 600)
    flag = GroundFlag(grounded)
    ch = Character(canvas, make_stats(**overrides), "img.png", flag, clock=clock or Clock())
    return ch, flag


def test_from_row_follows_storage_order_and_round_trips():
    row = (90, 3, 5, 8, 6.5, 500, 1000, 1, 500, 500, 30, 50, 3000, 0, 0, 0, 100)
    stats = Stats.from_row(row)
    assert stats.health == 90.0
    assert stats.max_health == 100.0
    assert isinstance(stats.attack_delay, int) and stats.attack_delay == 500
    assert astuple(stats) == row
    assert Stats.from_row(astuple(stats)) == stats


def test_from_row_truncates_integer_text_and_rejects_bad_values():
    row = ["90", "3", "5", "8", "6.5", "500.7", "1000", "1", "500", "500",
           "30", "50", "3000", "0", "0", "0", "100"]
    assert Stats.from_row(row).attack_delay == 500
    row[0] = "abc"
    with pytest.raises(ValueError):
        Stats.from_row(row)


def test_from_row_wrong_length():
    with pytest.raises(ValueError):
        Stats.from_row([1, 2, 3])


def test_construction_places_items():
    ch, _ = make_character()
    assert ch.item in ch.canvas
    assert (ch.item.x, ch.item.y) == (500.0, 300.0)
    assert (ch.health_bar.x, ch.health_bar.y) == (500.0, 300.0 - 7)
    assert ch.health_bar.rect.width == ch.width
    assert ch.direction is True
    assert ch.busy == {}


def test_stats_property_reflects_changes():
    ch, _ = make_character()
    ch.walk(12.0, 34.0)
    stats = ch.stats
    assert (stats.x, stats.y) == (12.0, 34.0)
    assert stats.max_health == ch.max_health


def test_walk_updates_health_bar():
    ch, _ = make_character()
    ch.health = 50.0
    ch.walk(10.0, 20.0)
    assert (ch.item.x, ch.item.y) == (10.0, 20.0)
    assert (ch.health_back.x, ch.health_back.y) == (10.0, 13.0)
    assert ch.health_bar.rect.width == pytest.approx(ch.width * 0.5)


def test_negative_health_gives_empty_bar_and_death():
    ch, _ = make_character()
    assert not ch.is_dead()
    ch.health = -5
    ch.update_health_display()
    assert ch.health_bar.rect.width == 0
    assert ch.is_dead()


def test_add_attack_state_clears_moves():
    ch, _ = make_character()
    ch.add_move_left_state()
    ch.add_attack_state()
    assert set(ch.busy) == {State.ATTACK}


def test_attack_blocked_while_jumping():
    ch, _ = make_character()
    ch.add_jump_state()
    ch.add_attack_state()
    assert State.ATTACK not in ch.busy


def test_move_state_speed_default_and_explicit():
    ch, _ = make_character()
    ch.add_move_left_state()
    assert ch.busy[State.MOVE_LEFT] == MoveStateInfo(0, ch.move_speed)
    ch.add_move_right_state(0)
    assert ch.busy[State.MOVE_RIGHT].speed == 0


def test_move_state_waits_for_early_attack():
    ch, _ = make_character()
    ch.busy[State.ATTACK] = StateInfo(2)
    ch.add_move_right_state()
    assert State.MOVE_RIGHT not in ch.busy
    ch.busy[State.ATTACK].frame = 4
    ch.add_move_right_state()
    assert set(ch.busy) == {State.MOVE_RIGHT}


def test_move_left_moves_and_turns():
    ch, _ = make_character()
    ch.add_move_left_state(100)
    ch.move_left()
    assert ch.direction is False
    assert ch.x == 500.0 - ch.move_speed
    assert ch.busy[State.MOVE_LEFT].frame == 1


def test_move_left_clamped_at_zero():
    ch, _ = make_character(x=2.0)
    ch.add_move_left_state()
    ch.move_left()
    assert ch.x == 0.0


def test_move_frames_wrap_without_moving():
    ch, _ = make_character()
    ch.add_move_right_state()
    for _ in range(ch.move_frames):
        ch.move_right()
    x = ch.x
    assert ch.busy[State.MOVE_RIGHT].frame == ch.move_frames
    ch.move_right()
    assert ch.busy[State.MOVE_RIGHT].frame == 0
    assert ch.x == x


def test_move_right_clamped_to_canvas():
    ch, _ = make_character(x=980.0)
    ch.add_move_right_state()
    ch.move_right()
    assert ch.x == ch.canvas.width - ch.width


def test_walking_off_ground_starts_drop():
    ch, flag = make_character(grounded=False)
    ch.add_move_right_state()
    ch.move_right()
    assert State.DROP in ch.busy


def test_jump_rises_then_drops():
    ch, _ = make_character()
    ch.add_jump_state()
    for _ in range(ch.jump_frames):
        ch.jump()
    assert ch.y == pytest.approx(300.0 - ch.jump_frames * ch.jump_speed)
    ch.jump()
    assert set(ch.busy) == {State.DROP}


def test_drop_falls_when_not_grounded():
    ch, _ = make_character(grounded=False)
    ch.add_drop_state()
    ch.drop()
    assert ch.y == 300.0 + ch.jump_speed
    assert ch.busy[State.DROP].frame == 1


def test_drop_lands_on_top_of_ground():
    canvas = Canvas(1000, 600)
    ground = canvas.create_rect(0, 400, 1000, 20, "gray")
    ch = Character(canvas, make_stats(y=345.0), "img.png",
                   lambda c: canvas.is_crash(c.item, ground), clock=Clock())
    ch.add_drop_state()
    ch.drop()
    assert State.DROP in ch.busy
    ch.drop()
    assert State.DROP not in ch.busy
    assert canvas.is_crash(ch.item, ground)
    assert ch.bottom_gap if False else ch.y + ch.height > ground.bounding_rect().top
    assert ch.y < ground.bounding_rect().top - ch.height + 0.05


def test_add_drop_state_cancels_attack_and_jump():
    ch, _ = make_character()
    ch.busy[State.ATTACK] = StateInfo()
    ch.busy[State.JUMP] = StateInfo()
    ch.add_drop_state()
    assert set(ch.busy) == {State.DROP}


def test_fast_move_state_respects_attack_progress():
    ch, _ = make_character()
    ch.busy[State.ATTACK] = StateInfo(0)
    ch.add_fast_move_state()
    assert State.FAST_MOVE not in ch.busy
    ch.busy[State.ATTACK].frame = 4
    ch.add_move_left_state()
    ch.add_fast_move_state()
    assert set(ch.busy) == {State.FAST_MOVE}


def test_fast_move_dashes_in_facing_direction():
    clock = Clock()
    ch, _ = make_character(clock=clock)
    ch.direction = False
    ch.add_fast_move_state()
    ch.fast_move()
    assert ch.x == 500.0 - ch.fast_move_speed
    assert ch.pre_fast_move == clock.now


def test_fast_move_cooldown_cancels():
    clock = Clock()
    ch, _ = make_character(clock=clock, pre_fast_move=clock.now - 10)
    ch.add_fast_move_state()
    ch.fast_move()
    assert State.FAST_MOVE not in ch.busy
    assert ch.x == 500.0


def test_fast_move_ends_after_its_frames():
    ch, _ = make_character()
    ch.add_fast_move_state()
    for _ in range(ch.fast_move_frames + 1):
        ch.fast_move()
    assert ch.busy == {}


def test_fast_move_off_ground_becomes_drop():
    ch, _ = make_character(grounded=False)
    ch.add_fast_move_state()
    ch.fast_move()
    assert set(ch.busy) == {State.DROP}


def test_attack_emits_once_at_pre_time():
    clock = Clock()
    ch, _ = make_character(clock=clock)
    hits, effects = [], []
    ch.attacked.connect(lambda area, ad: hits.append((area, ad)))
    ch.element_added.connect(effects.append)
    ch.add_attack_state()
    ch.attack()
    assert hits == []
    ch.attack()
    assert len(hits) == 1
    area, ad = hits[0]
    assert ad == ch.ad
    assert area not in ch.canvas
    assert area.rect.left == ch.x
    assert area.rect.width == ch.attack_width + ch.width
    assert len(effects) == 1 and isinstance(effects[0], PlayerAttackEffect)
    assert ch.pre_attack == clock.now
    for _ in range(ch.attack_frames):
        ch.attack()
    assert len(hits) == 1
    assert State.ATTACK not in ch.busy


def test_attack_to_the_left_covers_left_side():
    ch, _ = make_character(attack_pre_time=0)
    ch.direction = False
    areas = []
    ch.attacked.connect(lambda area, ad: areas.append(area))
    ch.add_attack_state()
    ch.attack()
    assert areas[0].rect.left == ch.x - ch.attack_width


def test_attack_cooldown_cancels():
    clock = Clock()
    ch, _ = make_character(clock=clock, pre_attack=clock.now - 100)
    hits = []
    ch.attacked.connect(lambda area, ad: hits.append(ad))
    ch.add_attack_state()
    ch.attack()
    assert State.ATTACK not in ch.busy
    assert hits == []


def test_receive_attack_damages_and_reports():
    canvas = Canvas(1000, 600)
    ch, _ = make_character(canvas, health=4.0)
    elements, deaths = [], []
    ch.element_added.connect(elements.append)
    ch.died.connect(deaths.append)
    area = canvas.create_rect(ch.x, ch.y, 10, 10)
    assert ch.receive_attack(area, 3.0) is True
    assert ch.health == 1.0
    assert isinstance(elements[0], HitNum)
    assert elements[0].item.text == "-3"
    assert deaths == []
    ch.receive_attack(area, 3.0)
    assert ch.health == 0.0
    assert deaths == [ch]
    assert ch.receive_attack(area, 3.0) is False


def test_receive_attack_ignored_when_missing_or_dashing():
    canvas = Canvas(1000, 600)
    ch, _ = make_character(canvas)
    far = canvas.create_rect(0, 0, 10, 10)
    assert ch.receive_attack(far, 5.0) is False
    near = canvas.create_rect(ch.x, ch.y, 10, 10)
    ch.busy[State.FAST_MOVE] = StateInfo()
    assert ch.receive_attack(near, 5.0) is False
    assert ch.health == ch.max_health


def test_destroy_removes_items():
    ch, _ = make_character()
    ch.destroy()
    assert len(ch.canvas) == 0