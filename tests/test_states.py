from gatebrawl.states import MoveStateInfo, State, StateInfo


def test_state_order_matches_processing_order():
    busy = {
        State.FAST_MOVE: StateInfo(),
        State.DROP: StateInfo(),
        State.MOVE_LEFT: MoveStateInfo(0, 2.0),
        State.ATTACK: StateInfo(),
    }
    assert sorted(busy) == [
        State.MOVE_LEFT,
        State.ATTACK,
        State.DROP,
        State.FAST_MOVE,
    ]
    assert [info.frame for _, info in sorted(busy.items())] == [0, 0, 0, 0]
    assert list(State) == sorted(State)


def test_state_info_starts_at_frame_zero():
    info = StateInfo()
    assert info.frame == 0
    info.frame += 1
    assert info.frame == 1


def test_move_state_info_carries_speed():
    info = MoveStateInfo(0, 5.0)
    assert isinstance(info, StateInfo)
    assert (info.frame, info.speed) == (0, 5.0)


def test_dict_keyed_by_state_iterates_in_order():
    busy = {State.DROP: StateInfo(), State.MOVE_RIGHT: MoveStateInfo(0, 3.0)}
    assert sorted(busy) == [State.MOVE_RIGHT, State.DROP]