import pytest

from lifetimeviz.model import (
    Event,
    EventKind,
    ExternalEvent,
    ExternalEventKind as K,
    Function,
    MutRef,
    Owner,
    State,
    StateKind,
    StaticRef,
    VisualizationError,
)
from lifetimeviz.visualization import StructsInfo, Timeline, VisualizationData


def transfer(kind, source, target):
    return ExternalEvent(kind, source=source, target=target)


def out_of_scope(rap):
    return ExternalEvent(K.GO_OUT_OF_SCOPE, subject=rap)


def build(events):
    data = VisualizationData()
    for line, event in events:
        data.append_processed_external_event(event, line)
    return data


def kinds(data, key):
    return [state.kind for _, _, state in data.get_states(key)]


X = Owner("x", 5, is_mut=False)
MX = Owner("mx", 6, is_mut=True)
Y = Owner("y", 7, is_mut=False)
R1 = StaticRef("r1", 8)
R2 = StaticRef("r2", 9)
F = Function("f", 2)


def test_name_lookup():
    data = build([(1, transfer(K.BIND, None, X))])
    assert data.get_name_from_hash(5) == "x"
    assert data.get_name_from_hash(99) is None


def test_is_mut_and_mutref():
    m = MutRef("m", 3, is_mut=False)
    data = build([(1, transfer(K.BIND, None, MX)), (2, transfer(K.MUTABLE_BORROW, MX, m))])
    assert data.is_mut(6) is True
    assert data.is_mutref(3) is True
    assert data.is_mutref(6) is False
    with pytest.raises(KeyError):
        data.is_mut(1000)


def test_timelines_are_ordered_by_hash():
    data = build([(1, transfer(K.BIND, None, Y)), (2, transfer(K.MOVE, Y, X))])
    assert list(data.timelines) == sorted(data.timelines)
    assert data.external_events[1][0] == 2


def test_move_records_both_sides():
    data = build([(1, transfer(K.BIND, None, X)), (2, transfer(K.MOVE, X, Y))])
    assert data.timelines[7].history == [(2, Event(EventKind.ACQUIRE, X))]
    assert data.timelines[5].history[-1] == (2, Event(EventKind.MOVE, Y))
    states = data.get_states(5)
    moved = states[-1][2]
    assert moved.kind is StateKind.RESOURCE_MOVED
    assert moved.move_to == Y
    assert moved.move_at_line == 2


def test_states_of_simple_owner():
    data = build([(1, transfer(K.BIND, None, X)), (3, out_of_scope(X))])
    states = data.get_states(5)
    assert [(s, e) for s, e, _ in states] == [(1, 1), (1, 3), (3, 3)]
    assert [st.kind for _, _, st in states] == [
        StateKind.OUT_OF_SCOPE,
        StateKind.FULL_PRIVILEGE,
        StateKind.OUT_OF_SCOPE,
    ]


def test_pass_by_mutable_reference_revokes_then_restores():
    data = build(
        [
            (1, transfer(K.BIND, None, MX)),
            (2, transfer(K.PASS_BY_MUTABLE_REFERENCE, MX, F)),
            (3, out_of_scope(MX)),
        ]
    )
    assert kinds(data, 6) == [
        StateKind.OUT_OF_SCOPE,
        StateKind.FULL_PRIVILEGE,
        StateKind.REVOKED_PRIVILEGE,
        StateKind.FULL_PRIVILEGE,
        StateKind.OUT_OF_SCOPE,
    ]
    assert [e.kind for _, e in data.timelines[2].history] == [
        EventKind.MUTABLE_BORROW,
        EventKind.MUTABLE_DIE,
    ]


def test_pass_by_static_reference_shares_then_restores():
    data = build(
        [
            (1, transfer(K.BIND, None, X)),
            (2, transfer(K.PASS_BY_STATIC_REFERENCE, X, F)),
        ]
    )
    assert kinds(data, 5)[-2:] == [StateKind.PARTIAL_PRIVILEGE, StateKind.FULL_PRIVILEGE]


def test_two_static_borrows_counted():
    data = build(
        [
            (1, transfer(K.BIND, None, X)),
            (2, transfer(K.STATIC_BORROW, X, R1)),
            (3, transfer(K.STATIC_BORROW, X, R2)),
            (4, transfer(K.STATIC_DIE, R1, X)),
        ]
    )
    states = data.get_states(5)
    after_second = states[3][2]
    assert after_second.borrow_count == 2
    assert after_second.borrow_to == frozenset({R1, R2})
    final = states[-1][2]
    assert final.kind is StateKind.PARTIAL_PRIVILEGE
    assert final.borrow_count == 1
    assert final.borrow_to == frozenset({R2})
    assert kinds(data, 8)[-1] is StateKind.OUT_OF_SCOPE


def test_calc_state_transitions():
    data = build([(1, transfer(K.BIND, None, X)), (1, transfer(K.BIND, None, MX))])
    out = State(StateKind.OUT_OF_SCOPE)
    full = State(StateKind.FULL_PRIVILEGE)
    assert data.calc_state(out, Event(EventKind.ACQUIRE), 1, 5) == full
    assert data.calc_state(full, Event(EventKind.MUTABLE_LEND, Y), 2, 5).kind is StateKind.INVALID
    revoked = data.calc_state(full, Event(EventKind.MUTABLE_LEND, Y), 2, 6)
    assert revoked.kind is StateKind.REVOKED_PRIVILEGE
    assert revoked.lent_to == Y
    assert data.calc_state(revoked, Event(EventKind.MUTABLE_REACQUIRE, Y), 3, 6) == full
    assert data.calc_state(full, Event(EventKind.ACQUIRE), 2, 5).kind is StateKind.INVALID
    assert data.calc_state(full, Event(EventKind.ACQUIRE), 2, 6) == full


def test_calc_state_duplicate_keeps_state_and_invalid_sticks():
    data = build([(1, transfer(K.BIND, None, X))])
    partial = State(StateKind.PARTIAL_PRIVILEGE, borrow_count=1, borrow_to=frozenset({R1}))
    assert data.calc_state(partial, Event(EventKind.DUPLICATE, Y), 2, 5) == partial
    invalid = State(StateKind.INVALID)
    assert data.calc_state(invalid, Event(EventKind.ACQUIRE), 2, 5) == invalid


def test_borrow_from_function_is_invalid():
    data = build([(1, transfer(K.BIND, None, X))])
    out = State(StateKind.OUT_OF_SCOPE)
    assert data.calc_state(out, Event(EventKind.STATIC_BORROW, F), 1, 5).kind is StateKind.INVALID


def test_moved_immutable_cannot_reacquire():
    data = build([(1, transfer(K.BIND, None, X)), (2, transfer(K.MOVE, X, Y))])
    moved = data.get_states(5)[-1][2]
    with pytest.raises(VisualizationError):
        data.calc_state(moved, Event(EventKind.ACQUIRE), 3, 5)


def test_init_ref_param():
    data = build([(1, ExternalEvent(K.INIT_REF_PARAM, subject=R1))])
    state = data.get_states(8)[-1][2]
    assert state.kind is StateKind.PARTIAL_PRIVILEGE
    assert state.borrow_to == frozenset({R1})
    with pytest.raises(VisualizationError):
        data.calc_state(State(StateKind.OUT_OF_SCOPE), Event(EventKind.INIT_REF_PARAM, F), 1, 8)


def test_function_going_out_of_scope_raises():
    with pytest.raises(VisualizationError):
        build([(1, out_of_scope(F))])


def test_pass_by_reference_without_source_raises():
    with pytest.raises(VisualizationError):
        build([(1, transfer(K.PASS_BY_STATIC_REFERENCE, None, F))])
    with pytest.raises(VisualizationError):
        build([(1, transfer(K.PASS_BY_MUTABLE_REFERENCE, None, F))])


def test_append_external_event_line_map():
    data = VisualizationData()
    data.append_external_event(transfer(K.MOVE, X, Y), 4)
    data.append_external_event(transfer(K.STATIC_BORROW, X, R1), 4)
    data.append_external_event(transfer(K.MOVE, F, X), 2)
    data.append_external_event(transfer(K.PASS_BY_STATIC_REFERENCE, X, F), 3)
    data.append_external_event(out_of_scope(X), 1)
    data.append_external_event(transfer(K.BIND, X, Y), 1)
    assert len(data.preprocess_external_events) == 6
    assert list(data.event_line_map) == [1, 4]
    assert data.event_line_map[4] == [transfer(K.MOVE, X, Y), transfer(K.STATIC_BORROW, X, R1)]
    assert data.timelines == {}


def test_get_state_placeholder():
    data = build([(1, transfer(K.BIND, None, X))])
    assert data.get_state(5, 1) == State(StateKind.OUT_OF_SCOPE)
    assert data.get_state(42, 1) is None


def test_containers_start_empty():
    timeline = Timeline(X)
    timeline.history.append((1, Event(EventKind.ACQUIRE)))
    assert Timeline(X).history == []
    info = StructsInfo()
    info.structs.append((1, 2, 3))
    assert StructsInfo().structs == []