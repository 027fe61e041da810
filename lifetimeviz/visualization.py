"""Per-variable timelines of ownership events and the states derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from lifetimeviz.model import (
    Event,
    EventKind,
    ExternalEvent,
    ExternalEventKind,
    Function,
    MutRef,
    Owner,
    ResourceAccessPoint,
    State,
    StateKind,
    StaticRef,
    Struct,
    VisualizationError,
)

_OUT_OF_SCOPE = State(StateKind.OUT_OF_SCOPE)
_FULL = State(StateKind.FULL_PRIVILEGE)
_INVALID = State(StateKind.INVALID)

# Borrowing from, or returning to, a function is never valid.
_FUNCTION_PEER_INVALID = frozenset(
    {
        EventKind.STATIC_BORROW,
        EventKind.MUTABLE_BORROW,
        EventKind.STATIC_DIE,
        EventKind.MUTABLE_DIE,
    }
)


@dataclass
class Timeline:
    """Events of one resource access point, in the order they were recorded."""

    resource_access_point: ResourceAccessPoint
    history: list[tuple[int, Event]] = field(default_factory=list)


@dataclass
class StructsInfo:
    """Struct boxes as (owner hash, owner column x, right-most member column x)."""

    structs: list[tuple[int, int, int]] = field(default_factory=list)


@dataclass
class VisualizationData:
    """Everything a frontend needs: timelines keyed by hash, plus the raw events.

    ``timelines`` and ``event_line_map`` are kept ordered by key.
    """

    timelines: dict[int, Timeline] = field(default_factory=dict)
    external_events: list[tuple[int, ExternalEvent]] = field(default_factory=list)
    preprocess_external_events: list[tuple[int, ExternalEvent]] = field(
        default_factory=list
    )
    event_line_map: dict[int, list[ExternalEvent]] = field(default_factory=dict)

    def get_name_from_hash(self, key: int) -> Optional[str]:
        """Name of the access point with this hash, or None if unknown."""
        timeline = self.timelines.get(key)
        return timeline.resource_access_point.name if timeline else None

    def is_mut(self, key: int) -> bool:
        """Whether the access point with this hash is declared mutable."""
        return self.timelines[key].resource_access_point.is_mut

    def is_mutref(self, key: int) -> bool:
        """Whether the access point with this hash is a mutable reference."""
        return self.timelines[key].resource_access_point.is_mutref()

    def calc_state(
        self, previous_state: State, event: Event, event_line: int, key: int
    ) -> State:
        """State of the access point ``key`` right after ``event``."""
        kind = event.kind
        prev = previous_state.kind
        if kind in _FUNCTION_PEER_INVALID and isinstance(event.peer, Function):
            return _INVALID

        if prev is StateKind.INVALID:
            return _INVALID

        if prev is StateKind.OUT_OF_SCOPE:
            if kind in (EventKind.ACQUIRE, EventKind.COPY, EventKind.MUTABLE_BORROW):
                return _FULL
            if kind is EventKind.STATIC_BORROW:
                return _partial(1, frozenset({event.peer}))
            if kind is EventKind.INIT_REF_PARAM:
                param = event.peer
                if isinstance(param, Function):
                    raise VisualizationError(
                        "Cannot initialize function as as valid parameter!"
                    )
                if isinstance(param, StaticRef):
                    return _partial(1, frozenset({param}))
                return _FULL

        elif prev is StateKind.FULL_PRIVILEGE:
            if kind is EventKind.MOVE:
                return State(
                    StateKind.RESOURCE_MOVED, move_to=event.peer, move_at_line=event_line
                )
            if kind is EventKind.MUTABLE_LEND:
                if self.is_mut(key) or self.is_mutref(key):
                    return State(StateKind.REVOKED_PRIVILEGE, lent_to=event.peer)
                return _INVALID
            if kind is EventKind.MUTABLE_DIE:
                return _OUT_OF_SCOPE
            if kind in (EventKind.ACQUIRE, EventKind.COPY):
                return _FULL if self.is_mut(key) else _INVALID
            if kind in (EventKind.OWNER_GO_OUT_OF_SCOPE, EventKind.REF_GO_OUT_OF_SCOPE):
                return _OUT_OF_SCOPE
            if kind is EventKind.STATIC_LEND:
                if event.peer is None:
                    raise VisualizationError("cannot lend immutably to nothing")
                return _partial(1, frozenset({event.peer}))

        elif prev is StateKind.RESOURCE_MOVED:
            if kind is EventKind.ACQUIRE:
                if self.is_mut(key):
                    return _FULL
                raise VisualizationError(
                    f"Immutable variable {self.get_name_from_hash(key)} "
                    "cannot reacquire resources!"
                )

        elif prev is StateKind.PARTIAL_PRIVILEGE:
            if kind is EventKind.MUTABLE_LEND:
                return _INVALID
            if kind is EventKind.STATIC_LEND:
                if event.peer is None:
                    raise VisualizationError("cannot lend immutably to nothing")
                return _partial(
                    previous_state.borrow_count + 1,
                    previous_state.borrow_to | {event.peer},
                )
            if kind is EventKind.STATIC_DIE:
                return _OUT_OF_SCOPE
            if kind is EventKind.STATIC_REACQUIRE:
                remaining = previous_state.borrow_count - 1
                if remaining == 0:
                    return _FULL
                if event.peer is None or event.peer not in previous_state.borrow_to:
                    raise VisualizationError(
                        "reacquired from a reference that did not borrow"
                    )
                return _partial(remaining, previous_state.borrow_to - {event.peer})
            if kind in (EventKind.OWNER_GO_OUT_OF_SCOPE, EventKind.REF_GO_OUT_OF_SCOPE):
                return _OUT_OF_SCOPE

        elif prev is StateKind.REVOKED_PRIVILEGE:
            if kind is EventKind.MUTABLE_REACQUIRE:
                return _FULL

        if kind is EventKind.DUPLICATE:
            return previous_state
        return _INVALID

    def get_states(self, key: int) -> list[tuple[int, int, State]]:
        """(start line, end line, state) spans for the access point ``key``."""
        states: list[tuple[int, int, State]] = []
        previous_line = 1
        state = _OUT_OF_SCOPE
        for line_number, event in self.timelines[key].history:
            states.append((previous_line, line_number, state))
            state = self.calc_state(state, event, line_number, key)
            previous_line = line_number
        states.append((previous_line, previous_line, state))
        return states

    def get_state(self, key: int, line_number: int) -> Optional[State]:
        """Placeholder state lookup: OUT_OF_SCOPE for a known hash, else None."""
        return _OUT_OF_SCOPE if key in self.timelines else None

    def append_external_event(self, event: ExternalEvent, line_number: int) -> None:
        """Record an event before line numbers are adjusted for stacked arrows."""
        self.preprocess_external_events.append((line_number, event))
        source, target = event.endpoints()
        if source is None or target is None:
            return
        if isinstance(source, Function) or isinstance(target, Function):
            return
        if line_number in self.event_line_map:
            self.event_line_map[line_number].append(event)
        else:
            self.event_line_map[line_number] = [event]
            self.event_line_map = dict(sorted(self.event_line_map.items()))

    def _append_event(
        self, rap: ResourceAccessPoint, event: Event, line_number: int
    ) -> None:
        if rap.hash not in self.timelines:
            self.timelines[rap.hash] = Timeline(rap)
            self.timelines = dict(sorted(self.timelines.items()))
        self.timelines[rap.hash].history.append((line_number, event))

    def _maybe_append(
        self, rap: Optional[ResourceAccessPoint], event: Event, line_number: int
    ) -> None:
        if rap is not None:
            self._append_event(rap, event, line_number)

    def append_processed_external_event(
        self, event: ExternalEvent, line_number: int
    ) -> None:
        """Record an event and the per-timeline events it implies."""
        self.external_events.append((line_number, event))
        kind = event.kind
        source, target = event.source, event.target
        add = self._maybe_append
        line = line_number

        if kind is ExternalEventKind.MOVE:
            add(target, Event(EventKind.ACQUIRE, source), line)
            add(source, Event(EventKind.MOVE, target), line)
        elif kind is ExternalEventKind.BIND:
            add(target, Event(EventKind.ACQUIRE, source), line)
            add(source, Event(EventKind.DUPLICATE, target), line)
        elif kind is ExternalEventKind.COPY:
            add(target, Event(EventKind.COPY, source), line)
            add(source, Event(EventKind.DUPLICATE, target), line)
        elif kind is ExternalEventKind.STATIC_BORROW:
            add(source, Event(EventKind.STATIC_LEND, target), line)
            if source is not None:
                add(target, Event(EventKind.STATIC_BORROW, source), line)
        elif kind is ExternalEventKind.STATIC_DIE:
            add(target, Event(EventKind.STATIC_REACQUIRE, source), line)
            add(source, Event(EventKind.STATIC_DIE, target), line)
        elif kind is ExternalEventKind.MUTABLE_BORROW:
            add(source, Event(EventKind.MUTABLE_LEND, target), line)
            if source is not None:
                add(target, Event(EventKind.MUTABLE_BORROW, source), line)
        elif kind is ExternalEventKind.MUTABLE_DIE:
            add(target, Event(EventKind.MUTABLE_REACQUIRE, source), line)
            add(source, Event(EventKind.MUTABLE_DIE, target), line)
        elif kind is ExternalEventKind.PASS_BY_STATIC_REFERENCE:
            if source is None:
                raise VisualizationError(
                    "Must pass a function to PassByStaticReference.to!"
                )
            add(source, Event(EventKind.STATIC_LEND, target), line)
            add(target, Event(EventKind.STATIC_BORROW, source), line)
            add(source, Event(EventKind.STATIC_REACQUIRE, target), line)
            add(target, Event(EventKind.STATIC_DIE, source), line)
        elif kind is ExternalEventKind.PASS_BY_MUTABLE_REFERENCE:
            if source is None:
                raise VisualizationError(
                    "Must pass a function to PassByMutableReference.to!"
                )
            add(source, Event(EventKind.MUTABLE_LEND, target), line)
            add(target, Event(EventKind.MUTABLE_BORROW, source), line)
            add(source, Event(EventKind.MUTABLE_REACQUIRE, target), line)
            add(target, Event(EventKind.MUTABLE_DIE, source), line)
        elif kind is ExternalEventKind.INIT_REF_PARAM:
            param = event.subject
            add(param, Event(EventKind.INIT_REF_PARAM, param), line)
        elif kind is ExternalEventKind.GO_OUT_OF_SCOPE:
            subject = event.subject
            if isinstance(subject, (Owner, Struct)):
                add(subject, Event(EventKind.OWNER_GO_OUT_OF_SCOPE), line)
            elif isinstance(subject, (MutRef, StaticRef)):
                add(subject, Event(EventKind.REF_GO_OUT_OF_SCOPE), line)
            else:
                raise VisualizationError(
                    "Functions do not go out of scope! We do not expect to see "
                    f'"{subject.name}" here.'
                )


def _partial(count: int, borrow_to: frozenset[ResourceAccessPoint]) -> State:
    return State(StateKind.PARTIAL_PRIVILEGE, borrow_count=count, borrow_to=borrow_to)