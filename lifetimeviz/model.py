"""Resource access points, ownership events and the states they lead to."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar, Optional

from lifetimeviz import hover_messages


class VisualizationError(Exception):
    """Raised when the recorded events describe an impossible timeline."""


class ResourceAccessPoint:
    """Anything that can hold access to a resource: owners, references, functions."""

    name: str
    hash: int
    is_mut: bool

    def is_ref(self) -> bool:
        """True for references, both mutable and immutable."""
        return False

    def is_mutref(self) -> bool:
        """True only for mutable references."""
        return False

    def is_struct_group(self) -> bool:
        """True for struct instances and struct members."""
        return False

    def is_struct(self) -> bool:
        """True for a struct instance that is not itself a member."""
        return False

    def is_member(self) -> bool:
        """True for a struct member."""
        return False

    def owner_hash(self) -> int:
        """Hash of the struct owning this point, or its own hash otherwise."""
        return self.hash


@dataclass(frozen=True)
class Owner(ResourceAccessPoint):
    """A value that is not a reference: ``let a = 42;`` or ``let mut a = 42;``."""

    name: str
    hash: int
    is_mut: bool = False


@dataclass(frozen=True)
class Struct(ResourceAccessPoint):
    """A struct instance or one of its members."""

    name: str
    hash: int
    owner: int
    is_mut: bool = False
    member: bool = False

    def is_struct_group(self) -> bool:
        return True

    def is_struct(self) -> bool:
        return not self.member

    def is_member(self) -> bool:
        return self.member

    def owner_hash(self) -> int:
        return self.owner


@dataclass(frozen=True)
class MutRef(ResourceAccessPoint):
    """A reference of type ``&mut T``."""

    name: str
    hash: int
    is_mut: bool = False

    def is_ref(self) -> bool:
        return True

    def is_mutref(self) -> bool:
        return True


@dataclass(frozen=True)
class StaticRef(ResourceAccessPoint):
    """A reference of type ``&T``."""

    name: str
    hash: int
    is_mut: bool = False

    def is_ref(self) -> bool:
        return True


@dataclass(frozen=True)
class Function(ResourceAccessPoint):
    """A function that resources are passed to or returned from."""

    name: str
    hash: int
    is_mut: ClassVar[bool] = False


class ExternalEventKind(Enum):
    BIND = auto()
    COPY = auto()
    MOVE = auto()
    STATIC_BORROW = auto()
    MUTABLE_BORROW = auto()
    STATIC_DIE = auto()
    MUTABLE_DIE = auto()
    PASS_BY_STATIC_REFERENCE = auto()
    PASS_BY_MUTABLE_REFERENCE = auto()
    GO_OUT_OF_SCOPE = auto()
    INIT_REF_PARAM = auto()


_SUBJECT_KINDS = frozenset(
    {ExternalEventKind.GO_OUT_OF_SCOPE, ExternalEventKind.INIT_REF_PARAM}
)


@dataclass(frozen=True)
class ExternalEvent:
    """An event as reported for a source line.

    Transfer kinds use ``source`` and ``target``; GO_OUT_OF_SCOPE and
    INIT_REF_PARAM use ``subject``.
    """

    kind: ExternalEventKind
    source: Optional[ResourceAccessPoint] = None
    target: Optional[ResourceAccessPoint] = None
    subject: Optional[ResourceAccessPoint] = None

    def __post_init__(self) -> None:
        if self.kind in _SUBJECT_KINDS:
            if self.subject is None:
                raise ValueError(f"{self.kind.name} requires a subject")
            if self.source is not None or self.target is not None:
                raise ValueError(f"{self.kind.name} takes no source or target")
        elif self.subject is not None:
            raise ValueError(f"{self.kind.name} takes no subject")

    def endpoints(
        self,
    ) -> tuple[Optional[ResourceAccessPoint], Optional[ResourceAccessPoint]]:
        """Return (source, target); both None for events that move nothing."""
        if self.kind in _SUBJECT_KINDS:
            return None, None
        return self.source, self.target


class EventKind(Enum):
    ACQUIRE = auto()
    DUPLICATE = auto()
    COPY = auto()
    MOVE = auto()
    MUTABLE_LEND = auto()
    MUTABLE_BORROW = auto()
    MUTABLE_DIE = auto()
    MUTABLE_REACQUIRE = auto()
    STATIC_LEND = auto()
    STATIC_BORROW = auto()
    STATIC_DIE = auto()
    STATIC_REACQUIRE = auto()
    OWNER_GO_OUT_OF_SCOPE = auto()
    REF_GO_OUT_OF_SCOPE = auto()
    INIT_REF_PARAM = auto()


_FROM_KINDS = frozenset(
    {
        EventKind.ACQUIRE,
        EventKind.COPY,
        EventKind.MUTABLE_BORROW,
        EventKind.MUTABLE_REACQUIRE,
        EventKind.STATIC_BORROW,
        EventKind.STATIC_REACQUIRE,
    }
)
_TO_KINDS = frozenset(
    {
        EventKind.DUPLICATE,
        EventKind.MOVE,
        EventKind.MUTABLE_LEND,
        EventKind.MUTABLE_DIE,
        EventKind.STATIC_LEND,
        EventKind.STATIC_DIE,
    }
)
_PEER_REQUIRED = frozenset(
    {EventKind.MUTABLE_BORROW, EventKind.STATIC_BORROW, EventKind.INIT_REF_PARAM}
)
_NO_PEER = frozenset({EventKind.OWNER_GO_OUT_OF_SCOPE, EventKind.REF_GO_OUT_OF_SCOPE})

_EVENT_LABELS = {
    EventKind.ACQUIRE: "",
    EventKind.DUPLICATE: "Copying resource",
    EventKind.COPY: "Copying resource from some variable",
    EventKind.MOVE: "Moving resource",
    EventKind.MUTABLE_LEND: "Mutable lend",
    EventKind.MUTABLE_BORROW: "Fully borrows resource",
    EventKind.MUTABLE_DIE: "Fully returns resource",
    EventKind.MUTABLE_REACQUIRE: "Fully reacquires resource",
    EventKind.STATIC_LEND: "Partially lends resource",
    EventKind.STATIC_BORROW: "Partially borrows resource",
    EventKind.STATIC_DIE: "Partially returns resource",
    EventKind.STATIC_REACQUIRE: "Partially reacquires resource",
    EventKind.INIT_REF_PARAM: "Function parameter is initialized",
    EventKind.OWNER_GO_OUT_OF_SCOPE: "Goes out of Scope as an owner of resource",
    EventKind.REF_GO_OUT_OF_SCOPE: "Goes out of Scope as a reference to resource",
}

_Message = Callable[[str, str], str]

_EVENT_MESSAGES: dict[EventKind, _Message] = {
    EventKind.DUPLICATE: hover_messages.event_dot_copy_to,
    EventKind.STATIC_LEND: hover_messages.event_dot_static_lend,
    EventKind.MUTABLE_LEND: hover_messages.event_dot_mut_lend,
    EventKind.STATIC_DIE: hover_messages.event_dot_static_return,
    EventKind.MUTABLE_DIE: hover_messages.event_dot_mut_return,
    EventKind.ACQUIRE: hover_messages.event_dot_acquire,
    EventKind.COPY: hover_messages.event_dot_copy_from,
    EventKind.MUTABLE_BORROW: hover_messages.event_dot_mut_borrow,
    EventKind.STATIC_BORROW: hover_messages.event_dot_static_borrow,
    EventKind.STATIC_REACQUIRE: hover_messages.event_dot_static_reacquire,
    EventKind.MUTABLE_REACQUIRE: hover_messages.event_dot_mut_reacquire,
}


def _safe_message(
    message: _Message, my_name: str, target: Optional[ResourceAccessPoint]
) -> str:
    return message(my_name, target.name if target is not None else "another value")


@dataclass(frozen=True)
class Event:
    """Acquisition or release of access by one resource access point on a line.

    ``peer`` is the other party: where the resource comes from for
    acquiring kinds, where it goes for giving kinds, and the parameter
    itself for INIT_REF_PARAM.
    """

    kind: EventKind
    peer: Optional[ResourceAccessPoint] = None

    def __post_init__(self) -> None:
        if self.kind in _PEER_REQUIRED and self.peer is None:
            raise ValueError(f"{self.kind.name} requires a peer")
        if self.kind in _NO_PEER and self.peer is not None:
            raise ValueError(f"{self.kind.name} takes no peer")

    def __str__(self) -> str:
        display = _EVENT_LABELS[self.kind]
        if self.peer is not None:
            if self.kind in _FROM_KINDS:
                display = f"{display} from {self.peer.name}"
            elif self.kind in _TO_KINDS:
                display = f"{display} to {self.peer.name}"
        return display

    def print_message_with_name(self, my_name: str) -> str:
        """Tooltip text for this event's dot on my_name's timeline."""
        if self.kind is EventKind.OWNER_GO_OUT_OF_SCOPE:
            return hover_messages.event_dot_owner_go_out_out_scope(my_name)
        if self.kind is EventKind.REF_GO_OUT_OF_SCOPE:
            return hover_messages.event_dot_ref_go_out_out_scope(my_name)
        if self.kind is EventKind.INIT_REF_PARAM:
            return hover_messages.event_dot_init_param(my_name)
        if self.kind is EventKind.MOVE:
            message = (
                hover_messages.event_dot_move_to
                if self.peer is not None
                else hover_messages.event_dot_move_to_caller
            )
            return _safe_message(message, my_name, self.peer)
        return _safe_message(_EVENT_MESSAGES[self.kind], my_name, self.peer)


class StateKind(Enum):
    OUT_OF_SCOPE = "OutOfScope"
    RESOURCE_MOVED = "ResourceMoved"
    FULL_PRIVILEGE = "FullPrivilege"
    PARTIAL_PRIVILEGE = "PartialPrivilege"
    REVOKED_PRIVILEGE = "RevokedPrivilege"
    INVALID = "Invalid"


@dataclass(frozen=True)
class State:
    """Access a resource access point has immediately after a line.

    ``move_to``/``move_at_line`` describe RESOURCE_MOVED, ``borrow_count``
    and ``borrow_to`` describe PARTIAL_PRIVILEGE, and ``lent_to`` names the
    mutable borrower for REVOKED_PRIVILEGE.
    """

    kind: StateKind
    move_to: Optional[ResourceAccessPoint] = None
    move_at_line: int = 0
    borrow_count: int = 0
    borrow_to: frozenset[ResourceAccessPoint] = field(default_factory=frozenset)
    lent_to: Optional[ResourceAccessPoint] = None

    def __str__(self) -> str:
        return self.kind.value

    def print_message_with_name(self, my_name: str) -> str:
        """Tooltip text for the state line of my_name."""
        if self.kind is StateKind.OUT_OF_SCOPE:
            return hover_messages.state_out_of_scope(my_name)
        if self.kind is StateKind.RESOURCE_MOVED:
            return _safe_message(
                hover_messages.state_resource_moved, my_name, self.move_to
            )
        if self.kind is StateKind.FULL_PRIVILEGE:
            return hover_messages.state_full_privilege(my_name)
        if self.kind is StateKind.PARTIAL_PRIVILEGE:
            return hover_messages.state_partial_privilege(my_name)
        if self.kind is StateKind.REVOKED_PRIVILEGE:
            return _safe_message(
                hover_messages.state_resource_revoked, my_name, self.lent_to
            )
        return hover_messages.state_invalid(my_name)