"""Styles of the vertical lines drawn for owners and references."""

from enum import Enum, auto


class LineStyle(Enum):
    """Which kind of line is drawn."""

    OWNER_LINE = auto()
    REF_VALUE_LINE = auto()
    REF_DATA_LINE = auto()


class OwnerLine(Enum):
    """Access an owner has to its resource."""

    SOLID = auto()  # can assign to, write and read
    HOLLOW = auto()  # can only read
    DOTTED = auto()  # temporarily no access (mutably borrowed away)
    EMPTY = auto()  # no access anymore (moved)


class RefValueLine(Enum):
    """Whether a reference can be pointed somewhere else."""

    REASSIGNABLE = auto()
    NOT_REASSIGNABLE = auto()


class RefDataLine(Enum):
    """Access a reference has to the data it points to."""

    SOLID = auto()  # can read and write
    HOLLOW = auto()  # can only read
    DOTTED = auto()  # borrowed by another mutable reference
    EMPTY = auto()  # no access anymore (after last use)