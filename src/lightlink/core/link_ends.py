"""Link end roles and the ordered link-end collection of an observable."""

from collections.abc import Mapping
from enum import IntEnum
from typing import NamedTuple

from lightlink.exceptions import LinkEndTopologyError


class LinkEndType(IntEnum):
    """Role of a link end, valued in transmission order."""

    TRANSMITTER = 0
    REFLECTOR1 = 1
    REFLECTOR2 = 2
    REFLECTOR3 = 3
    REFLECTOR4 = 4
    RETRANSMITTER = 5
    RECEIVER = 6

    @property
    def is_intermediate(self) -> bool:
        """Whether the role sits between the transmitter and the receiver."""
        return self not in (LinkEndType.TRANSMITTER, LinkEndType.RECEIVER)

    @property
    def is_reflector(self) -> bool:
        """Whether the role is one of the numbered reflectors."""
        return LinkEndType.REFLECTOR1 <= self <= LinkEndType.REFLECTOR4


class LinkEndId(NamedTuple):
    """Body and reference point of a link end.

    An empty reference point denotes the body centre.
    """

    body: str
    reference_point: str = ""

    @property
    def is_ground_station(self) -> bool:
        """Whether the link end is a station fixed on its body."""
        return self.reference_point != ""

    def __str__(self):
        if self.reference_point:
            return f"{self.body}/{self.reference_point}"
        return self.body


def as_link_end_id(value) -> LinkEndId:
    """Coerce a body name or (body, point) pair to a ``LinkEndId``."""
    if isinstance(value, LinkEndId):
        return value
    if isinstance(value, str):
        return LinkEndId(value)
    body, reference_point = value
    return LinkEndId(body, reference_point or "")


class LinkEnds(Mapping):
    """Read-only mapping from role to link end, iterated in transmission order.

    Exactly one transmitter and one receiver are required. Any number of
    reflectors or a retransmitter may sit in between.
    """

    def __init__(self, link_ends):
        if isinstance(link_ends, LinkEnds):
            link_ends = dict(link_ends.items())
        ordered = sorted(
            ((LinkEndType(role), as_link_end_id(end)) for role, end in link_ends.items()),
            key=lambda item: item[0],
        )
        self._ends = dict(ordered)
        if LinkEndType.TRANSMITTER not in self._ends:
            raise LinkEndTopologyError("Link ends must contain a transmitter.")
        if LinkEndType.RECEIVER not in self._ends:
            raise LinkEndTopologyError("Link ends must contain a receiver.")
        reflectors = [role for role in self._ends if role.is_reflector]
        if reflectors and reflectors[-1] != len(reflectors):
            raise LinkEndTopologyError(
                f"Reflectors must be numbered from 1 without gaps, got "
                f"{', '.join(role.name for role in reflectors)}."
            )

    def __getitem__(self, role):
        return self._ends[role]

    def __iter__(self):
        return iter(self._ends)

    def __len__(self):
        return len(self._ends)

    def __hash__(self):
        return hash(tuple(self._ends.items()))

    def __eq__(self, other):
        if isinstance(other, LinkEnds):
            return self._ends == other._ends
        return NotImplemented

    def __repr__(self):
        parts = ", ".join(f"{role.name.lower()}={end}" for role, end in self._ends.items())
        return f"LinkEnds({parts})"

    @property
    def roles(self) -> tuple[LinkEndType, ...]:
        """Roles in transmission order."""
        return tuple(self._ends)

    @property
    def ids(self) -> tuple[LinkEndId, ...]:
        """Link end identifiers in transmission order."""
        return tuple(self._ends.values())

    @property
    def intermediate_roles(self) -> tuple[LinkEndType, ...]:
        """Reflector/retransmitter roles in transmission order."""
        return tuple(role for role in self._ends if role.is_intermediate)

    @property
    def number_of_legs(self) -> int:
        """Number of transmitter -> receiver hops."""
        return len(self._ends) - 1

    def index_of(self, role: LinkEndType) -> int:
        """Position of a role in transmission order."""
        return self.roles.index(role)

    def legs(self) -> list[tuple[LinkEndType, LinkEndType]]:
        """Consecutive (transmitting role, receiving role) pairs."""
        roles = self.roles
        return list(zip(roles[:-1], roles[1:]))
