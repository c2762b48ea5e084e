from __future__ import annotations

from enum import Enum
from typing import Generic, Mapping, TypeVar

S = TypeVar("S", bound=Enum)
E = TypeVar("E", bound=Enum)


class InvalidTransition(Exception):
    def __init__(self, entity: str, state: Enum, event: Enum) -> None:
        super().__init__(f"Cannot {event.value} a {entity} in state '{state.value}'")
        self.entity = entity
        self.state = state
        self.event = event


class TransitionTable(Generic[S, E]):
    """Closed state machine: (state, event) -> next state.

    Any pair missing from the table is an invalid transition.
    """

    def __init__(self, entity: str, table: Mapping[tuple[S, E], S]) -> None:
        self.entity = entity
        self._table = dict(table)

    def next_state(self, state: S, event: E) -> S:
        try:
            return self._table[(state, event)]
        except KeyError:
            raise InvalidTransition(self.entity, state, event) from None

    def allows(self, state: S, event: E) -> bool:
        return (state, event) in self._table
