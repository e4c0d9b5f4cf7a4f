"""States and transitions: the nodes and edges of a machine graph."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import NewType, Optional

StateID = NewType("StateID", uuid.UUID)
TransitionID = NewType("TransitionID", uuid.UUID)
StateName = str
Expression = str


def new_state_id() -> StateID:
    """Create a fresh, unique state identifier."""
    return StateID(uuid.uuid4())


def new_transition_id() -> TransitionID:
    """Create a fresh, unique transition identifier."""
    return TransitionID(uuid.uuid4())


@dataclass(frozen=True)
class State:
    """A named state of a machine."""

    name: StateName
    id: StateID = field(default_factory=new_state_id)

    @property
    def description(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class Transition:
    """
    A directed edge leaving ``source``.

    ``target`` is ``None`` when the persisted target could not be resolved
    to a known state (a dangling or external reference).
    """

    source: StateID
    label: Expression = ""
    target: Optional[StateID] = None
    id: TransitionID = field(default_factory=new_transition_id)

    @property
    def description(self) -> str:
        target = self.target if self.target is not None else "(none)"
        return f"( {self.source} -- {self.label} --> {target})"

    def __str__(self) -> str:
        return self.description


def state_dictionary(states: list[State]) -> dict[StateID, State]:
    """Map each state's ID to the state."""
    return {state.id: state for state in states}


def transition_dictionary(transitions: list[Transition]) -> dict[TransitionID, Transition]:
    """Map each transition's ID to the transition."""
    return {transition.id: transition for transition in transitions}
