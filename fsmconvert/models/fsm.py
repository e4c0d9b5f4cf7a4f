"""FSM capabilities and the concrete LLFSM graph model.

Two independent capabilities are defined here:

- ``FSM``: ordered states, ordered transitions, initial state and the
  ``transitions_from`` query.
- ``Suspensible``: an optional suspend state.

``SuspensibleFSM`` is simply a type that provides both. ``LLFSM`` is the
concrete machine graph used by the bindings and the exporter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from fsmconvert.models.state import (
    Expression,
    State,
    StateID,
    StateName,
    Transition,
    TransitionID,
    state_dictionary,
    transition_dictionary,
)

# Placeholder used when a machine has no suspend state
NO_SUSPEND_STATE = "(none)"


class FSM(ABC):
    """
    Capability of any finite-state machine representation.

    Implementations provide ``states`` (ordered list of StateID) and
    ``transitions`` (ordered list of TransitionID). Both are mutated by the
    owner of the machine only.
    """

    states: list[StateID]
    transitions: list[TransitionID]

    @abstractmethod
    def transitions_from(self, state_id: StateID) -> list[TransitionID]:
        """Return the transitions leaving ``state_id`` in their original order."""

    def get_initial_state(self) -> Optional[StateID]:
        """Return the initial state: the first state, or None if there is none."""
        if not self.states:
            return None
        return self.states[0]

    def set_initial_state(self, state_id: StateID) -> None:
        """
        Set the initial state.

        An empty machine gets ``state_id`` appended as its sole state;
        otherwise only ``states[0]`` is replaced and the rest of the
        sequence is left unchanged.
        """
        if not self.states:
            self.states.append(state_id)
        else:
            self.states[0] = state_id

    def describe_state(self, state_id: StateID) -> str:
        """Describe a single state (its identifier unless overridden)."""
        return str(state_id)

    @property
    def description(self) -> str:
        return "\n".join(self.describe_state(s) for s in self.states)

    def __str__(self) -> str:
        return self.description


class Suspensible(ABC):
    """Capability of machines that may carry an explicit suspend state."""

    suspend_state: Optional[StateID]

    @property
    def is_suspensible(self) -> bool:
        return self.suspend_state is not None

    def describe_suspend_state(self) -> str:
        if self.suspend_state is None:
            return NO_SUSPEND_STATE
        return str(self.suspend_state)


class SuspensibleFSM(FSM, Suspensible):
    """A machine providing both the FSM and the Suspensible capability."""

    @property
    def description(self) -> str:
        lines = [self.describe_state(s) for s in self.states]
        lines.append(self.describe_suspend_state())
        return "\n".join(lines)


@dataclass
class LLFSM(SuspensibleFSM):
    """
    A logic-labelled finite-state machine graph.

    States and transitions are kept as ordered ID sequences with maps
    from ID to the full State/Transition record.
    """

    states: list[StateID] = field(default_factory=list)
    transitions: list[TransitionID] = field(default_factory=list)
    state_map: dict[StateID, State] = field(default_factory=dict)
    transition_map: dict[TransitionID, Transition] = field(default_factory=dict)
    suspend_state: Optional[StateID] = None

    @classmethod
    def from_graph(
        cls,
        states: list[State],
        transitions: list[Transition],
        suspend_state: Optional[StateID] = None,
    ) -> LLFSM:
        """Build a machine from State and Transition records."""
        return cls(
            states=[s.id for s in states],
            transitions=[t.id for t in transitions],
            state_map=state_dictionary(states),
            transition_map=transition_dictionary(transitions),
            suspend_state=suspend_state,
        )

    def transitions_from(self, state_id: StateID) -> list[TransitionID]:
        result = []
        for tid in self.transitions:
            transition = self.transition_map.get(tid)
            if transition is not None and transition.source == state_id:
                result.append(tid)
        return result

    def state(self, state_id: StateID) -> Optional[State]:
        return self.state_map.get(state_id)

    def transition(self, transition_id: TransitionID) -> Optional[Transition]:
        return self.transition_map.get(transition_id)

    def state_name(self, state_id: StateID) -> Optional[StateName]:
        state = self.state_map.get(state_id)
        return state.name if state else None

    @property
    def state_names(self) -> list[StateName]:
        """Names of all states in order (the ID string for unnamed ones)."""
        return [self.state_name(s) or str(s) for s in self.states]

    def state_index(self, state_id: Optional[StateID]) -> Optional[int]:
        """Position of ``state_id`` in the state sequence, if present."""
        if state_id is None or state_id not in self.states:
            return None
        return self.states.index(state_id)

    def set_name(self, name: StateName, state_id: StateID) -> None:
        """Rename an existing state, or append a new state with that name."""
        state = self.state_map.get(state_id)
        if state is None:
            self.states.append(state_id)
        self.state_map[state_id] = State(name=name, id=state_id)

    def label(self, transition_id: TransitionID) -> Optional[Expression]:
        transition = self.transition_map.get(transition_id)
        return transition.label if transition else None

    def set_label(self, label: Expression, transition_id: TransitionID) -> None:
        """
        Relabel an existing transition.

        An unknown transition ID is appended as a new transition leaving the
        last state; an empty machine first gets an ``Initial`` state.
        """
        transition = self.transition_map.get(transition_id)
        if transition is not None:
            self.transition_map[transition_id] = Transition(
                source=transition.source,
                label=label,
                target=transition.target,
                id=transition_id,
            )
            return

        if self.states:
            source = self.states[-1]
        else:
            initial = State(name="Initial")
            self.states.append(initial.id)
            self.state_map[initial.id] = initial
            source = initial.id

        self.transitions.append(transition_id)
        self.transition_map[transition_id] = Transition(
            source=source,
            label=label,
            id=transition_id,
        )

    def describe_state(self, state_id: StateID) -> str:
        state = self.state_map.get(state_id)
        return state.description if state else str(state_id)

    def describe_suspend_state(self) -> str:
        if self.suspend_state is None:
            return NO_SUSPEND_STATE
        return self.describe_state(self.suspend_state)
