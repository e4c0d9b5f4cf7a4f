"""A machine read from an on-disk bundle."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from fsmconvert.bindings import LanguageBinding, language_binding_for, machine_name
from fsmconvert.models import (
    LLFSM,
    CBoilerplate,
    State,
    StateID,
    StateLayout,
    StateName,
    Transition,
)
from fsmconvert.models.layout import STATES_FILE
from fsmconvert.utils.logging import get_logger, machine_context

logger = get_logger("machine")


def read_state_names(path: Path) -> list[StateName]:
    """
    Read the state names of a bundle.

    Each non-blank line of the ``States`` file names one state, in order.

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not UTF-8
    """
    content = (Path(path) / STATES_FILE).read_text(encoding="utf-8")
    return [line.strip() for line in content.splitlines() if line.strip()]


def read_transitions(
    path: Path,
    states: Sequence[State],
    state: State,
    binding: LanguageBinding,
) -> list[Transition]:
    """Read the transitions leaving ``state`` through ``binding``."""
    count = binding.number_of_transitions(path, state.name)
    return [
        Transition(
            source=state.id,
            label=binding.expression_of_transition(path, state.name, i),
            target=binding.target_of_transition(path, states, state.name, i),
        )
        for i in range(count)
    ]


@dataclass
class Machine:
    """
    A finite-state machine together with what its bundle carries besides
    the graph: its language, boilerplate and editor layout.
    """

    name: str
    language: LanguageBinding
    llfsm: LLFSM = field(default_factory=LLFSM)
    boilerplate: CBoilerplate = field(default_factory=CBoilerplate)
    state_boilerplate: dict[StateID, CBoilerplate] = field(default_factory=dict)
    state_layout: dict[StateID, StateLayout] = field(default_factory=dict)
    window_layout: Optional[bytes] = None

    @classmethod
    def load(
        cls,
        path: Path,
        binding: Optional[LanguageBinding] = None,
    ) -> Machine:
        """
        Read a machine from the bundle at ``path``.

        Args:
            path: Machine bundle directory
            binding: Binding to read with (default: the bundle's language)

        Returns:
            The loaded Machine

        Raises:
            OSError: If the bundle's ``States`` file cannot be read
            UnicodeDecodeError: If the ``States`` file is not UTF-8
        """
        path = Path(path)
        with machine_context(machine_name(path)):
            return cls._load(path, binding or language_binding_for(path))

    @classmethod
    def _load(cls, path: Path, language: LanguageBinding) -> Machine:
        name = machine_name(path)

        states = [State(name=n) for n in read_state_names(path)]
        transitions: list[Transition] = []
        for state in states:
            transitions.extend(read_transitions(path, states, state, language))

        llfsm = LLFSM.from_graph(
            states,
            transitions,
            suspend_state=language.suspend_state(path, states),
        )

        machine = cls(
            name=name,
            language=language,
            llfsm=llfsm,
            boilerplate=language.boilerplate(path),
            state_boilerplate={
                s.id: language.state_boilerplate(path, s.name) for s in states
            },
            state_layout={
                s.id: StateLayout.grid(i) for i, s in enumerate(states)
            },
            window_layout=language.window_layout(path),
        )

        logger.info(
            "machine_loaded",
            path=str(path),
            binding=language.name,
            states=len(llfsm.states),
            transitions=len(llfsm.transitions),
            suspensible=llfsm.is_suspensible,
        )
        return machine

    @property
    def states(self) -> list[State]:
        """States in order."""
        return [self.llfsm.state_map[s] for s in self.llfsm.states if s in self.llfsm.state_map]

    def boilerplate_for(self, state_id: StateID) -> CBoilerplate:
        """Boilerplate of a state (empty if none was loaded)."""
        return self.state_boilerplate.get(state_id) or CBoilerplate()

    def to_dict(self) -> dict:
        """Summary suitable for JSON output."""
        return {
            "name": self.name,
            "language": self.language.name,
            "states": self.llfsm.state_names,
            "transitions": len(self.llfsm.transitions),
            "suspend_state": self.llfsm.state_name(self.llfsm.suspend_state)
            if self.llfsm.suspend_state is not None
            else None,
        }
