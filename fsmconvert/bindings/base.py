"""Abstract base class for language bindings."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence

from fsmconvert.models import CBoilerplate, SectionName, State, StateID, StateName
from fsmconvert.models.layout import INCLUDE_PATH_FILE, WINDOW_LAYOUT_FILE
from fsmconvert.utils.logging import get_logger

logger = get_logger("bindings.base")

# Guard used when a transition's expression file cannot be read
DEFAULT_EXPRESSION = "true"

MACHINE_SUFFIX = ".machine"


def machine_name(path: Path) -> str:
    """Name of the machine stored in the bundle at ``path``."""
    return Path(path).stem


def resolve_state(states: Sequence[State], index: Optional[int]) -> Optional[StateID]:
    """Resolve a persisted state index against the loaded states."""
    if index is None or not 0 <= index < len(states):
        return None
    return states[index].id


def first_number(pattern: re.Pattern[str], content: Optional[str]) -> Optional[int]:
    """Return the first captured integer of ``pattern`` in ``content``."""
    if content is None:
        return None
    match = pattern.search(content)
    if match is None or not match.group(1):
        return None
    return int(match.group(1))


class LanguageBinding(ABC):
    """
    Import/export binding for one family of target languages.

    A binding knows how a machine bundle of its language records
    transitions, targets, the suspend state and boilerplate, and re-derives
    those facts from the files on disk. It holds no mutable state: every
    query is a function of its arguments and the files it reads, so queries
    may run concurrently and their results may be cached.

    Subclasses supply the file names and the patterns; the queries
    themselves are implemented here.
    """

    #: Suffix of the files holding state actions
    action_suffix = ".mm"

    #: Suffix of generated state implementation files
    implementation_suffix = ".mm"

    def __init__(self) -> None:
        self.logger = get_logger(f"bindings.{self.name}")

    # ------------------------------------------------------------------
    # Per-language layout of a bundle
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def name(self) -> str:
        """Canonical name of the binding (also written to ``Language``)."""
        ...

    @property
    @abstractmethod
    def template_dir(self) -> str:
        """Template directory used when exporting."""
        ...

    @abstractmethod
    def machine_header_file(self, machine: str) -> str:
        """File declaring the machine."""
        ...

    @abstractmethod
    def machine_implementation_file(self, machine: str) -> str:
        """File implementing the machine (records the suspend state)."""
        ...

    @abstractmethod
    def machine_boilerplate_files(self, machine: str) -> list[tuple[SectionName, str]]:
        """Machine boilerplate sections and the files they are kept in."""
        ...

    @property
    @abstractmethod
    def transition_count_pattern(self) -> re.Pattern[str]:
        """Pattern capturing the transition count in a state header."""
        ...

    @abstractmethod
    def transition_target_pattern(self, index: int) -> re.Pattern[str]:
        """Pattern capturing the target index of transition ``index``."""
        ...

    @property
    @abstractmethod
    def suspend_state_pattern(self) -> re.Pattern[str]:
        """Pattern capturing the suspend state index in the implementation."""
        ...

    def state_header_file(self, state: StateName) -> str:
        return f"State_{state}.h"

    def state_implementation_file(self, state: StateName) -> str:
        return f"State_{state}{self.implementation_suffix}"

    def expression_file(self, state: StateName, index: int) -> str:
        return f"State_{state}_Transition_{index}.expr"

    def state_boilerplate_files(self, state: StateName) -> list[tuple[SectionName, str]]:
        """State boilerplate sections and the files they are kept in."""
        suffix = self.action_suffix
        return [
            (SectionName.INCLUDES, f"State_{state}_Includes.h"),
            (SectionName.VARIABLES, f"State_{state}_Variables.h"),
            (SectionName.FUNCTIONS, f"State_{state}_Methods.h"),
            (SectionName.ON_ENTRY, f"State_{state}_OnEntry{suffix}"),
            (SectionName.ON_EXIT, f"State_{state}_OnExit{suffix}"),
            (SectionName.INTERNAL, f"State_{state}_Internal{suffix}"),
            (SectionName.ON_SUSPEND, f"State_{state}_OnSuspend{suffix}"),
            (SectionName.ON_RESUME, f"State_{state}_OnResume{suffix}"),
        ]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def number_of_transitions(self, path: Path, state_name: StateName) -> int:
        """
        Number of transitions leaving ``state_name``.

        Returns 0 if the state header is missing or records no count.
        """
        content = self._read(path, self.state_header_file(state_name))
        count = first_number(self.transition_count_pattern, content)
        return count if count is not None else 0

    def expression_of_transition(
        self,
        path: Path,
        state_name: StateName,
        index: int,
    ) -> str:
        """
        Guard expression of transition ``index`` leaving ``state_name``.

        Args:
            path: Machine bundle directory
            state_name: Source state of the transition
            index: Transition index, ``0 <= index < number_of_transitions``

        Returns:
            The trimmed expression, or ``"true"`` if its file is unreadable

        Raises:
            IndexError: If ``index`` is out of range for the state
        """
        self._check_index(path, state_name, index)
        file = self.expression_file(state_name, index)
        content = self._read(path, file, level="warning")
        if content is None:
            return DEFAULT_EXPRESSION
        return content.strip()

    def target_of_transition(
        self,
        path: Path,
        states: Sequence[State],
        state_name: StateName,
        index: int,
    ) -> Optional[StateID]:
        """
        Target of transition ``index`` leaving ``state_name``.

        The persisted target index is resolved against ``states``.

        Returns:
            The target's StateID, or None if it cannot be resolved

        Raises:
            IndexError: If ``index`` is out of range for the state
        """
        self._check_index(path, state_name, index)
        content = self._read(path, self.state_header_file(state_name))
        target = first_number(self.transition_target_pattern(index), content)
        return resolve_state(states, target)

    def suspend_state(self, path: Path, states: Sequence[State]) -> Optional[StateID]:
        """The machine's suspend state, or None if it has none."""
        file = self.machine_implementation_file(machine_name(path))
        content = self._read(path, file)
        return resolve_state(states, first_number(self.suspend_state_pattern, content))

    def boilerplate(self, path: Path) -> CBoilerplate:
        """Machine boilerplate read from the bundle."""
        return self._read_sections(path, self.machine_boilerplate_files(machine_name(path)))

    def state_boilerplate(self, path: Path, state_name: StateName) -> CBoilerplate:
        """Boilerplate of a single state read from the bundle."""
        return self._read_sections(path, self.state_boilerplate_files(state_name))

    def window_layout(self, path: Path) -> Optional[bytes]:
        """Opaque editor window layout, if the bundle has one."""
        file = Path(path) / WINDOW_LAYOUT_FILE
        if not file.is_file():
            return None
        return file.read_bytes()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_index(self, path: Path, state_name: StateName, index: int) -> None:
        count = self.number_of_transitions(path, state_name)
        if not 0 <= index < count:
            raise IndexError(
                f"Transition {index} out of range for state '{state_name}' "
                f"of {Path(path).name} ({count} transitions)"
            )

    def _read(self, path: Path, file: str, level: str = "debug") -> Optional[str]:
        try:
            return (Path(path) / file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            getattr(self.logger, level)(
                "binding_file_unreadable",
                path=str(path),
                file=file,
                error=str(e),
            )
            return None

    def _read_sections(
        self,
        path: Path,
        files: list[tuple[SectionName, str]],
    ) -> CBoilerplate:
        boilerplate = CBoilerplate()
        for section, file in files:
            content = self._read(path, file)
            if content is not None:
                boilerplate[section] = content
        return boilerplate

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LanguageBinding):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def common_boilerplate_files(
    machine: str,
    prefix: str,
) -> list[tuple[SectionName, str]]:
    """Machine boilerplate files named ``<prefix><machine>_<Section>.h``."""
    return [
        (SectionName.INCLUDE_PATH, INCLUDE_PATH_FILE),
        (SectionName.INCLUDES, f"{prefix}{machine}_Includes.h"),
        (SectionName.VARIABLES, f"{prefix}{machine}_Variables.h"),
        (SectionName.FUNCTIONS, f"{prefix}{machine}_Methods.h"),
    ]
