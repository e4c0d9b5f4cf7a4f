"""C language binding."""

from __future__ import annotations

import re

from fsmconvert.bindings.base import LanguageBinding, common_boilerplate_files
from fsmconvert.models import SectionName

_TRANSITION_COUNT = re.compile(r"NUMBER_OF_TRANSITIONS\s+([0-9]+)")
_SUSPEND_STATE = re.compile(r"suspend_state\s*=\s*machine->states\[\s*([0-9]+)\s*\]")


class CBinding(LanguageBinding):
    """
    Binding for machines implemented in C.

    State headers record their transitions as preprocessor constants::

        #define FSM_COUNTER_PRINT_NUMBER_OF_TRANSITIONS 1
        #define FSM_COUNTER_PRINT_TRANSITION_0_TARGET 2
    """

    implementation_suffix = ".c"

    @property
    def name(self) -> str:
        return "c"

    @property
    def template_dir(self) -> str:
        return "c"

    def machine_header_file(self, machine: str) -> str:
        return f"Machine_{machine}.h"

    def machine_implementation_file(self, machine: str) -> str:
        return f"Machine_{machine}.c"

    def machine_boilerplate_files(self, machine: str) -> list[tuple[SectionName, str]]:
        return common_boilerplate_files(machine, prefix="Machine_")

    @property
    def transition_count_pattern(self) -> re.Pattern[str]:
        return _TRANSITION_COUNT

    def transition_target_pattern(self, index: int) -> re.Pattern[str]:
        return re.compile(rf"TRANSITION_{index}_TARGET\s+([0-9]+)")

    @property
    def suspend_state_pattern(self) -> re.Pattern[str]:
        return _SUSPEND_STATE
