"""Objective-C++ language binding (also used for C++ and Objective-C)."""

from __future__ import annotations

import re

from fsmconvert.bindings.base import LanguageBinding, common_boilerplate_files
from fsmconvert.models import SectionName

_TRANSITION_COUNT = re.compile(r"numberOfTransitions.*return\s*([0-9]+)")
_SUSPEND_STATE = re.compile(r"setSuspendState\(\s*_states\[\s*([0-9]+)\s*\]")


class ObjCPPBinding(LanguageBinding):
    """
    Binding for machines implemented as Objective-C++ classes.

    State headers declare one nested class per transition, with the target
    state index as the constructor default::

        Transition_0(int toState = 3): CLTransition(toState) {}
        virtual int numberOfTransitions() const { return 1; }
    """

    @property
    def name(self) -> str:
        return "objc++"

    @property
    def template_dir(self) -> str:
        return "objcpp"

    def machine_header_file(self, machine: str) -> str:
        return f"{machine}.h"

    def machine_implementation_file(self, machine: str) -> str:
        return f"{machine}.mm"

    def machine_boilerplate_files(self, machine: str) -> list[tuple[SectionName, str]]:
        return common_boilerplate_files(machine, prefix="")

    @property
    def transition_count_pattern(self) -> re.Pattern[str]:
        return _TRANSITION_COUNT

    def transition_target_pattern(self, index: int) -> re.Pattern[str]:
        # \b keeps Transition_1 from matching Transition_10
        return re.compile(rf"Transition_{index}\b.*int.*toState\s*=\s*([0-9]+)")

    @property
    def suspend_state_pattern(self) -> re.Pattern[str]:
        return _SUSPEND_STATE
