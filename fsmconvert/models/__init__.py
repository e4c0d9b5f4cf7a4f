"""Data models for fsmconvert."""

from fsmconvert.models.boilerplate import (
    Boilerplate,
    BoilerplateCode,
    CBoilerplate,
    SectionName,
)
from fsmconvert.models.fsm import (
    FSM,
    LLFSM,
    NO_SUSPEND_STATE,
    Suspensible,
    SuspensibleFSM,
)
from fsmconvert.models.layout import StateLayout
from fsmconvert.models.state import (
    Expression,
    State,
    StateID,
    StateName,
    Transition,
    TransitionID,
    new_state_id,
    new_transition_id,
)

__all__ = [
    # Graph
    "State",
    "StateID",
    "StateName",
    "Transition",
    "TransitionID",
    "Expression",
    "new_state_id",
    "new_transition_id",
    # Capabilities
    "FSM",
    "Suspensible",
    "SuspensibleFSM",
    "LLFSM",
    "NO_SUSPEND_STATE",
    # Boilerplate
    "Boilerplate",
    "BoilerplateCode",
    "CBoilerplate",
    "SectionName",
    # Layout
    "StateLayout",
]
