"""Tests for fsmconvert.models: the machine graph."""

import pytest

from fsmconvert.models import (
    FSM,
    LLFSM,
    NO_SUSPEND_STATE,
    CBoilerplate,
    SectionName,
    State,
    StateLayout,
    Suspensible,
    SuspensibleFSM,
    Transition,
    new_state_id,
    new_transition_id,
)


# ── Helpers ────────────────────────────────────────────────────────────────────

def _machine(names, edges=(), suspend=None):
    """
    Build an LLFSM from state names and (source, label, target) name triples.
    """
    states = [State(name=n) for n in names]
    by_name = {s.name: s.id for s in states}
    transitions = [
        Transition(source=by_name[src], label=label, target=by_name.get(dst))
        for src, label, dst in edges
    ]
    return LLFSM.from_graph(
        states,
        transitions,
        suspend_state=by_name.get(suspend),
    ), by_name


# ── States and transitions ─────────────────────────────────────────────────────

class TestRecords:
    def test_state_description_is_name(self):
        assert State(name="Ping").description == "Ping"
        assert str(State(name="Ping")) == "Ping"

    def test_state_ids_are_unique(self):
        assert State(name="A").id != State(name="A").id

    def test_transition_description(self):
        src, dst = new_state_id(), new_state_id()
        t = Transition(source=src, label="x > 1", target=dst)
        assert t.description == f"( {src} -- x > 1 --> {dst})"

    def test_transition_without_target(self):
        src = new_state_id()
        t = Transition(source=src, label="g")
        assert t.target is None
        assert t.description.endswith("--> (none))")

    def test_records_are_frozen(self):
        state = State(name="A")
        with pytest.raises(AttributeError):
            state.name = "B"


# ── transitions_from ───────────────────────────────────────────────────────────

class TestTransitionsFrom:
    def test_scenario(self):
        m, ids = _machine(["S0", "S1"], [("S0", "g", "S1")])
        assert m.transitions_from(ids["S0"]) == m.transitions
        assert m.transitions_from(ids["S1"]) == []

    def test_keeps_original_order(self):
        m, ids = _machine(
            ["A", "B"],
            [("A", "1", "B"), ("B", "2", "A"), ("A", "3", "A"), ("A", "4", "B")],
        )
        labels = [m.label(t) for t in m.transitions_from(ids["A"])]
        assert labels == ["1", "3", "4"]

    def test_is_pure(self):
        m, ids = _machine(["A", "B"], [("A", "g", "B")])
        before = (list(m.states), list(m.transitions))
        m.transitions_from(ids["A"])
        m.transitions_from(ids["A"])
        assert (m.states, m.transitions) == before

    def test_unknown_state(self):
        m, _ = _machine(["A"], [("A", "g", "A")])
        assert m.transitions_from(new_state_id()) == []


# ── Initial state ──────────────────────────────────────────────────────────────

class TestInitialState:
    def test_defaults_to_first_state(self):
        m, ids = _machine(["A", "B", "C"])
        assert m.get_initial_state() == ids["A"]

    def test_empty_machine_has_none(self):
        assert LLFSM().get_initial_state() is None

    def test_set_on_empty_appends(self):
        m = LLFSM()
        s = new_state_id()
        m.set_initial_state(s)
        assert m.states == [s]
        assert m.get_initial_state() == s

    def test_set_replaces_first_only(self):
        m, ids = _machine(["A", "B", "C"])
        s = new_state_id()
        m.set_initial_state(s)
        assert m.states == [s, ids["B"], ids["C"]]
        assert len(m.states) == 3


# ── Descriptions ───────────────────────────────────────────────────────────────

class TestDescription:
    def test_lists_states_then_suspend_state(self):
        m, _ = _machine(["A", "B"], suspend="B")
        assert m.description == "A\nB\nB"
        assert str(m) == m.description

    def test_not_suspensible(self):
        m, _ = _machine(["A", "B"])
        assert not m.is_suspensible
        assert m.description == f"A\nB\n{NO_SUSPEND_STATE}"

    def test_suspensible(self):
        m, ids = _machine(["A", "B"], suspend="A")
        assert m.is_suspensible
        assert m.suspend_state == ids["A"]

    def test_capabilities_are_independent(self):
        assert issubclass(SuspensibleFSM, FSM)
        assert issubclass(SuspensibleFSM, Suspensible)
        assert not issubclass(Suspensible, FSM)
        assert isinstance(LLFSM(), SuspensibleFSM)


# ── Editing helpers ────────────────────────────────────────────────────────────

class TestEditing:
    def test_set_name_renames(self):
        m, ids = _machine(["A", "B"])
        m.set_name("Start", ids["A"])
        assert m.state_names == ["Start", "B"]
        assert m.state(ids["A"]).id == ids["A"]

    def test_set_name_appends_unknown(self):
        m, _ = _machine(["A"])
        s = new_state_id()
        m.set_name("Z", s)
        assert m.state_names == ["A", "Z"]

    def test_set_label_relabels(self):
        m, ids = _machine(["A", "B"], [("A", "g", "B")])
        tid = m.transitions[0]
        m.set_label("h", tid)
        assert m.label(tid) == "h"
        assert m.transition(tid).target == ids["B"]

    def test_set_label_appends_from_last_state(self):
        m, ids = _machine(["A", "B"])
        tid = new_transition_id()
        m.set_label("go", tid)
        assert m.transitions == [tid]
        assert m.transition(tid).source == ids["B"]
        assert m.transition(tid).target is None

    def test_set_label_on_empty_machine_creates_initial(self):
        m = LLFSM()
        m.set_label("go", new_transition_id())
        assert m.state_names == ["Initial"]
        assert m.transitions_from(m.states[0]) == m.transitions

    def test_lookups_of_unknown_ids(self):
        m = LLFSM()
        assert m.state_name(new_state_id()) is None
        assert m.label(new_transition_id()) is None
        assert m.state_index(new_state_id()) is None
        assert m.state_index(None) is None


# ── Boilerplate and layout ─────────────────────────────────────────────────────

class TestBoilerplate:
    def test_all_sections_present_and_empty(self):
        b = CBoilerplate()
        assert set(b.sections) == set(SectionName)
        assert b.is_empty
        assert b[SectionName.ON_ENTRY] == ""

    def test_set_by_value(self):
        b = CBoilerplate()
        b["onEntry"] = "x = 1;"
        assert b[SectionName.ON_ENTRY] == "x = 1;"
        assert not b.is_empty

    def test_dict_round_trip(self):
        b = CBoilerplate.from_dict({"includes": "#include <a.h>"})
        assert b.to_dict()["includes"] == "#include <a.h>"
        assert b.to_dict()["onExit"] == ""


class TestStateLayout:
    def test_grid_positions(self):
        assert StateLayout.grid(0).closed.x == 100.0
        assert StateLayout.grid(0).closed.y == 50.0
        assert StateLayout.grid(3).closed.x == 100.0 + 200.0 * 3
        assert StateLayout.grid(8).closed.x == 100.0
        assert StateLayout.grid(8).closed.y == 50.0 + 100.0

    def test_shape_follows_open_flag(self):
        layout = StateLayout.grid(0)
        assert layout.shape == layout.closed
        assert layout.open.width == 200.0
