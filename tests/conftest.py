"""Shared fixtures: machine bundles written to a temporary directory."""

from pathlib import Path

import pytest

from fsmconvert.utils.logging import configure_logging


def write_bundle(path: Path, files: dict) -> Path:
    """Create a bundle directory at ``path`` holding ``files``."""
    path.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        if isinstance(content, bytes):
            (path / name).write_bytes(content)
        else:
            (path / name).write_text(content, encoding="utf-8")
    return path


def c_bundle(tmp_path: Path) -> Path:
    """C machine Ping: S0 --g--> S1, suspend state S1."""
    return write_bundle(tmp_path / "Ping.machine", {
        "Language": "c\n",
        "States": "S0\nS1\n",
        "IncludePath": "/usr/local/include\n",
        "Machine_Ping_Includes.h": "#include <stdio.h>\n",
        "Machine_Ping.c": (
            "void fsm_ping_init(struct Machine_Ping * const machine)\n"
            "{\n"
            "    machine->suspend_state = machine->states[1];\n"
            "}\n"
        ),
        "State_S0.h": (
            "#define FSM_PING_S0_NUMBER_OF_TRANSITIONS 1\n"
            "#define FSM_PING_S0_TRANSITION_0_TARGET 1\n"
        ),
        "State_S0_Transition_0.expr": "  g \n",
        "State_S0_OnEntry.mm": "puts(\"S0\");\n",
        "State_S1.h": "#define FSM_PING_S1_NUMBER_OF_TRANSITIONS 0\n",
    })


def objcpp_bundle(tmp_path: Path) -> Path:
    """Objective-C++ machine Pong: S0 --g--> S1, no suspend state."""
    return write_bundle(tmp_path / "Pong.machine", {
        "Language": "objc++\n",
        "States": "S0\nS1\n",
        "WindowLayout.plist": b"<plist/>",
        "Pong.mm": "    setInitialState(_states[0]);\n",
        "State_S0.h": (
            "class Transition_0: public CLTransition\n"
            "{\n"
            "    Transition_0(int toState = 1): CLTransition(toState) {}\n"
            "};\n"
            "virtual int numberOfTransitions() const { return 1; }\n"
        ),
        "State_S0_Transition_0.expr": "g\n",
        "State_S1.h": "virtual int numberOfTransitions() const { return 0; }\n",
    })


@pytest.fixture
def c_machine_path(tmp_path):
    return c_bundle(tmp_path)


@pytest.fixture
def objcpp_machine_path(tmp_path):
    return objcpp_bundle(tmp_path)


@pytest.fixture(autouse=True)
def reset_logging():
    """Point structlog at the current stderr; the CLI rebinds it per invocation."""
    configure_logging()
    yield
    configure_logging()
