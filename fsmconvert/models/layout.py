"""Editor layout of a machine, as far as this package needs it.

The layout geometry itself is owned by the graphical editor. Here states only
get the default grid position the editor falls back to, and the window layout
is carried through as opaque bytes.
"""

from __future__ import annotations

from dataclasses import dataclass

# Bundle file names
LANGUAGE_FILE = "Language"
STATES_FILE = "States"
LAYOUT_FILE = "Layout.plist"
WINDOW_LAYOUT_FILE = "WindowLayout.plist"
INCLUDE_PATH_FILE = "IncludePath"

# States per grid row
GRID_COLUMNS = 8


@dataclass(frozen=True)
class Box:
    """Centre and dimensions of a state's shape."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class StateLayout:
    """Closed (ellipse) and open (rectangle) shape of a state."""

    closed: Box
    open: Box
    is_open: bool = False

    @classmethod
    def grid(
        cls,
        index: int,
        width: float = 100.0,
        height: float = 50.0,
        open_width: float = 200.0,
        open_height: float = 100.0,
    ) -> StateLayout:
        """Default layout for the state at ``index``: a grid of 8 columns."""
        x = width + open_width * (index % GRID_COLUMNS)
        y = height + open_height * (index // GRID_COLUMNS)
        return cls(
            closed=Box(x, y, width, height),
            open=Box(x, y, open_width, open_height),
        )

    @property
    def shape(self) -> Box:
        return self.open if self.is_open else self.closed
