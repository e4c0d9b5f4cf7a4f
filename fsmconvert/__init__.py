"""fsmconvert - finite-state machine model and language binding export."""

__version__ = "1.3.0"
