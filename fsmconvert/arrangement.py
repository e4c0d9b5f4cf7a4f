"""Arrangements: ordered collections of machines that run together.

An arrangement directory holds a ``Machines`` manifest listing the names of
its machines, one per line, in order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from fsmconvert.bindings import MACHINE_SUFFIX, LanguageBinding
from fsmconvert.errors import MissingManifest
from fsmconvert.machine import Machine
from fsmconvert.utils.atomic import atomic_write_text
from fsmconvert.utils.logging import get_logger

logger = get_logger("arrangement")

MANIFEST_FILE = "Machines"


def manifest_path(directory: Path) -> Path:
    """Path of the manifest inside an arrangement directory."""
    return Path(directory) / MANIFEST_FILE


def save_machine_names(directory: Path, names: Sequence[str]) -> Path:
    """
    Write the machine names of an arrangement.

    Names are written one per line in the given order; duplicates are kept.

    Args:
        directory: Arrangement directory (created if missing)
        names: Machine names

    Returns:
        Path of the manifest written

    Raises:
        ValueError: If a name contains a line break
        AtomicWriteError: If the manifest could not be written
    """
    for name in names:
        if "\n" in name or "\r" in name:
            raise ValueError(f"Machine name contains a line break: {name!r}")

    path = manifest_path(directory)
    atomic_write_text(path, "".join(f"{name}\n" for name in names))

    logger.info("arrangement_saved", path=str(path), machines=len(names))
    return path


def load_machine_names(directory: Path) -> list[str]:
    """
    Read the machine names of an arrangement.

    Blank lines are skipped; other lines are returned as written. An
    existing empty manifest is an arrangement without machines.

    Args:
        directory: Arrangement directory

    Returns:
        Machine names in manifest order

    Raises:
        MissingManifest: If the directory has no manifest
    """
    path = manifest_path(directory)
    if not path.is_file():
        raise MissingManifest(path)

    content = path.read_text(encoding="utf-8")
    # Only "\n" separates entries; other Unicode line breaks belong to a name
    names = [line for line in content.split("\n") if line.strip()]

    logger.debug("arrangement_loaded", path=str(path), machines=len(names))
    return names


def machine_file(name: str) -> str:
    """Bundle directory name for a machine name."""
    return name if name.endswith(MACHINE_SUFFIX) else name + MACHINE_SUFFIX


def resolve_machine_path(directory: Path, name: str) -> Optional[Path]:
    """
    Bundle of the machine ``name`` inside an arrangement directory.

    A directory called exactly ``name`` wins over ``<name>.machine``.
    Returns None if neither exists.
    """
    bare = Path(directory) / name
    if bare.is_dir():
        return bare
    suffixed = Path(directory) / machine_file(name)
    if suffixed.exists():
        return suffixed
    return None


@dataclass
class Arrangement:
    """The ordered machine names of an arrangement."""

    machine_names: list[str] = field(default_factory=list)

    @classmethod
    def load(cls, directory: Path) -> Arrangement:
        """Load an arrangement; raises MissingManifest if there is none."""
        return cls(machine_names=load_machine_names(directory))

    def save(self, directory: Path) -> Path:
        """Save the arrangement's manifest into ``directory``."""
        return save_machine_names(directory, self.machine_names)

    def machine_paths(self, directory: Path) -> list[Path]:
        """Bundle path of every machine, resolved inside ``directory``."""
        return [
            resolve_machine_path(directory, name) or Path(directory) / machine_file(name)
            for name in self.machine_names
        ]

    def load_machines(
        self,
        directory: Path,
        binding: Optional[LanguageBinding] = None,
    ) -> list[Machine]:
        """
        Load the machines of the arrangement in manifest order.

        Names listed more than once share one loaded Machine. Names without
        a bundle in ``directory`` are skipped with a warning.

        Args:
            directory: Arrangement directory
            binding: Binding to read every machine with (default: each
                bundle's own language)

        Returns:
            Loaded machines, one per resolvable manifest entry

        Raises:
            OSError: If a bundle exists but cannot be read
        """
        loaded: dict[Path, Machine] = {}
        machines = []
        for name in self.machine_names:
            path = resolve_machine_path(directory, name)
            if path is None:
                logger.warning(
                    "arrangement_machine_missing",
                    directory=str(directory),
                    machine=name,
                )
                continue
            if path not in loaded:
                loaded[path] = Machine.load(path, binding=binding)
            machines.append(loaded[path])
        return machines

    def __len__(self) -> int:
        return len(self.machine_names)

    def to_dict(self) -> dict:
        return {"machines": list(self.machine_names)}
