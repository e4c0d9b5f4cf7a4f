"""Export machines and arrangements into bundles for a target language."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from fsmconvert.arrangement import MANIFEST_FILE, Arrangement
from fsmconvert.bindings import (
    DEFAULT_BINDING,
    MACHINE_SUFFIX,
    Format,
    LanguageBinding,
    get_binding,
    language_binding_if_available,
    machine_name,
)
from fsmconvert.machine import Machine
from fsmconvert.models import CBoilerplate, SectionName
from fsmconvert.models.layout import LANGUAGE_FILE, STATES_FILE, WINDOW_LAYOUT_FILE
from fsmconvert.utils.atomic import AtomicFileWriter
from fsmconvert.utils.logging import get_logger, log_export_result

logger = get_logger("exporter")

TEMPLATES_DIR = Path(__file__).parent / "templates"


@dataclass
class ExportResult:
    """Files written by an export."""

    destination: Path
    binding: str
    files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "destination": str(self.destination),
            "binding": self.binding,
            "files_written": len(self.files),
        }


class MachineExporter:
    """Renders machine bundles using the Jinja2 templates of a binding."""

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        """
        Initialize the exporter.

        Args:
            templates_dir: Directory holding one template folder per binding
        """
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def export(
        self,
        machine: Machine,
        destination: Path,
        format: Union[str, Format, None] = None,
        is_suspensible: bool = True,
    ) -> ExportResult:
        """
        Write ``machine`` as a bundle at ``destination``.

        The binding is resolved before anything is rendered, and all files
        are committed as one batch.

        Args:
            machine: Machine to export
            destination: Bundle directory to write (e.g. ``out/Counter.machine``)
            format: Output format (default: the machine's own language)
            is_suspensible: Whether the generated code supports suspension

        Returns:
            ExportResult listing the files written

        Raises:
            UnsupportedOutputFormat: If no binding is registered for ``format``
            AtomicWriteError: If the bundle could not be written
        """
        binding = get_binding(format) if format is not None else machine.language
        destination = Path(destination)
        name = machine_name(destination)

        writer = AtomicFileWriter(destination)
        self._add_files(writer, machine, binding, name, is_suspensible)
        files = writer.pending
        writer.commit()

        log_export_result(
            machine=machine.name,
            binding=binding.name,
            destination=str(destination),
            files_written=len(files),
        )
        return ExportResult(destination=destination, binding=binding.name, files=files)

    def export_arrangement(
        self,
        machines: Sequence[Machine],
        destination: Path,
        format: Union[str, Format, None] = None,
        is_suspensible: bool = True,
    ) -> ExportResult:
        """
        Write an arrangement of ``machines`` into the directory ``destination``.

        Each distinct machine becomes ``<destination>/<name>.machine``; the
        manifest lists every machine in order, repeats included. Everything
        is committed as one batch.

        Args:
            machines: Machines in arrangement order
            destination: Arrangement directory to write
            format: Output format (default: the first machine's language)
            is_suspensible: Whether the generated code supports suspension

        Raises:
            UnsupportedOutputFormat: If no binding is registered for ``format``
            AtomicWriteError: If the arrangement could not be written
        """
        if format is not None:
            binding = get_binding(format)
        else:
            binding = machines[0].language if machines else DEFAULT_BINDING
        destination = Path(destination)

        writer = AtomicFileWriter(destination)
        writer.add_text(LANGUAGE_FILE, binding.name + "\n")
        writer.add_text(MANIFEST_FILE, "".join(f"{m.name}\n" for m in machines))

        written: set[str] = set()
        for machine in machines:
            if machine.name in written:
                continue
            written.add(machine.name)
            prefix = f"{machine.name}{MACHINE_SUFFIX}/"
            self._add_files(writer, machine, binding, machine.name, is_suspensible, prefix)

        files = writer.pending
        writer.commit()

        logger.info(
            "arrangement_exported",
            destination=str(destination),
            binding=binding.name,
            machines=len(written),
            files_written=len(files),
        )
        return ExportResult(destination=destination, binding=binding.name, files=files)

    def _add_files(
        self,
        writer: AtomicFileWriter,
        machine: Machine,
        binding: LanguageBinding,
        name: str,
        is_suspensible: bool,
        prefix: str = "",
    ) -> None:
        llfsm = machine.llfsm
        context = self._context(machine, binding, name, is_suspensible)

        writer.add_text(prefix + LANGUAGE_FILE, binding.name + "\n")
        writer.add_text(prefix + STATES_FILE, "".join(n + "\n" for n in llfsm.state_names))
        if machine.window_layout is not None:
            writer.add_bytes(prefix + WINDOW_LAYOUT_FILE, machine.window_layout)

        _add_sections(
            writer,
            machine.boilerplate,
            binding.machine_boilerplate_files(name),
            prefix,
        )

        writer.add_text(
            prefix + binding.machine_header_file(name),
            self._render(binding, "machine_header.j2", context),
        )
        writer.add_text(
            prefix + binding.machine_implementation_file(name),
            self._render(binding, "machine_implementation.j2", context),
        )

        for state in context["states"]:
            state_context = dict(context, state=state)
            writer.add_text(
                prefix + binding.state_header_file(state["name"]),
                self._render(binding, "state_header.j2", state_context),
            )
            writer.add_text(
                prefix + binding.state_implementation_file(state["name"]),
                self._render(binding, "state_implementation.j2", state_context),
            )
            _add_sections(
                writer,
                machine.boilerplate_for(state["id"]),
                binding.state_boilerplate_files(state["name"]),
                prefix,
            )
            for transition in state["transitions"]:
                writer.add_text(
                    prefix + binding.expression_file(state["name"], transition["index"]),
                    transition["label"] + "\n",
                )

    def _context(
        self,
        machine: Machine,
        binding: LanguageBinding,
        name: str,
        is_suspensible: bool,
    ) -> dict[str, Any]:
        llfsm = machine.llfsm
        states = []
        for state in machine.states:
            transitions = []
            for index, tid in enumerate(llfsm.transitions_from(state.id)):
                transition = llfsm.transition_map[tid]
                transitions.append({
                    "index": index,
                    "label": transition.label,
                    "target": llfsm.state_index(transition.target),
                })
            states.append({
                "id": state.id,
                "name": state.name,
                "macro": _macro(state.name),
                "transitions": transitions,
            })

        suspend_index = llfsm.state_index(llfsm.suspend_state) if is_suspensible else None
        return {
            "name": name,
            "macro": _macro(name),
            "lower": name.lower(),
            "binding": binding.name,
            "states": states,
            "suspend_index": suspend_index,
            "is_suspensible": is_suspensible,
            "header_file": binding.machine_header_file(name),
            "implementation_file": binding.machine_implementation_file(name),
        }

    def _render(self, binding: LanguageBinding, template: str, context: dict[str, Any]) -> str:
        return self.env.get_template(f"{binding.template_dir}/{template}").render(**context)


def _add_sections(
    writer: AtomicFileWriter,
    boilerplate: CBoilerplate,
    files: list[tuple[SectionName, str]],
    prefix: str = "",
) -> None:
    for section, file in files:
        writer.add_text(prefix + file, boilerplate[section])


def _macro(name: str) -> str:
    return "".join(c if c.isalnum() else "_" for c in name).upper()


def export_machine(
    machine: Machine,
    destination: Path,
    format: Union[str, Format, None] = None,
    is_suspensible: bool = True,
    templates_dir: Optional[Path] = None,
) -> ExportResult:
    """Export ``machine`` to ``destination``; see MachineExporter.export."""
    return MachineExporter(templates_dir).export(
        machine,
        destination,
        format=format,
        is_suspensible=is_suspensible,
    )


def export_arrangement(
    directory: Path,
    destination: Path,
    format: Union[str, Format, None] = None,
    is_suspensible: bool = True,
    templates_dir: Optional[Path] = None,
) -> ExportResult:
    """
    Convert the arrangement stored in ``directory`` into ``destination``.

    The output format defaults to the arrangement's ``Language`` file, then
    to the language of its first machine.

    Raises:
        MissingManifest: If ``directory`` has no manifest
        UnsupportedOutputFormat: If no binding is registered for ``format``
    """
    if format is not None:
        get_binding(format)
    else:
        language = language_binding_if_available(directory)
        format = language.name if language else None

    machines = Arrangement.load(directory).load_machines(directory)
    return MachineExporter(templates_dir).export_arrangement(
        machines,
        destination,
        format=format,
        is_suspensible=is_suspensible,
    )
