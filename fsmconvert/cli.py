"""CLI entry point for fsmconvert."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click

from fsmconvert import __version__
from fsmconvert.config import ConverterConfig, load_config
from fsmconvert.errors import ConfigError, MissingManifest, UnsupportedOutputFormat
from fsmconvert.utils.atomic import AtomicWriteError
from fsmconvert.utils.logging import configure_logging, get_logger

DEFAULT_CONFIG = "."


class ExitCode:
    """Exit codes for CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    UNSUPPORTED_FORMAT = 2
    MISSING_MANIFEST = 3
    MACHINE_NOT_FOUND = 4
    CONFIG_ERROR = 5


class Context:
    """CLI context for sharing state between commands."""

    def __init__(self, config: ConverterConfig) -> None:
        self.config = config
        self.logger = get_logger("cli")


pass_context = click.make_pass_decorator(Context)


def output_json(data: dict) -> None:
    """Output JSON to stdout."""
    click.echo(json.dumps(data, indent=2, default=str))


def fail(message: str, code: int, **details) -> None:
    """Report an error as JSON and exit with ``code``."""
    output_json({"status": "error", "message": message, **details})
    sys.exit(code)


def resolve_machine_path(argument: str, suffix: str) -> Optional[Path]:
    """Path of a machine argument, trying ``<argument><suffix>`` as well."""
    path = Path(argument)
    if path.exists():
        return path
    suffixed = Path(argument + suffix)
    if suffixed.exists():
        return suffixed
    return None


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=False, path_type=Path),
    default=DEFAULT_CONFIG,
    help="Directory containing fsmconvert.yaml",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warn", "warning", "error"], case_sensitive=False),
    default=None,
    help="Logging level",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default=None,
    help="Log format",
)
@click.version_option(version=__version__)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path,
    log_level: Optional[str],
    log_format: Optional[str],
) -> None:
    """
    fsmconvert - read, convert and arrange finite-state machines.

    Machines are read from their bundles through the language binding
    recorded in the bundle and can be written out for another language.
    """
    try:
        settings = load_config(config)
    except ConfigError as e:
        fail(str(e), ExitCode.CONFIG_ERROR, field=e.field)

    configure_logging(
        level=log_level or settings.logging.level,
        format_type=log_format or settings.logging.format,
    )

    ctx.obj = Context(config=settings)


@cli.command()
@click.argument("machines", nargs=-1, required=True)
@click.option(
    "--format",
    "output_format",
    default=None,
    help="Output format (default: each machine's own language)",
)
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to write converted machines to",
)
@click.option(
    "--suspensible/--no-suspensible",
    default=None,
    help="Generate code that supports suspension",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Print machine, state and transition totals",
)
@pass_context
def convert(
    ctx: Context,
    machines: tuple[str, ...],
    output_format: Optional[str],
    output: Optional[Path],
    suspensible: Optional[bool],
    verbose: bool,
) -> None:
    """Read MACHINES and optionally write them in another format."""
    from fsmconvert.bindings import get_binding, language_binding_if_available
    from fsmconvert.exporter import MachineExporter
    from fsmconvert.machine import Machine

    config = ctx.config
    is_suspensible = config.suspensible if suspensible is None else suspensible

    ctx.logger.info(
        "convert_started",
        machines=list(machines),
        format=output_format,
        output=str(output) if output else None,
    )

    paths = []
    for argument in machines:
        path = resolve_machine_path(argument, config.machine_suffix)
        if path is None:
            fail(f"Machine '{argument}' does not exist", ExitCode.MACHINE_NOT_FOUND)
        paths.append(path)

    try:
        # Resolve the output binding before anything is read or written
        if output_format is not None:
            get_binding(output_format)

        loaded = []
        for path in paths:
            binding = language_binding_if_available(path) or get_binding(config.default_format)
            loaded.append(Machine.load(path, binding=binding))

        exported = []
        if output is not None:
            exporter = MachineExporter(config.templates_dir)
            for machine in loaded:
                destination = output / f"{machine.name}{config.machine_suffix}"
                result = exporter.export(
                    machine,
                    destination,
                    format=output_format,
                    is_suspensible=is_suspensible,
                )
                exported.append(result.to_dict())

    except UnsupportedOutputFormat as e:
        ctx.logger.error("convert_failed", error=str(e))
        fail(str(e), ExitCode.UNSUPPORTED_FORMAT, format=e.format)
    except (OSError, UnicodeDecodeError, AtomicWriteError) as e:
        ctx.logger.error("convert_failed", error=str(e))
        fail(f"Conversion failed: {e}", ExitCode.GENERAL_ERROR)

    state_count = sum(len(m.llfsm.states) for m in loaded)
    transition_count = sum(len(m.llfsm.transitions) for m in loaded)
    if verbose:
        click.echo(
            f"{len(loaded)} FSMs with {state_count} states "
            f"and {transition_count} transitions",
            err=True,
        )

    output_json({
        "status": "success",
        "machines": [m.to_dict() for m in loaded],
        "states": state_count,
        "transitions": transition_count,
        "exported": exported,
    })


@cli.command()
def formats() -> None:
    """List output formats and the binding registered for each."""
    from fsmconvert.bindings import FORMAT_REGISTRY, Format

    output_json({
        "formats": {
            f.value: FORMAT_REGISTRY[f].name if f in FORMAT_REGISTRY else "unsupported"
            for f in Format
        },
    })


@cli.group()
def arrangement() -> None:
    """Read and write arrangement manifests."""


@arrangement.command("show")
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@pass_context
def arrangement_show(ctx: Context, directory: Path) -> None:
    """List the machines of the arrangement in DIRECTORY."""
    from fsmconvert.arrangement import Arrangement

    try:
        loaded = Arrangement.load(directory)
    except MissingManifest as e:
        ctx.logger.error("arrangement_load_failed", path=str(e.path))
        fail(str(e), ExitCode.MISSING_MANIFEST, path=str(e.path))

    output_json({
        "status": "success",
        "directory": str(directory),
        **loaded.to_dict(),
    })


@arrangement.command("save")
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.argument("names", nargs=-1)
@pass_context
def arrangement_save(ctx: Context, directory: Path, names: tuple[str, ...]) -> None:
    """Write the manifest of DIRECTORY listing NAMES in order."""
    from fsmconvert.arrangement import Arrangement

    try:
        path = Arrangement(machine_names=list(names)).save(directory)
    except (ValueError, AtomicWriteError) as e:
        ctx.logger.error("arrangement_save_failed", error=str(e))
        fail(str(e), ExitCode.GENERAL_ERROR)

    output_json({
        "status": "success",
        "manifest": str(path),
        "machines": list(names),
    })


@arrangement.command("convert")
@click.argument("directory", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    required=True,
    help="Directory to write the converted arrangement to",
)
@click.option(
    "--format",
    "output_format",
    default=None,
    help="Output format (default: the arrangement's own language)",
)
@click.option(
    "--suspensible/--no-suspensible",
    default=None,
    help="Generate code that supports suspension",
)
@pass_context
def arrangement_convert(
    ctx: Context,
    directory: Path,
    output: Path,
    output_format: Optional[str],
    suspensible: Optional[bool],
) -> None:
    """Convert the arrangement in DIRECTORY and all of its machines."""
    from fsmconvert.exporter import export_arrangement

    config = ctx.config
    is_suspensible = config.suspensible if suspensible is None else suspensible

    try:
        result = export_arrangement(
            directory,
            output,
            format=output_format,
            is_suspensible=is_suspensible,
            templates_dir=config.templates_dir,
        )
    except MissingManifest as e:
        ctx.logger.error("arrangement_load_failed", path=str(e.path))
        fail(str(e), ExitCode.MISSING_MANIFEST, path=str(e.path))
    except UnsupportedOutputFormat as e:
        ctx.logger.error("arrangement_convert_failed", error=str(e))
        fail(str(e), ExitCode.UNSUPPORTED_FORMAT, format=e.format)
    except (OSError, UnicodeDecodeError, AtomicWriteError) as e:
        ctx.logger.error("arrangement_convert_failed", error=str(e))
        fail(f"Conversion failed: {e}", ExitCode.GENERAL_ERROR)

    output_json({"status": "success", **result.to_dict()})


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
