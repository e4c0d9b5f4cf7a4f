"""Language bindings and the format registry."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from fsmconvert.bindings.base import (
    DEFAULT_EXPRESSION,
    MACHINE_SUFFIX,
    LanguageBinding,
    machine_name,
    resolve_state,
)
from fsmconvert.bindings.c import CBinding
from fsmconvert.bindings.objcpp import ObjCPPBinding
from fsmconvert.errors import UnsupportedOutputFormat
from fsmconvert.models.layout import LANGUAGE_FILE
from fsmconvert.utils.logging import get_logger

logger = get_logger("bindings")


class Format(str, Enum):
    """Output format identifiers."""

    C = "c"
    CX = "c++"
    CPP = "cpp"
    CXX = "cxx"
    OBJC = "objc"
    OBJCX = "objc++"
    OBJCPP = "objcpp"
    SWIFT = "swift"
    VERILOG = "verilog"
    VHDL = "vhdl"


_C = CBinding()
_OBJCPP = ObjCPPBinding()

# Format registry mapping each supported format to its binding
FORMAT_REGISTRY: dict[Format, LanguageBinding] = {
    Format.C: _C,
    Format.CX: _OBJCPP,
    Format.CPP: _OBJCPP,
    Format.CXX: _OBJCPP,
    Format.OBJC: _OBJCPP,
    Format.OBJCX: _OBJCPP,
    Format.OBJCPP: _OBJCPP,
}

DEFAULT_BINDING: LanguageBinding = _OBJCPP


def parse_format(identifier: Union[str, Format, None]) -> Optional[Format]:
    """Map an identifier (case-insensitive, surrounding space ignored) to a Format."""
    if identifier is None:
        return None
    if isinstance(identifier, Format):
        return identifier
    try:
        return Format(identifier.strip().lower())
    except ValueError:
        return None


def get_binding(format: Union[str, Format]) -> LanguageBinding:
    """
    Get the binding registered for an output format.

    Args:
        format: Format or format identifier

    Returns:
        The registered LanguageBinding

    Raises:
        UnsupportedOutputFormat: If no binding is registered for the format
    """
    parsed = parse_format(format)
    if parsed is None or parsed not in FORMAT_REGISTRY:
        raise UnsupportedOutputFormat(format)
    return FORMAT_REGISTRY[parsed]


def list_formats(supported_only: bool = False) -> list[str]:
    """
    List format identifiers.

    Args:
        supported_only: Only list formats that have a binding

    Returns:
        List of format identifiers
    """
    return [
        f.value for f in Format
        if not supported_only or f in FORMAT_REGISTRY
    ]


def binding_for_language(language: Optional[str]) -> Optional[LanguageBinding]:
    """Binding named by the first line of a ``Language`` file, if registered."""
    if not language or not language.strip():
        return None
    first_line = language.strip().splitlines()[0]
    parsed = parse_format(first_line)
    if parsed is None:
        return None
    return FORMAT_REGISTRY.get(parsed)


def _read_language(path: Path) -> Optional[str]:
    file = Path(path) / LANGUAGE_FILE
    if not file.is_file():
        return None
    try:
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("language_file_unreadable", path=str(path), error=str(e))
        return None


def language_binding_if_available(path: Path) -> Optional[LanguageBinding]:
    """Binding recorded in the bundle at ``path``, or None."""
    return binding_for_language(_read_language(path))


def language_binding_for(path: Path) -> LanguageBinding:
    """Binding recorded in the bundle at ``path``, defaulting to Objective-C++."""
    return language_binding_if_available(path) or DEFAULT_BINDING


__all__ = [
    # Base
    "LanguageBinding",
    "DEFAULT_EXPRESSION",
    "MACHINE_SUFFIX",
    "machine_name",
    "resolve_state",
    # Bindings
    "CBinding",
    "ObjCPPBinding",
    # Registry
    "Format",
    "FORMAT_REGISTRY",
    "DEFAULT_BINDING",
    "parse_format",
    "get_binding",
    "list_formats",
    "binding_for_language",
    "language_binding_for",
    "language_binding_if_available",
]
