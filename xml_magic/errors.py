"""
Error hierarchy for xml-magic.

Every failure the CLI reports derives from `XmlMagicError`; the entry point
catches that base class once, prints the message and exits with status 1.
"""

from __future__ import annotations

from pathlib import Path


class XmlMagicError(Exception):
    """Base class for every fatal, user-reportable error."""


class ConfigError(XmlMagicError):
    """Invalid or contradictory command-line options."""


class InputError(XmlMagicError):
    def __init__(self, path: Path, err: OSError):
        self.path = path
        self.reason = err.strerror or str(err)
        super().__init__(f"Error reading file {path}: {self.reason}")


class OutputError(XmlMagicError):
    def __init__(self, path: Path, err: OSError):
        self.path = path
        self.reason = err.strerror or str(err)
        super().__init__(f"Error writing to file {path}: {self.reason}")


class XMLParseError(XmlMagicError):
    """Malformed XML reported by the tokenizer."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        super().__init__(f"Error formatting XML: {message}")


class EmitterError(XmlMagicError):
    """The serializer received an event sequence it cannot write."""


class EncodingViolation(EmitterError):
    """Serializer output could not be encoded as UTF-8."""
