"""
Command-line option resolution.

Usage (inside other modules):
    from xml_magic.utils.validate import resolve_config
    cfg = resolve_config(path, output, stdout, indent)   # raises ConfigError
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from xml_magic.errors import ConfigError
from xml_magic.models import Config, IndentStyle

logger = logging.getLogger(__name__)


# ─── internal helper ─────────────────────────────────────────────────────
def _first_message(err: ValidationError) -> str:
    """
    Pydantic prefixes validator messages with "Value error, ".  Surface the
    original exception text instead.
    """
    detail = err.errors()[0]
    cause = detail.get("ctx", {}).get("error")
    return str(cause) if cause is not None else detail["msg"]


# ─── public API ──────────────────────────────────────────────────────────
def resolve_config(
    path: Path,
    output: Path | None = None,
    stdout: bool = False,
    indent: str = IndentStyle.TAB.value,
) -> Config:
    """
    Validate raw option values and return the frozen `Config`.

    Checks run in order: indent selector, stdout/output conflict, same-file
    input and output.  Nothing is read or written; only path resolution
    touches the filesystem.
    """
    try:
        style = IndentStyle.parse(indent)
    except ValueError as e:
        raise ConfigError(str(e)) from None

    try:
        cfg = Config(
            input_path=path,
            output_path=output,
            write_to_stdout=stdout,
            indent_style=style,
        )
    except ValidationError as e:
        raise ConfigError(_first_message(e)) from None

    logger.debug("resolved config: %s", cfg)
    return cfg
