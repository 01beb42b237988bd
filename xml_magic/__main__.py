"""
xml-magic – a reasonably fast XML formatter
 • rewrites indentation only; content, comments and CDATA are kept
 • CLI flags: PATH, --output/-o PATH, --stdout, --indent/-i tab|2space|4space
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from xml_magic.engine.formatter import format_xml
from xml_magic.engine.logconf import init
from xml_magic.errors import XmlMagicError
from xml_magic.models import Config
from xml_magic.utils.files import read_source, write_atomic, write_stdout
from xml_magic.utils.validate import resolve_config

logger = logging.getLogger(__name__)

out = Console(soft_wrap=True, highlight=False)
err = Console(stderr=True, soft_wrap=True, highlight=False)


# ═════════ pipeline ═════════
def run(cfg: Config) -> Path | None:
    """Format `cfg.input_path`; return the file written, or None for stdout."""
    src = read_source(cfg.input_path)
    formatted = format_xml(src, cfg.indent_unit)
    dest = cfg.destination
    if dest is None:
        write_stdout(formatted)
    else:
        write_atomic(dest, formatted)
    return dest


# ═════════════════════ CLI ═════════════════════
app = typer.Typer(pretty_exceptions_show_locals=False, add_completion=False)


@app.command(help="Reformat the indentation of an XML file.")
def main(
    path: Path = typer.Argument(..., help="Path to the XML file"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write to this file instead of modifying PATH"
    ),
    stdout: bool = typer.Option(
        False, "--stdout", help="Output to stdout instead of modifying the file"
    ),
    indent: str = typer.Option(
        "tab", "--indent", "-i", envvar="XML_MAGIC_INDENT",
        help="Indentation style: 'tab', '2space', or '4space'",
    ),
    log_level: str = typer.Option("WARNING", "--log-level"),
):
    init(log_level)
    try:
        cfg = resolve_config(path, output, stdout, indent)
        dest = run(cfg)
    except XmlMagicError as e:
        logger.debug("aborting", exc_info=True)
        err.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    if dest is not None:
        out.print(f"[green]✔ Successfully formatted XML file: {escape(str(dest))}[/]")


if __name__ == "__main__":
    app()
