# xml_magic/models.py
from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator

INDENT_CHOICES = "Use 'tab', '2space', or '4space'"


class IndentStyle(str, Enum):
    TAB = "tab"
    TWO_SPACE = "2space"
    FOUR_SPACE = "4space"

    @property
    def unit(self) -> str:
        return _UNITS[self]

    @classmethod
    def parse(cls, value: str) -> "IndentStyle":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid indent option. {INDENT_CHOICES}") from None


_UNITS = {
    IndentStyle.TAB: "\t",
    IndentStyle.TWO_SPACE: "  ",
    IndentStyle.FOUR_SPACE: "    ",
}


def same_file(a: Path, b: Path) -> bool:
    """True when *a* and *b* name one file (symlinks, `..`, hard links)."""
    try:
        if a.resolve() == b.resolve():
            return True
    except (OSError, RuntimeError) as e:
        raise ValueError(f"Cannot resolve path {a} or {b}: {e}") from None
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_path: Path
    output_path: Path | None = None
    write_to_stdout: bool = False
    indent_style: IndentStyle = IndentStyle.TAB

    @model_validator(mode="after")
    def check_destination(self) -> "Config":
        if self.write_to_stdout and self.output_path is not None:
            raise ValueError("--stdout and --output cannot be used together")
        if self.output_path is not None and same_file(self.input_path, self.output_path):
            raise ValueError(
                f"Output path {self.output_path} is the same file as input {self.input_path}; "
                "omit --output to format in place"
            )
        return self

    @property
    def indent_unit(self) -> str:
        return self.indent_style.unit

    @property
    def destination(self) -> Path | None:
        """File the result is written to; None means standard output."""
        if self.write_to_stdout:
            return None
        return self.output_path or self.input_path
