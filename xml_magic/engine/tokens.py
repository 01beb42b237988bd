"""
Token types passed from the tokenizer to the emitter.

One immutable record per XML lexical unit.  `StartDocument` / `EndDocument`
mark the stream boundaries and carry nothing the emitter can write.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

Attribute = Tuple[str, str]


@dataclass(frozen=True)
class StartDocument:
    pass


@dataclass(frozen=True)
class EndDocument:
    pass


@dataclass(frozen=True)
class XmlDeclaration:
    version: str
    encoding: Optional[str] = None
    standalone: Optional[bool] = None


@dataclass(frozen=True)
class Doctype:
    name: str
    system_id: Optional[str] = None
    public_id: Optional[str] = None


@dataclass(frozen=True)
class StartElement:
    name: str
    attributes: Tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class EndElement:
    name: str


@dataclass(frozen=True)
class Characters:
    text: str


@dataclass(frozen=True)
class CData:
    text: str


@dataclass(frozen=True)
class Comment:
    text: str


@dataclass(frozen=True)
class ProcessingInstruction:
    target: str
    data: str = ""


Token = Union[
    StartDocument,
    EndDocument,
    XmlDeclaration,
    Doctype,
    StartElement,
    EndElement,
    Characters,
    CData,
    Comment,
    ProcessingInstruction,
]

WriterEvent = Union[
    XmlDeclaration,
    Doctype,
    StartElement,
    EndElement,
    Characters,
    CData,
    Comment,
    ProcessingInstruction,
]


def as_writer_event(token: Token) -> Optional[WriterEvent]:
    """Return the event to serialize for *token*, or None to drop it."""
    if isinstance(token, (StartDocument, EndDocument)):
        return None
    return token
