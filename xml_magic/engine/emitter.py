"""
Pretty-printing XML serializer.

Consumes writer events one at a time and renders them into an in-memory
buffer.  Indentation is one indent unit per open element; elements that
hold text keep their content inline so no whitespace is added to it.
"""

from __future__ import annotations

import codecs
import io
import logging
from dataclasses import dataclass
from typing import List, Optional
from xml.sax.saxutils import escape

from xml_magic.errors import EmitterError, EncodingViolation
from xml_magic.engine.tokens import (
    CData,
    Characters,
    Comment,
    Doctype,
    EndElement,
    ProcessingInstruction,
    StartElement,
    WriterEvent,
    XmlDeclaration,
)

logger = logging.getLogger(__name__)

_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {'"': "&quot;", "\t": "&#9;", "\n": "&#10;", "\r": "&#13;"}


@dataclass
class _Frame:
    name: str
    has_markup: bool = False
    has_text: bool = False


def _output_encoding(declared: Optional[str]) -> Optional[str]:
    """Keep a UTF-8 label as written; anything else is relabelled UTF-8."""
    if declared is None:
        return None
    try:
        if codecs.lookup(declared).name == "utf-8":
            return declared
    except LookupError:
        pass
    return "UTF-8"


def _literal(value: str) -> str:
    """Quote a DOCTYPE id; a literal holding `"` has to use apostrophes."""
    quote = "'" if '"' in value else '"'
    return f"{quote}{value}{quote}"


class Emitter:
    def __init__(
        self,
        indent_unit: str = "\t",
        *,
        perform_indent: bool = True,
        autopad_comments: bool = False,
        normalize_empty_elements: bool = True,
        line_separator: str = "\n",
    ):
        self.indent_unit = indent_unit
        self.perform_indent = perform_indent
        self.autopad_comments = autopad_comments
        self.normalize_empty_elements = normalize_empty_elements
        self.line_separator = line_separator

        self._out = io.StringIO()
        self._stack: List[_Frame] = []
        self._start_open = False      # "<name attrs" written, ">" still due
        self._wrote_any = False
        self._root_closed = False
        self._handlers = {
            XmlDeclaration: self._xml_declaration,
            Doctype: self._doctype,
            StartElement: self._start_element,
            EndElement: self._end_element,
            Characters: self._characters,
            CData: self._cdata,
            Comment: self._comment,
            ProcessingInstruction: self._processing_instruction,
        }

    @property
    def depth(self) -> int:
        return len(self._stack)

    def write(self, event: WriterEvent) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            raise EmitterError(f"cannot serialize {type(event).__name__}")
        handler(event)

    def getvalue(self) -> bytes:
        if self._stack:
            raise EmitterError(f"element <{self._stack[-1].name}> was never closed")
        text = self._out.getvalue()
        if text:
            text += self.line_separator
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodingViolation(f"serialized document is not valid UTF-8: {e}") from e

    # ── layout ---------------------------------------------------------------
    def _close_start_tag(self) -> None:
        if self._start_open:
            self._out.write(">")
            self._start_open = False

    def _newline(self, depth: int) -> None:
        self._out.write(self.line_separator + self.indent_unit * depth)

    def _before_markup(self) -> None:
        self._close_start_tag()
        parent = self._stack[-1] if self._stack else None
        if self.perform_indent and self._wrote_any and not (parent and parent.has_text):
            self._newline(self.depth)
        if parent:
            parent.has_markup = True
        self._wrote_any = True

    def _before_text(self) -> _Frame:
        if not self._stack:
            raise EmitterError("character data outside the root element")
        self._close_start_tag()
        frame = self._stack[-1]
        frame.has_text = True
        self._wrote_any = True
        return frame

    # ── events ---------------------------------------------------------------
    def _xml_declaration(self, ev: XmlDeclaration) -> None:
        if self._wrote_any:
            raise EmitterError("XML declaration must come first")
        decl = f'<?xml version="{ev.version}"'
        encoding = _output_encoding(ev.encoding)
        if encoding is not None:
            if encoding != ev.encoding:
                logger.debug("declared encoding %s rewritten to %s", ev.encoding, encoding)
            decl += f' encoding="{encoding}"'
        if ev.standalone is not None:
            decl += f' standalone="{"yes" if ev.standalone else "no"}"'
        self._out.write(decl + "?>")
        self._wrote_any = True

    def _doctype(self, ev: Doctype) -> None:
        if self._stack or self._root_closed:
            raise EmitterError("DOCTYPE must precede the root element")
        self._before_markup()
        decl = f"<!DOCTYPE {ev.name}"
        if ev.public_id is not None:
            decl += " PUBLIC " + _literal(ev.public_id)
            if ev.system_id is not None:
                decl += " " + _literal(ev.system_id)
        elif ev.system_id is not None:
            decl += " SYSTEM " + _literal(ev.system_id)
        self._out.write(decl + ">")

    def _start_element(self, ev: StartElement) -> None:
        if self._root_closed:
            raise EmitterError(f"second root element <{ev.name}>")
        self._before_markup()
        self._out.write("<" + ev.name)
        for name, value in ev.attributes:
            self._out.write(f' {name}="{escape(value, _ATTR_ENTITIES)}"')
        self._stack.append(_Frame(ev.name))
        self._start_open = True

    def _end_element(self, ev: EndElement) -> None:
        if not self._stack or self._stack[-1].name != ev.name:
            open_name = self._stack[-1].name if self._stack else None
            raise EmitterError(f"end tag </{ev.name}> does not match open element <{open_name}>")
        frame = self._stack.pop()
        if self._start_open and self.normalize_empty_elements:
            self._out.write("/>")
            self._start_open = False
        else:
            self._close_start_tag()
            if self.perform_indent and frame.has_markup and not frame.has_text:
                self._newline(self.depth)
            self._out.write(f"</{ev.name}>")
        if not self._stack:
            self._root_closed = True

    def _characters(self, ev: Characters) -> None:
        if not self._stack and not ev.text.strip():
            return
        self._before_text()
        self._out.write(escape(ev.text, _TEXT_ENTITIES))

    def _cdata(self, ev: CData) -> None:
        self._before_text()
        self._out.write(f"<![CDATA[{ev.text}]]>")

    def _comment(self, ev: Comment) -> None:
        self._before_markup()
        text = ev.text
        if self.autopad_comments:
            if not text.startswith(" "):
                text = " " + text
            if not text.endswith(" "):
                text += " "
        self._out.write(f"<!--{text}-->")

    def _processing_instruction(self, ev: ProcessingInstruction) -> None:
        self._before_markup()
        if ev.data:
            self._out.write(f"<?{ev.target} {ev.data}?>")
        else:
            self._out.write(f"<?{ev.target}?>")
