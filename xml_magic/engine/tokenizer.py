"""
Pull-style XML tokenizer over a byte buffer.

Wraps expat: the source is fed in chunks and the tokens each chunk produces
are yielded before the next chunk is parsed, so the token stream is never
materialized as a whole.
"""

from __future__ import annotations

import logging
import xml.parsers.expat
from collections import deque
from typing import Deque, Iterator, List, Optional

from xml_magic.errors import XMLParseError
from xml_magic.engine.tokens import (
    CData,
    Characters,
    Comment,
    Doctype,
    EndDocument,
    EndElement,
    ProcessingInstruction,
    StartDocument,
    StartElement,
    Token,
    XmlDeclaration,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
XML_WHITESPACE = " \t\r\n"


class Tokenizer:
    def __init__(
        self,
        src: bytes,
        *,
        trim_whitespace: bool = True,
        ignore_comments: bool = False,
        chunk_size: int = CHUNK_SIZE,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.src = src
        self.trim_whitespace = trim_whitespace
        self.ignore_comments = ignore_comments
        self.chunk_size = chunk_size

    def __iter__(self) -> Iterator[Token]:
        return _TokenStream(self).run()


class _TokenStream:
    """Parser state for one pass over the source."""

    def __init__(self, cfg: Tokenizer):
        self.cfg = cfg
        self.pending: Deque[Token] = deque()
        self.text: List[str] = []
        self.cdata: Optional[List[str]] = None
        self.in_dtd = False
        self.parser = self._create_parser()

    def _create_parser(self):
        p = xml.parsers.expat.ParserCreate()
        p.ordered_attributes = True
        p.specified_attributes = True
        p.buffer_text = True
        p.XmlDeclHandler = self.on_xml_decl
        p.StartDoctypeDeclHandler = self.on_doctype
        p.EndDoctypeDeclHandler = self.on_doctype_end
        p.StartElementHandler = self.on_start
        p.EndElementHandler = self.on_end
        p.CharacterDataHandler = self.on_chars
        p.StartCdataSectionHandler = self.on_cdata_start
        p.EndCdataSectionHandler = self.on_cdata_end
        p.ProcessingInstructionHandler = self.on_pi
        p.SkippedEntityHandler = self.on_skipped_entity
        if not self.cfg.ignore_comments:
            p.CommentHandler = self.on_comment
        return p

    # ── driver ---------------------------------------------------------------
    def run(self) -> Iterator[Token]:
        yield StartDocument()
        src, size = self.cfg.src, self.cfg.chunk_size
        offset = 0
        while True:
            chunk = src[offset : offset + size]
            offset += size
            final = offset >= len(src)
            self._feed(chunk, final)
            while self.pending:
                yield self.pending.popleft()
            if final:
                break
        self.flush_text()
        while self.pending:
            yield self.pending.popleft()
        yield EndDocument()

    def _feed(self, chunk: bytes, final: bool) -> None:
        try:
            self.parser.Parse(chunk, final)
        except xml.parsers.expat.ExpatError as e:
            raise XMLParseError(str(e), e.lineno, e.offset) from e

    # ── text ---------------------------------------------------------------
    def flush_text(self) -> None:
        if not self.text:
            return
        s = "".join(self.text)
        self.text.clear()
        if self.cfg.trim_whitespace:
            s = s.strip(XML_WHITESPACE)
        if s:
            self.pending.append(Characters(s))

    def emit(self, token: Token) -> None:
        self.flush_text()
        self.pending.append(token)

    # ── expat handlers -------------------------------------------------------
    def on_xml_decl(self, version, encoding, standalone):
        if version is None:
            return
        flag = None if standalone == -1 else bool(standalone)
        self.emit(XmlDeclaration(version, encoding, flag))

    def on_doctype(self, name, system_id, public_id, has_internal_subset):
        if has_internal_subset:
            logger.warning(
                "internal DTD subset of <!DOCTYPE %s> is not reproduced, "
                "including its comments and PIs",
                name,
            )
        self.emit(Doctype(name, system_id, public_id))
        self.in_dtd = True

    def on_doctype_end(self):
        self.in_dtd = False

    def on_start(self, name, attrs):
        pairs = tuple(zip(attrs[::2], attrs[1::2]))
        self.emit(StartElement(name, pairs))

    def on_end(self, name):
        self.emit(EndElement(name))

    def on_chars(self, data):
        if self.cdata is not None:
            self.cdata.append(data)
        else:
            self.text.append(data)

    def on_cdata_start(self):
        self.flush_text()
        self.cdata = []

    def on_cdata_end(self):
        self.pending.append(CData("".join(self.cdata or ())))
        self.cdata = None

    def on_comment(self, data):
        if self.in_dtd:
            return
        self.emit(Comment(data))

    def on_pi(self, target, data):
        if self.in_dtd:
            return
        self.emit(ProcessingInstruction(target, data or ""))

    def on_skipped_entity(self, name, is_parameter_entity):
        if is_parameter_entity:
            return
        raise XMLParseError(
            f"undefined entity &{name};: line {self.parser.CurrentLineNumber}, "
            f"column {self.parser.CurrentColumnNumber}",
            self.parser.CurrentLineNumber,
            self.parser.CurrentColumnNumber,
        )
