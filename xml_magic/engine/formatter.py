"""
formatter.py: parse → emit pipeline

    from xml_magic.engine.formatter import format_xml
    out = format_xml(src_bytes, "  ")
"""

from __future__ import annotations

import logging

from xml_magic.engine.emitter import Emitter
from xml_magic.engine.tokenizer import Tokenizer
from xml_magic.engine.tokens import as_writer_event

__all__ = ["format_xml"]

logger = logging.getLogger(__name__)


def format_xml(src: bytes, indent: str) -> bytes:
    """
    Re-serialize the XML document *src* with one *indent* per nesting level.

    Insignificant whitespace between elements is dropped, comments are kept,
    and childless elements come out self-closing.  Raises `XMLParseError`
    for malformed input; nothing is returned in that case.
    """
    reader = Tokenizer(src, trim_whitespace=True, ignore_comments=False)
    writer = Emitter(
        indent,
        perform_indent=True,
        autopad_comments=False,
        normalize_empty_elements=True,
    )
    forwarded = 0
    for token in reader:
        event = as_writer_event(token)
        if event is not None:
            writer.write(event)
            forwarded += 1
    out = writer.getvalue()
    logger.debug("forwarded %d events, %d bytes out", forwarded, len(out))
    return out
