# tests/test_tokenizer.py
import logging

import pytest

from xml_magic.errors import XMLParseError
from xml_magic.engine.tokenizer import Tokenizer
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
    XmlDeclaration,
    as_writer_event,
)


def tokens(src: bytes, **kw):
    return list(Tokenizer(src, **kw))


def test_document_boundaries():
    assert tokens(b"<a/>") == [
        StartDocument(),
        StartElement("a"),
        EndElement("a"),
        EndDocument(),
    ]


def test_boundaries_are_not_writer_events():
    assert as_writer_event(StartDocument()) is None
    assert as_writer_event(EndDocument()) is None
    assert as_writer_event(Comment("x")) == Comment("x")


def test_whitespace_trimmed():
    src = b"<a>\n  <b>  hi there \n</b>\n</a>"
    assert tokens(src)[1:-1] == [
        StartElement("a"),
        StartElement("b"),
        Characters("hi there"),
        EndElement("b"),
        EndElement("a"),
    ]


def test_whitespace_kept_without_trim():
    got = tokens(b"<a> <b/></a>", trim_whitespace=False)
    assert got[2] == Characters(" ")


def test_comments_are_tokens():
    assert Comment(" note ") in tokens(b"<a><!-- note --></a>")
    assert not any(
        isinstance(t, Comment)
        for t in tokens(b"<a><!-- note --></a>", ignore_comments=True)
    )


def test_cdata_kept_apart_from_text():
    got = tokens(b"<a>pre <![CDATA[ <x> & y ]]> post</a>")
    assert got[2:5] == [Characters("pre"), CData(" <x> & y "), Characters("post")]


def test_attribute_order_and_entities():
    (start,) = [t for t in tokens(b'<a z="1" b="2" m="&amp;&#10;"/>') if isinstance(t, StartElement)]
    assert start.attributes == (("z", "1"), ("b", "2"), ("m", "&\n"))


def test_text_around_entities_is_one_token():
    assert tokens(b"<a>x &amp; y &lt;z&gt;</a>")[2] == Characters("x & y <z>")


def test_declaration_and_doctype():
    src = b'<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n<!DOCTYPE html SYSTEM "about:legacy-compat">\n<html/>'
    got = tokens(src)
    assert got[1] == XmlDeclaration("1.0", "UTF-8", True)
    assert got[2] == Doctype("html", "about:legacy-compat", None)


def test_internal_subset_warns(caplog):
    src = b'<!DOCTYPE a [<!ENTITY who "world">]><a>hello &who;</a>'
    with caplog.at_level(logging.WARNING):
        got = tokens(src)
    assert Characters("hello world") in got
    assert "internal DTD subset" in caplog.text


def test_processing_instruction():
    assert ProcessingInstruction("go", "now") in tokens(b"<a><?go now?></a>")
    assert ProcessingInstruction("stop", "") in tokens(b"<a><?stop?></a>")


def test_small_chunks_give_same_tokens():
    src = "<root><x a='1'>héllo <![CDATA[raw]]></x><!--c--><y/></root>".encode("utf-8")
    assert tokens(src, chunk_size=3) == tokens(src)


def test_stream_is_lazy():
    it = iter(Tokenizer(b"<a><b></a>"))
    assert next(it) == StartDocument()
    with pytest.raises(XMLParseError):
        list(it)


def test_mismatched_tag_reports_position():
    with pytest.raises(XMLParseError, match="mismatched tag") as info:
        tokens(b"<a><b></a>")
    assert info.value.line == 1
    assert info.value.column is not None


def test_undefined_entity():
    with pytest.raises(XMLParseError, match="undefined entity"):
        tokens(b"<a>&nope;</a>")


def test_empty_input():
    with pytest.raises(XMLParseError, match="no element found"):
        tokens(b"")


def test_unclosed_root():
    with pytest.raises(XMLParseError):
        tokens(b"<a><b/>")


def test_internal_subset_comments_and_pis_dropped():
    src = b'<!DOCTYPE a [<!-- in dtd --><?dtd-pi x?><!ELEMENT a ANY>]><!-- after --><a/>'
    got = tokens(src)
    assert Comment(" in dtd ") not in got
    assert not any(isinstance(t, ProcessingInstruction) for t in got)
    assert Comment(" after ") in got
