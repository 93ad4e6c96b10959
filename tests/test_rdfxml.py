"""
End-to-end tests reading RDF/XML markup through the SAX front end.
"""

from io import StringIO
from xml.sax.handler import ContentHandler

import pytest

from rdfxml_stream import parse_rdfxml, parse_rdfxml_file
from rdfxml_stream.formats.rdfxml import QualifiedNameReader, RDFXMLParser
from rdfxml_stream.namespaces import RDF_TYPE, RDF_XML_LITERAL
from rdfxml_stream.terms import Literal, Reference, Triple


EX = "http://example.org/"

ALICE = Reference(EX + "alice")
BOB = Reference(EX + "bob")

DOCUMENT = """<?xml version="1.0"?>
<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
         xmlns:ex="http://example.org/">
  <ex:Person rdf:about="http://example.org/alice" ex:age="30">
    <ex:name xml:lang="en">Alice</ex:name>
    <ex:knows>
      <rdf:Description rdf:about="http://example.org/bob">
        <ex:name>Bob</ex:name>
      </rdf:Description>
    </ex:knows>
    <ex:bio rdf:parseType="Literal"><b>Hi</b> there</ex:bio>
    <ex:homepage rdf:resource="http://alice.example/"/>
  </ex:Person>
</rdf:RDF>
"""


def ex(local):
    return Reference(EX + local)


class TestParseDocument:
    """Test a representative document."""

    def test_statements(self):
        graph = parse_rdfxml(DOCUMENT)
        assert graph.triples == [
            Triple(ALICE, RDF_TYPE, ex("Person")),
            Triple(ALICE, ex("age"), Literal("30")),
            Triple(ALICE, ex("name"), Literal("Alice", language="en")),
            Triple(ALICE, ex("knows"), BOB),
            Triple(BOB, ex("name"), Literal("Bob")),
            Triple(ALICE, ex("bio"), Literal("<b>Hi</b> there", datatype=RDF_XML_LITERAL)),
            Triple(ALICE, ex("homepage"), Reference("http://alice.example/")),
        ]

    def test_rdf_as_default_namespace(self):
        """Unprefixed RDF names are recognized under a default RDF namespace."""
        doc = """<RDF xmlns="http://www.w3.org/1999/02/22-rdf-syntax-ns#">
          <Description about="http://a/b">
            <title xmlns="http://ns/">Hi</title>
          </Description>
        </RDF>"""
        graph = parse_rdfxml(doc)
        assert graph.triples == [
            Triple(Reference("http://a/b"), Reference("http://ns/title"), Literal("Hi")),
        ]

    def test_prefixed_markup_in_literal(self):
        """Element prefixes inside an XML literal are kept and declared."""
        doc = """<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
                          xmlns:ex="http://example.org/">
          <rdf:Description rdf:about="http://example.org/alice">
            <ex:bio rdf:parseType="Literal"><ex:em ex:level="2">a &amp; b</ex:em></ex:bio>
          </rdf:Description>
        </rdf:RDF>"""
        graph = parse_rdfxml(doc)
        assert graph.triples[0].object == Literal(
            '<ex:em xmlns:ex="http://example.org/" ex:level="2">a &amp; b</ex:em>',
            datatype=RDF_XML_LITERAL,
        )

    def test_literal_keeps_prefix_as_written(self):
        """Two prefixes bound to one namespace stay distinct in literal markup."""
        doc = """<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
                          xmlns:a="http://h/" xmlns:b="http://h/">
          <rdf:Description rdf:about="http://h/s">
            <a:p rdf:parseType="Literal"><a:em>x &amp; y</a:em><b:em>z</b:em><br/></a:p>
          </rdf:Description>
        </rdf:RDF>"""
        graph = parse_rdfxml(doc)
        assert graph.triples == [
            Triple(
                Reference("http://h/s"), Reference("http://h/p"),
                Literal(
                    '<a:em xmlns:a="http://h/">x &amp; y</a:em>'
                    '<b:em xmlns:b="http://h/">z</b:em><br></br>',
                    datatype=RDF_XML_LITERAL,
                ),
            ),
        ]

    def test_reader_reports_element_qnames(self):
        """The SAX reader hands the handler each element's name as written."""
        seen = []

        class Recorder(ContentHandler):
            def startElementNS(self, name, qname, attrs):
                seen.append((name, qname, attrs.getQNameByName(("http://h/", "x"))))

        reader = QualifiedNameReader()
        reader.setContentHandler(Recorder())
        reader.feed('<b:e xmlns:a="http://h/" xmlns:b="http://h/" a:x="1"/>')
        reader.close()
        assert seen == [(("http://h/", "e"), "b:e", "a:x")]

    def test_xml_base(self):
        doc = """<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
                          xmlns:ex="http://example.org/"
                          xml:base="http://example.org/doc">
          <rdf:Description rdf:ID="me" ex:name="Me"/>
        </rdf:RDF>"""
        graph = parse_rdfxml(doc, base_uri="http://ignored/")
        assert graph.triples == [
            Triple(Reference("http://example.org/doc#me"), ex("name"), Literal("Me")),
        ]

    def test_blank_nodes_restart_per_parse(self):
        doc = """<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
                          xmlns:ex="http://example.org/">
          <ex:Thing/>
        </rdf:RDF>"""
        parser = RDFXMLParser()
        first = parser.parse(doc)
        second = parser.parse(doc)
        assert first.triples == second.triples
        assert first.triples[0].subject == Reference.blank("bn0")


class TestSources:
    """Test the accepted input kinds."""

    def test_bytes(self):
        assert len(parse_rdfxml(DOCUMENT.encode("utf-8"))) == 7

    def test_string_io(self):
        assert len(parse_rdfxml(StringIO(DOCUMENT))) == 7

    def test_file_uses_file_base(self, tmp_path):
        path = tmp_path / "doc.rdf"
        path.write_text(
            """<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
                        xmlns:ex="http://example.org/">
              <rdf:Description rdf:ID="me" ex:name="Me"/>
            </rdf:RDF>""",
            encoding="utf-8",
        )
        graph = parse_rdfxml_file(path)
        assert graph.triples[0].subject == Reference(path.resolve().as_uri() + "#me")

    def test_custom_sink(self):
        class Counter:
            def __init__(self):
                self.count = 0

            def link(self, subject, predicate, obj):
                self.count += 1

        sink = Counter()
        result = RDFXMLParser().parse(DOCUMENT, sink=sink)
        assert result is sink
        assert sink.count == 7

    def test_dataframe_export(self):
        df = parse_rdfxml(DOCUMENT).to_dataframe()
        assert df.height == 7
        assert df["object_kind"].to_list().count("literal") == 4


class TestInvalidInput:
    """Test markup errors at the format boundary."""

    def test_malformed(self):
        with pytest.raises(ValueError, match="Invalid RDF/XML"):
            parse_rdfxml("<rdf:RDF xmlns:rdf='http://www.w3.org/1999/02/22-rdf-syntax-ns#'>")

    def test_empty(self):
        with pytest.raises(ValueError, match="empty document"):
            parse_rdfxml("")

    def test_undeclared_prefix(self):
        with pytest.raises(ValueError):
            parse_rdfxml("<ex:Thing/>")

    def test_no_warnings_for_clean_document(self):
        parser = RDFXMLParser()
        parser.parse(DOCUMENT)
        assert parser.warnings == []
