"""
Shared fixtures for the RDF/XML reader tests.
"""

import pytest

from rdfxml_stream.graph import Graph
from rdfxml_stream.namespaces import RDF_NS, split_qname
from rdfxml_stream.parser import RDFXMLEventParser


EX = "http://ns/"


class EventFeeder:
    """
    Feeds events to a parser by qualified name, the way a namespace-aware
    tokenizer would: the namespace URI comes from the prefixes in scope.
    """

    def __init__(self, parser: RDFXMLEventParser):
        self.parser = parser

    def prefix(self, prefix, uri):
        self.parser.on_prefix_mapping_start(prefix, uri)
        return self

    def end_prefix(self, prefix):
        self.parser.on_prefix_mapping_end(prefix)
        return self

    def start(self, qname, attrs=()):
        prefix, local = split_qname(qname)
        self.parser.on_element_start(self.parser.prefixes.get(prefix), local, qname, list(attrs))
        return self

    def text(self, text):
        self.parser.on_characters(text)
        return self

    def end(self, qname):
        prefix, local = split_qname(qname)
        self.parser.on_element_end(self.parser.prefixes.get(prefix), local, qname)
        return self

    def leaf(self, qname, attrs=(), text=None):
        self.start(qname, attrs)
        if text is not None:
            self.text(text)
        return self.end(qname)

    def finish(self):
        """Close the prefixes opened by make_feeder and end the document."""
        self.end_prefix("ex").end_prefix("rdf")
        self.parser.on_document_end()


@pytest.fixture
def graph():
    return Graph()


@pytest.fixture
def make_feeder(graph):
    """
    Build a started parser with rdf: and ex: bound, wrapped in a feeder.

    Returns a factory so tests can pass parser options.
    """
    def factory(**kwargs):
        parser = RDFXMLEventParser(graph, **kwargs)
        parser.on_document_start()
        feeder = EventFeeder(parser)
        feeder.prefix("rdf", RDF_NS).prefix("ex", EX)
        return feeder
    return factory
