"""
RDF Format Readers.

Supports:
- RDF/XML (.rdf, .xml, .owl) through the standard library SAX reader
"""

from rdfxml_stream.formats.rdfxml import (
    RDFXMLParser,
    SAXEventSource,
    parse_rdfxml,
    parse_rdfxml_file,
)

__all__ = [
    # RDF/XML
    "RDFXMLParser",
    "SAXEventSource",
    "parse_rdfxml",
    "parse_rdfxml_file",
]
