"""
rdfxml-stream: a streaming RDF/XML reader.

Turns RDF/XML markup events into subject-predicate-object statements as
they are read, with blank node synthesis, reification and XML literal
capture.
"""

__version__ = "0.1.0"

from rdfxml_stream.terms import Reference, Literal, Triple, TermKind, build_literal
from rdfxml_stream.namespaces import RDF_NS, PrefixTable
from rdfxml_stream.resolver import ReferenceResolver
from rdfxml_stream.bnodes import BlankNodeAllocator
from rdfxml_stream.graph import Graph, GraphHandler, TripleEmitter
from rdfxml_stream.state import ParseState
from rdfxml_stream.parser import RDFXMLEventParser
from rdfxml_stream.config import ParserConfig
from rdfxml_stream.errors import (
    RDFXMLError,
    UnresolvedPrefixError,
    StructuralError,
    ConfigValidationError,
)
from rdfxml_stream.formats import RDFXMLParser, parse_rdfxml, parse_rdfxml_file

__all__ = [
    "Reference",
    "Literal",
    "Triple",
    "TermKind",
    "build_literal",
    "RDF_NS",
    "PrefixTable",
    "ReferenceResolver",
    "BlankNodeAllocator",
    "Graph",
    "GraphHandler",
    "TripleEmitter",
    "ParseState",
    "RDFXMLEventParser",
    "ParserConfig",
    # Errors
    "RDFXMLError",
    "UnresolvedPrefixError",
    "StructuralError",
    "ConfigValidationError",
    # Format readers
    "RDFXMLParser",
    "parse_rdfxml",
    "parse_rdfxml_file",
]
