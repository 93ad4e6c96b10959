"""
RDF/XML Reader.

Drives RDFXMLEventParser from the standard library SAX reader running in
namespace mode. Input is fed to the reader in chunks, so statements reach
the sink while the document is still being read.

    <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
             xmlns:ex="http://example.org/">
        <rdf:Description rdf:about="http://example.org/alice">
            <ex:name>Alice</ex:name>
        </rdf:Description>
    </rdf:RDF>

Reference: https://www.w3.org/TR/rdf-syntax-grammar/
"""

import logging
import xml.sax
from io import StringIO
from pathlib import Path
from typing import BinaryIO, List, Optional, TextIO, Tuple, Union
from xml.sax.expatreader import AttributesNSImpl, ExpatParser
from xml.sax.handler import (
    ContentHandler,
    feature_external_ges,
    feature_namespaces,
)

from rdfxml_stream.config import ParserConfig
from rdfxml_stream.graph import Graph, GraphHandler
from rdfxml_stream.namespaces import XML_NS, XML_PREFIX
from rdfxml_stream.parser import RDFXMLEventParser

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

Source = Union[str, bytes, Path, StringIO, TextIO, BinaryIO]


def _split_expat_name(name: str) -> Tuple[Optional[str], str, str]:
    """Split expat's 'uri local prefix' triplet into (uri, local, qname)."""
    parts = name.split()
    if len(parts) == 1:
        return None, name, name
    if len(parts) == 3:
        return parts[0], parts[1], f"{parts[2]}:{parts[1]}"
    return parts[0], parts[1], parts[1]


class QualifiedNameReader(ExpatParser):
    """
    Expat SAX reader that reports element qualified names.

    Expat hands the reader each name as a (uri, local, prefix) triplet, but
    the stock reader passes None as the element qname and refuses
    feature_namespace_prefixes. Prefixes bound to the same URI are then
    indistinguishable, which XML literal capture cannot afford.
    """

    def __init__(self):
        super().__init__(namespaceHandling=1)

    def start_element_ns(self, name, attrs):
        uri, local, qname = _split_expat_name(name)
        values = {}
        qnames = {}
        for attr_name, value in attrs.items():
            attr_uri, attr_local, attr_qname = _split_expat_name(attr_name)
            values[(attr_uri, attr_local)] = value
            qnames[(attr_uri, attr_local)] = attr_qname
        self._cont_handler.startElementNS((uri, local), qname, AttributesNSImpl(values, qnames))

    def end_element_ns(self, name):
        uri, local, qname = _split_expat_name(name)
        self._cont_handler.endElementNS((uri, local), qname)


class SAXEventSource(ContentHandler):
    """
    Translates SAX namespace-mode callbacks into parser events.

    QualifiedNameReader supplies element qnames. Readers that report None
    instead get the name rebuilt from the prefix declarations in scope.
    """

    def __init__(self, parser: RDFXMLEventParser):
        super().__init__()
        self.parser = parser
        self._declared: List[Tuple[str, str]] = []

    def startDocument(self):
        self.parser.on_document_start()

    def endDocument(self):
        self.parser.on_document_end()

    def startPrefixMapping(self, prefix, uri):
        self._declared.append((prefix or "", uri))
        self.parser.on_prefix_mapping_start(prefix, uri)

    def endPrefixMapping(self, prefix):
        key = prefix or ""
        for i in range(len(self._declared) - 1, -1, -1):
            if self._declared[i][0] == key:
                del self._declared[i]
                break
        self.parser.on_prefix_mapping_end(prefix)

    def startElementNS(self, name, qname, attrs):
        uri, local = name
        attributes = []
        for attr_name in attrs.getNames():
            try:
                attr_qname = attrs.getQNameByName(attr_name)
            except KeyError:
                attr_qname = self._qname(*attr_name)
            attributes.append((attr_qname, attrs.getValue(attr_name)))
        self.parser.on_element_start(uri, local, qname or self._qname(uri, local), attributes)

    def endElementNS(self, name, qname):
        uri, local = name
        self.parser.on_element_end(uri, local, qname or self._qname(uri, local))

    def characters(self, content):
        self.parser.on_characters(content)

    def _qname(self, uri: Optional[str], local: str) -> str:
        """Rebuild prefix:local from the innermost prefix bound to uri."""
        if uri is None:
            return local
        if uri == XML_NS:
            return f"{XML_PREFIX}:{local}"
        shadowed = set()
        for prefix, bound in reversed(self._declared):
            if prefix in shadowed:
                continue
            shadowed.add(prefix)
            if bound == uri:
                return f"{prefix}:{local}" if prefix else local
        return local


class RDFXMLParser:
    """
    Parser for RDF/XML documents.

    Each call to parse() runs a fresh RDFXMLEventParser, so blank node
    labels restart at 0 for every document.
    """

    def __init__(self, base_uri: Optional[str] = None, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.base_uri = base_uri
        self.warnings: List[str] = []

    def parse(self, source: Source, sink: Optional[GraphHandler] = None) -> GraphHandler:
        """
        Parse RDF/XML content.

        Args:
            source: RDF/XML as string, bytes, file path, or file-like object
            sink: Receiver for the statements; a new Graph if omitted

        Returns:
            The sink, holding the parsed statements

        Raises:
            ValueError: If the markup is not well-formed
        """
        graph = sink if sink is not None else Graph()
        events = RDFXMLEventParser(graph, base_uri=self.base_uri, config=self.config)

        reader = QualifiedNameReader()
        reader.setFeature(feature_namespaces, True)
        reader.setFeature(feature_external_ges, False)
        reader.setContentHandler(SAXEventSource(events))

        fed = False
        try:
            for chunk in _chunks(source):
                if chunk:
                    reader.feed(chunk)
                    fed = True
            if not fed:
                raise ValueError("Invalid RDF/XML: empty document")
            reader.close()
        except xml.sax.SAXParseException as e:
            raise ValueError(f"Invalid RDF/XML: {e}")
        finally:
            self.warnings = list(events.warnings)

        logger.debug(f"Read {events.triple_count} triples from RDF/XML")
        return graph


def _chunks(source: Source):
    """Yield the source in pieces the SAX reader can feed on."""
    if isinstance(source, Path):
        with source.open("rb") as f:
            yield from iter(lambda: f.read(CHUNK_SIZE), b"")
    elif isinstance(source, (str, bytes)):
        yield source
    else:
        yield from iter(lambda: source.read(CHUNK_SIZE), source.read(0))


def parse_rdfxml(
    source: Source,
    base_uri: Optional[str] = None,
    config: Optional[ParserConfig] = None,
) -> Graph:
    """
    Parse RDF/XML content.

    Args:
        source: RDF/XML content
        base_uri: Base for relative references
        config: Parser options

    Returns:
        Graph with the parsed triples
    """
    parser = RDFXMLParser(base_uri=base_uri, config=config)
    return parser.parse(source)


def parse_rdfxml_file(
    path: Union[str, Path],
    base_uri: Optional[str] = None,
    config: Optional[ParserConfig] = None,
) -> Graph:
    """
    Parse an RDF/XML file.

    Relative references resolve against the file's own URI unless a base
    is given.
    """
    path = Path(path)
    if base_uri is None:
        base_uri = path.resolve().as_uri()
    return parse_rdfxml(path, base_uri=base_uri, config=config)
