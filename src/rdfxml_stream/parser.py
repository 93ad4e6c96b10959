"""
RDF/XML Event Parser.

A streaming state machine that turns structural markup events (document,
prefix-mapping, element and character events) into RDF statements sent to
a GraphHandler. It never tokenizes markup itself; see
rdfxml_stream.formats.rdfxml for the SAX front end.

Reading model:

    <rdf:RDF>                     NONE       (document level)
      <ex:Book rdf:about="...">   SUBJECT    (node element)
        <ex:title>Hi</ex:title>   PREDICATE  (property element, text object)
        <ex:author>               PREDICATE -> OBJECT once the node below is read
          <ex:Person/>            SUBJECT    (nested node)
        </ex:author>
        <ex:note rdf:parseType="Literal"><b>x</b></ex:note>   LITERAL
      </ex:Book>
    </rdf:RDF>

Each element start pushes one frame and its end pops it. Elements inside
an XML literal only move the literal frame's depth counter.

Reference: https://www.w3.org/TR/rdf-syntax-grammar/
"""

import logging
from typing import List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape, quoteattr

from rdfxml_stream.bnodes import BlankNodeAllocator
from rdfxml_stream.config import ParserConfig
from rdfxml_stream.errors import StructuralError, UnresolvedPrefixError
from rdfxml_stream.graph import GraphHandler, TripleEmitter
from rdfxml_stream.namespaces import (
    RDF_TYPE,
    RDF_XML_LITERAL,
    XML_PREFIX,
    PrefixTable,
    is_rdf_name,
    split_qname,
)
from rdfxml_stream.resolver import ReferenceResolver
from rdfxml_stream.state import (
    EventKind,
    Frame,
    ParseState,
    StateStack,
    SubjectStack,
    lookup,
)
from rdfxml_stream.terms import Reference, build_literal

logger = logging.getLogger(__name__)

Attributes = Sequence[Tuple[str, str]]

# Attributes of a property element that decide what its object is
_OBJECT_FORMS = ("resource", "nodeID", "datatype", "parseType")


class RDFXMLEventParser:
    """
    Event-driven RDF/XML reader.

    One instance reads one document: call on_document_start(), feed the
    remaining events in document order, finish with on_document_end().
    The instance cannot be reused afterwards.

    Example:
        graph = Graph()
        parser = RDFXMLEventParser(graph, base_uri="http://example.org/doc")
        parser.on_document_start()
        ...
        parser.on_document_end()
    """

    def __init__(
        self,
        sink: GraphHandler,
        base_uri: Optional[str] = None,
        config: Optional[ParserConfig] = None,
        allocator: Optional[BlankNodeAllocator] = None,
    ):
        self.config = config or ParserConfig()
        self.config.validate()
        self.emitter = TripleEmitter(sink)
        self.allocator = allocator or BlankNodeAllocator(self.config.blank_node_prefix)
        self.prefixes = PrefixTable()
        self.resolver = ReferenceResolver(
            self.prefixes,
            base_uri if base_uri is not None else self.config.base_uri,
        )
        self.states = StateStack()
        self.subjects = SubjectStack()
        self.warnings: List[str] = []
        self._started = False
        self._finished = False

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def base(self) -> str:
        return self.resolver.base

    @property
    def current_state(self) -> Optional[ParseState]:
        return self.states.current

    @property
    def state_pushes(self) -> int:
        return self.states.push_count

    @property
    def state_pops(self) -> int:
        return self.states.pop_count

    @property
    def triple_count(self) -> int:
        return self.emitter.count

    # -------------------------------------------------------------------------
    # Event contract
    # -------------------------------------------------------------------------

    def on_document_start(self) -> None:
        if self._started:
            raise StructuralError("Parser instances cannot be reused")
        self._started = True
        self.states.push(Frame(ParseState.NONE))

    def on_prefix_mapping_start(self, prefix: Optional[str], uri: str) -> None:
        self._check_active()
        self.prefixes.push(prefix, uri)

    def on_prefix_mapping_end(self, prefix: Optional[str]) -> None:
        self._check_active()
        self.prefixes.pop(prefix)

    def on_element_start(
        self,
        namespace_uri: Optional[str],
        local_name: Optional[str],
        qname: Optional[str],
        attributes: Attributes = (),
    ) -> None:
        self._check_active()
        frame = self.states.peek()
        self._dispatch(
            frame.state, EventKind.START,
            frame, namespace_uri, local_name, qname, list(attributes),
        )

    def on_characters(self, text: str) -> None:
        self._check_active()
        frame = self.states.peek()
        self._dispatch(frame.state, EventKind.TEXT, frame, text)

    def on_element_end(
        self,
        namespace_uri: Optional[str],
        local_name: Optional[str],
        qname: Optional[str],
    ) -> None:
        self._check_active()
        top = self.states.peek()
        if top.state is ParseState.LITERAL and top.depth > 0:
            # Closes markup inside the literal, not the literal itself
            top.buffer.append(f"</{qname or local_name}>")
            top.namespaces.pop()
            top.depth -= 1
            return
        if len(self.states) == 1:
            raise StructuralError(f"End of element '{qname or local_name}' without matching start")
        frame = self.states.pop()
        self._dispatch(frame.state, EventKind.END, frame)

    def on_document_end(self) -> None:
        self._check_active()
        open_elements = len(self.states) - 1
        if open_elements != 0:
            raise StructuralError(f"Document ended with {open_elements} element(s) still open")
        self.states.pop()
        if self.subjects:
            raise StructuralError(f"Document ended with {len(self.subjects)} subject(s) still open")
        self.prefixes.clear()
        self._finished = True
        logger.debug(
            f"Parsed {self.emitter.count} triples, "
            f"{self.allocator.allocated} blank nodes, {len(self.warnings)} warnings"
        )

    # -------------------------------------------------------------------------
    # Dispatch helpers
    # -------------------------------------------------------------------------

    def _check_active(self) -> None:
        if not self._started:
            raise StructuralError("Event received before document start")
        if self._finished:
            raise StructuralError("Event received after document end")

    def _dispatch(self, state: ParseState, event: EventKind, *args) -> None:
        handler = lookup(state, event)
        if handler is not None:
            getattr(self, handler)(*args)

    def _is_rdf(self, name: str, qname: Optional[str],
                namespace_uri: Optional[str] = None, local_name: Optional[str] = None) -> bool:
        return is_rdf_name(name, qname, self.prefixes, namespace_uri, local_name)

    def _resolve(self, namespace_uri=None, local_name=None, qname=None) -> Optional[Reference]:
        """Resolve a name, turning an unbound prefix into a warning."""
        try:
            return self.resolver.resolve(namespace_uri, local_name, qname)
        except UnresolvedPrefixError as e:
            if self.config.strict:
                raise
            message = f"{e}; statement dropped"
            logger.warning(message)
            self.warnings.append(message)
            return None

    def _language_for(self, attributes: Attributes, parent: Frame) -> Optional[str]:
        own = _attribute(attributes, "xml:lang")
        if own is not None:
            return own or None
        return parent.language if self.config.inherit_language else None

    # -------------------------------------------------------------------------
    # Element start
    # -------------------------------------------------------------------------

    def _start_in_none(self, frame: Frame, namespace_uri, local_name, qname, attributes) -> None:
        language = self._language_for(attributes, frame)
        if self._is_rdf("RDF", qname, namespace_uri, local_name):
            base = _attribute(attributes, "xml:base")
            if base is not None:
                logger.debug(f"Base URI set to {base}")
                self.resolver.base = base
            self.states.push(Frame(ParseState.NONE, language=language))
            return

        node = self._parse_node(namespace_uri, local_name, qname, attributes, language)
        self.subjects.push(node)
        self.states.push(Frame(ParseState.SUBJECT, language=language))

    def _start_predicate(self, frame: Frame, namespace_uri, local_name, qname, attributes) -> None:
        subject = self.subjects.peek()
        language = self._language_for(attributes, frame)
        predicate = self._resolve(namespace_uri, local_name, qname)
        if predicate is None:
            # Nothing inside an unresolvable property can be stated
            self.states.push(Frame(ParseState.OBJECT, language=language))
            return

        reification = None
        object_form: Optional[Tuple[str, str]] = None
        arcs: List[Tuple[str, str]] = []
        for attr_qname, value in attributes:
            if _is_reserved(attr_qname):
                continue
            if self._is_rdf("ID", attr_qname):
                reification = self.resolver.resolve_fragment(value)
                continue
            form = next((f for f in _OBJECT_FORMS if self._is_rdf(f, attr_qname)), None)
            if form is None:
                arcs.append((attr_qname, value))
                continue
            if object_form is not None:
                logger.warning(
                    f"Ignoring {attr_qname}={value!r} on {qname or local_name}: "
                    f"object already given by rdf:{object_form[0]}"
                )
                continue
            object_form = (form, value)
            if (form == "parseType" and value == "Resource"
                    and self.config.parse_type_resource_short_circuit):
                break

        new = Frame(ParseState.PREDICATE, language=language, predicate=predicate,
                    reification=reification)
        form, value = object_form or (None, None)

        if form in ("resource", "nodeID"):
            if form == "resource":
                obj = self.resolver.resolve_value(value)
            else:
                obj = Reference.blank(value)
            self._emit(subject, new, obj)
            self._emit_property_attributes(obj, arcs, language)
            new.state = ParseState.OBJECT

        elif form == "datatype":
            new.state = ParseState.LITERAL
            new.datatype = Reference(value)
            self._drop_arcs(arcs, qname or local_name)

        elif form == "parseType" and value == "Resource":
            node = self.allocator.new_node()
            self._emit(subject, new, node)
            self._emit_property_attributes(node, arcs, language)
            self.subjects.push(node)
            self.states.push(Frame(ParseState.SUBJECT, language=language))
            return

        elif form == "parseType":
            if value != "Literal":
                logger.warning(f"Unsupported rdf:parseType={value!r}, reading content as Literal")
            new.state = ParseState.LITERAL
            new.datatype = RDF_XML_LITERAL
            new.depth = 0
            self._drop_arcs(arcs, qname or local_name)

        elif arcs:
            node = self.allocator.new_node()
            self._emit(subject, new, node)
            self._emit_property_attributes(node, arcs, language)
            new.state = ParseState.OBJECT

        self.states.push(new)

    def _start_nested_node(self, frame: Frame, namespace_uri, local_name, qname, attributes) -> None:
        language = self._language_for(attributes, frame)
        node = self._parse_node(namespace_uri, local_name, qname, attributes, language)
        self._emit(self.subjects.peek(), frame, node)
        # The enclosing property now has its object
        frame.state = ParseState.OBJECT
        frame.buffer.clear()
        self.subjects.push(node)
        self.states.push(Frame(ParseState.SUBJECT, language=language))

    def _start_ignored(self, frame: Frame, namespace_uri, local_name, qname, attributes) -> None:
        logger.debug(f"Skipping element {qname or local_name}: object already determined")
        self.states.push(Frame(ParseState.OBJECT, language=frame.language))

    def _start_literal_markup(self, frame: Frame, namespace_uri, local_name, qname, attributes) -> None:
        name = qname or local_name
        in_scope = frame.namespaces[-1] if frame.namespaces else {}
        declared = {}
        if frame.datatype == RDF_XML_LITERAL:
            declared = self._literal_declarations(name, namespace_uri, attributes, in_scope)
        frame.namespaces.append({**in_scope, **declared})

        decls = "".join(
            f" xmlns:{p}={quoteattr(uri)}" if p else f" xmlns={quoteattr(uri)}"
            for p, uri in declared.items()
        )
        attrs = "".join(f" {q}={quoteattr(v)}" for q, v in attributes)
        frame.buffer.append(f"<{name}{decls}{attrs}>")
        frame.depth += 1

    def _literal_declarations(self, name, namespace_uri, attributes, in_scope):
        """
        Namespace declarations a literal element needs to stand on its own.

        Only prefixes the element and its attributes actually use are
        declared, and only where the enclosing literal markup has not
        already bound them to the same URI.
        """
        used = {}
        prefix, _ = split_qname(name)
        used[prefix] = namespace_uri or ""
        for attr_qname, _ in attributes:
            attr_prefix, _ = split_qname(attr_qname)
            if attr_prefix:
                used[attr_prefix] = self.prefixes.get(attr_prefix) or ""

        declared = {}
        for p, uri in used.items():
            if p in (XML_PREFIX, "xmlns") or (p and not uri):
                continue
            if in_scope.get(p, "") != uri:
                declared[p] = uri
        return declared

    # -------------------------------------------------------------------------
    # Character data
    # -------------------------------------------------------------------------

    def _append_text(self, frame: Frame, text: str) -> None:
        frame.buffer.append(text)

    def _append_literal_text(self, frame: Frame, text: str) -> None:
        if frame.datatype == RDF_XML_LITERAL:
            text = escape(text)
        frame.buffer.append(text)

    def _ignore_text(self, frame: Frame, text: str) -> None:
        if self.config.log_ignored_content and text.strip():
            logger.debug(f"Ignoring text after object was determined: {text.strip()[:40]!r}")

    # -------------------------------------------------------------------------
    # Element end (the frame has already been popped)
    # -------------------------------------------------------------------------

    def _end_none(self, frame: Frame) -> None:
        pass

    def _end_subject(self, frame: Frame) -> None:
        self.subjects.pop()

    def _end_predicate(self, frame: Frame) -> None:
        literal = build_literal(frame.text(), language=frame.language)
        self._emit(self.subjects.peek(), frame, literal)

    def _end_object(self, frame: Frame) -> None:
        pass

    def _end_literal(self, frame: Frame) -> None:
        literal = build_literal(frame.text(), datatype=frame.datatype)
        self._emit(self.subjects.peek(), frame, literal)

    # -------------------------------------------------------------------------
    # Statement helpers
    # -------------------------------------------------------------------------

    def _emit(self, subject: Reference, frame: Frame, obj) -> None:
        """Emit the statement of a property frame, consuming its rdf:ID."""
        self.emitter.emit(subject, frame.predicate, obj, frame.reification)
        frame.reification = None

    def _parse_node(self, namespace_uri, local_name, qname, attributes, language) -> Reference:
        """
        Identify a node element and emit the statements it carries itself.

        Identity comes from rdf:about, rdf:nodeID or rdf:ID, else a fresh
        blank node. Typed nodes get an rdf:type statement and remaining
        attributes become property statements.
        """
        node = None
        arcs: List[Tuple[str, str]] = []
        for attr_qname, value in attributes:
            if _is_reserved(attr_qname):
                continue
            if self._is_rdf("about", attr_qname):
                candidate = self.resolver.resolve_value(value)
            elif self._is_rdf("nodeID", attr_qname):
                candidate = Reference.blank(value)
            elif self._is_rdf("ID", attr_qname):
                candidate = self.resolver.resolve_fragment(value)
            else:
                arcs.append((attr_qname, value))
                continue
            if node is None:
                node = candidate
            else:
                logger.warning(f"Ignoring {attr_qname}={value!r}: node already identified as {node.value}")

        if node is None:
            node = self.allocator.new_node()

        if not self._is_rdf("Description", qname, namespace_uri, local_name):
            node_type = self._resolve(namespace_uri, local_name, qname)
            if node_type is not None:
                self.emitter.link(node, RDF_TYPE, node_type)

        self._emit_property_attributes(node, arcs, language)
        return node

    def _emit_property_attributes(self, node: Reference, arcs, language: Optional[str]) -> None:
        for attr_qname, value in arcs:
            if self._is_rdf("type", attr_qname):
                self.emitter.link(node, RDF_TYPE, self.resolver.resolve_value(value))
                continue
            predicate = self._resolve(qname=attr_qname)
            if predicate is not None:
                self.emitter.link(node, predicate, build_literal(value, language=language))

    def _drop_arcs(self, arcs, element: str) -> None:
        for attr_qname, _ in arcs:
            logger.warning(f"Ignoring property attribute {attr_qname} on literal property {element}")


def _attribute(attributes: Attributes, qname: str) -> Optional[str]:
    for name, value in attributes:
        if name == qname:
            return value
    return None


def _is_reserved(qname: str) -> bool:
    """xmlns declarations and xml:* attributes never carry statements."""
    if qname == "xmlns" or qname.startswith("xmlns:"):
        return True
    prefix, _ = split_qname(qname)
    return prefix == XML_PREFIX
