"""
Triple sinks and statement emission.

GraphHandler is the single-operation sink the parser talks to. Graph is
the in-memory collector used by the format-level API, with a columnar
export for bulk loading into a Polars-backed store.
"""

import logging
from typing import Iterator, List, Optional, Protocol, Set, Tuple, runtime_checkable

import polars as pl

from rdfxml_stream.namespaces import (
    RDF_OBJECT,
    RDF_PREDICATE,
    RDF_STATEMENT,
    RDF_SUBJECT,
    RDF_TYPE,
)
from rdfxml_stream.terms import Literal, Reference, Term, Triple

logger = logging.getLogger(__name__)


@runtime_checkable
class GraphHandler(Protocol):
    """Receives statements as they are recognized."""

    def link(self, subject: Reference, predicate: Reference, obj: Term) -> None:
        ...


class Graph:
    """
    Collects triples in emission order.

    Duplicates are kept: the parser emits every statement exactly once, so
    a repeated triple means the document stated it twice.
    """

    def __init__(self):
        self._triples: List[Triple] = []

    def link(self, subject: Reference, predicate: Reference, obj: Term) -> None:
        self._triples.append(Triple(subject=subject, predicate=predicate, object=obj))

    @property
    def triples(self) -> List[Triple]:
        return list(self._triples)

    def __len__(self) -> int:
        return len(self._triples)

    def __iter__(self) -> Iterator[Triple]:
        return iter(self._triples)

    def __contains__(self, triple: object) -> bool:
        return triple in self._triples

    def subjects(self) -> Set[Reference]:
        return {t.subject for t in self._triples}

    def objects(self, subject: Reference, predicate: Reference) -> List[Term]:
        """Objects of all statements with the given subject and predicate."""
        return [
            t.object for t in self._triples
            if t.subject == subject and t.predicate == predicate
        ]

    def to_columnar(self) -> Tuple[List[str], List[str], List[str]]:
        """Extract columnar data for fast insertion."""
        return (
            [t.subject.value for t in self._triples],
            [t.predicate.value for t in self._triples],
            [t.object.value for t in self._triples],
        )

    def to_dataframe(self) -> pl.DataFrame:
        """
        Export the graph as a Polars DataFrame.

        Columns: subject, predicate, object, object_kind, datatype, language.
        """
        subjects, predicates, objects = self.to_columnar()
        kinds: List[str] = []
        datatypes: List[Optional[str]] = []
        languages: List[Optional[str]] = []
        for t in self._triples:
            kinds.append(t.object.kind.value)
            if isinstance(t.object, Literal):
                datatypes.append(t.object.datatype.value if t.object.datatype else None)
                languages.append(t.object.language)
            else:
                datatypes.append(None)
                languages.append(None)

        return pl.DataFrame(
            {
                "subject": subjects,
                "predicate": predicates,
                "object": objects,
                "object_kind": kinds,
                "datatype": datatypes,
                "language": languages,
            },
            schema={
                "subject": pl.Utf8,
                "predicate": pl.Utf8,
                "object": pl.Utf8,
                "object_kind": pl.Utf8,
                "datatype": pl.Utf8,
                "language": pl.Utf8,
            },
        )

    def to_ntriples(self) -> str:
        return "\n".join(str(t) for t in self._triples)


class TripleEmitter:
    """
    Forwards statements to a sink, reifying them on request.

    emit() is used for arcs read from predicate elements, which may carry
    an rdf:ID. link() is the plain path for statements intrinsic to a node
    (its type and property attributes).
    """

    def __init__(self, sink: GraphHandler):
        self.sink = sink
        self.count = 0

    def link(self, subject: Reference, predicate: Reference, obj: Term) -> None:
        self.sink.link(subject, predicate, obj)
        self.count += 1

    def emit(
        self,
        subject: Reference,
        predicate: Reference,
        obj: Term,
        reification: Optional[Reference] = None,
    ) -> None:
        """
        Emit a statement, plus its reification when a reference is given.

        The reification statements follow in a fixed order: rdf:subject,
        rdf:predicate, rdf:object, rdf:type rdf:Statement.
        """
        self.link(subject, predicate, obj)
        if reification is None:
            return
        logger.debug(f"Reifying statement as {reification.value}")
        self.link(reification, RDF_SUBJECT, subject)
        self.link(reification, RDF_PREDICATE, predicate)
        self.link(reification, RDF_OBJECT, obj)
        self.link(reification, RDF_TYPE, RDF_STATEMENT)
