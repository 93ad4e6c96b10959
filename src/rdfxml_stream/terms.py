"""
RDF Terms.

Value objects shared by the parser, the emitter and the sinks:

- Reference: an IRI or a blank node, identified by its string value
- Literal: lexical value with optional datatype and language tag
- Triple: a (subject, predicate, object) statement

Blank nodes use the N-Triples label convention ("_:label") so that a
reference stays a plain string value with identity by equality.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


BLANK_PREFIX = "_:"


class TermKind(Enum):
    """RDF term kind."""
    IRI = "iri"
    BNODE = "bnode"
    LITERAL = "literal"


@dataclass(frozen=True, slots=True)
class Reference:
    """
    An absolute or relative IRI, or a blank node.

    Attributes:
        value: The IRI string, or "_:label" for blank nodes
    """
    value: str

    @classmethod
    def blank(cls, label: str) -> "Reference":
        """Create a blank node reference from its label."""
        return cls(BLANK_PREFIX + label)

    @property
    def is_blank(self) -> bool:
        return self.value.startswith(BLANK_PREFIX)

    @property
    def label(self) -> Optional[str]:
        """Blank node label, or None for IRIs."""
        if self.is_blank:
            return self.value[len(BLANK_PREFIX):]
        return None

    @property
    def kind(self) -> TermKind:
        return TermKind.BNODE if self.is_blank else TermKind.IRI

    def __str__(self) -> str:
        if self.is_blank:
            return self.value
        return f"<{self.value}>"


@dataclass(frozen=True, slots=True)
class Literal:
    """
    An RDF literal.

    Attributes:
        value: Lexical form
        datatype: Datatype IRI (typed and XML literals)
        language: Language tag (plain literals)
    """
    value: str
    datatype: Optional[Reference] = None
    language: Optional[str] = None

    @property
    def kind(self) -> TermKind:
        return TermKind.LITERAL

    def __str__(self) -> str:
        escaped = (self.value
            .replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("\r", "\\r"))
        if self.datatype is not None:
            return f'"{escaped}"^^{self.datatype}'
        if self.language:
            return f'"{escaped}"@{self.language}'
        return f'"{escaped}"'


# Object position accepts either kind of term
Term = Union[Reference, Literal]


@dataclass(frozen=True, slots=True)
class Triple:
    """A single RDF statement."""
    subject: Reference
    predicate: Reference
    object: Term

    def __str__(self) -> str:
        return f"{self.subject} {self.predicate} {self.object} ."


def build_literal(
    text: str,
    datatype: Optional[Union[str, Reference]] = None,
    language: Optional[str] = None,
) -> Literal:
    """
    Build a literal from raw text.

    Neither the datatype IRI nor the language tag is validated; both are
    stored verbatim. An empty language tag counts as no language.

    Args:
        text: Lexical value
        datatype: Datatype IRI as string or Reference
        language: Language tag

    Returns:
        Literal
    """
    if isinstance(datatype, str):
        datatype = Reference(datatype)
    return Literal(value=text, datatype=datatype, language=language or None)
