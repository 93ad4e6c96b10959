"""
Parser states, per-element frames and the transition table.

Every element start pushes exactly one Frame and its matching end pops it.
The only exception is markup inside an XML literal: those elements adjust
the literal frame's depth counter instead of pushing frames.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

from rdfxml_stream.errors import StructuralError
from rdfxml_stream.terms import Reference


class ParseState(Enum):
    """What the element owning a frame is being read as."""
    NONE = "none"           # outside any node (document level, rdf:RDF)
    SUBJECT = "subject"     # node element; children are predicates
    PREDICATE = "predicate" # property element; object not known yet
    OBJECT = "object"       # property element whose object is already emitted
    LITERAL = "literal"     # property element captured as a literal


class EventKind(Enum):
    START = "start"
    END = "end"
    TEXT = "text"


@dataclass
class Frame:
    """
    Parser state for one open element.

    Attributes:
        state: How the element is being read
        language: xml:lang in effect for this element
        predicate: Property IRI (predicate and literal frames)
        datatype: Literal datatype (literal frames)
        reification: rdf:ID reference for the statement this frame emits
        depth: Open elements inside an XML literal
        namespaces: Bindings in scope for each open element inside an XML literal
        buffer: Character data collected for this frame only
    """
    state: ParseState
    language: Optional[str] = None
    predicate: Optional[Reference] = None
    datatype: Optional[Reference] = None
    reification: Optional[Reference] = None
    depth: int = 0
    namespaces: List[Dict[str, str]] = field(default_factory=list)
    buffer: List[str] = field(default_factory=list)

    def text(self) -> str:
        return "".join(self.buffer)


T = TypeVar("T")


class Stack(Generic[T]):
    """Explicit push/pop/peek stack that fails loudly on underflow."""

    name = "stack"

    def __init__(self):
        self._items: List[T] = []
        self.push_count = 0
        self.pop_count = 0

    def push(self, item: T) -> None:
        self._items.append(item)
        self.push_count += 1

    def pop(self) -> T:
        if not self._items:
            raise StructuralError(f"{self.name} underflow")
        self.pop_count += 1
        return self._items.pop()

    def peek(self) -> T:
        if not self._items:
            raise StructuralError(f"{self.name} is empty")
        return self._items[-1]

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def clear(self) -> None:
        self._items.clear()


class StateStack(Stack[Frame]):
    name = "state stack"

    @property
    def current(self) -> Optional[ParseState]:
        """State at the top, or None when empty."""
        return self._items[-1].state if self._items else None


class SubjectStack(Stack[Reference]):
    name = "subject stack"


# (top-of-stack state, event) -> handler method on RDFXMLEventParser.
# Pairs missing from the table ignore the event.
TRANSITIONS: Dict[Tuple[ParseState, EventKind], str] = {
    (ParseState.NONE, EventKind.START): "_start_in_none",
    (ParseState.SUBJECT, EventKind.START): "_start_predicate",
    (ParseState.PREDICATE, EventKind.START): "_start_nested_node",
    (ParseState.OBJECT, EventKind.START): "_start_ignored",
    (ParseState.LITERAL, EventKind.START): "_start_literal_markup",

    (ParseState.NONE, EventKind.END): "_end_none",
    (ParseState.SUBJECT, EventKind.END): "_end_subject",
    (ParseState.PREDICATE, EventKind.END): "_end_predicate",
    (ParseState.OBJECT, EventKind.END): "_end_object",
    (ParseState.LITERAL, EventKind.END): "_end_literal",

    (ParseState.PREDICATE, EventKind.TEXT): "_append_text",
    (ParseState.LITERAL, EventKind.TEXT): "_append_literal_text",
    (ParseState.OBJECT, EventKind.TEXT): "_ignore_text",
}


def lookup(state: ParseState, event: EventKind) -> Optional[str]:
    """Handler name for a transition, or None if the event is ignored."""
    return TRANSITIONS.get((state, event))
