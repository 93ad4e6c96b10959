"""
Blank node allocation.

One allocator belongs to one parse, so concurrent parses never share a
counter and a fresh parser always starts at 0.
"""

from rdfxml_stream.terms import Reference


class BlankNodeAllocator:
    """Mints blank node labels: a fixed prefix plus an increasing counter."""

    def __init__(self, prefix: str = "bn"):
        self.prefix = prefix
        self._next = 0

    def new_id(self) -> str:
        label = f"{self.prefix}{self._next}"
        self._next += 1
        return label

    def new_node(self) -> Reference:
        return Reference.blank(self.new_id())

    @property
    def allocated(self) -> int:
        """Number of labels handed out so far."""
        return self._next
