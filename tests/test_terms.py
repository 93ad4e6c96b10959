"""
Tests for RDF terms and blank node allocation.
"""

import pytest

from rdfxml_stream.bnodes import BlankNodeAllocator
from rdfxml_stream.terms import Literal, Reference, TermKind, Triple, build_literal


class TestReference:
    """Test Reference value semantics."""

    def test_equality_by_value(self):
        """References with the same string are equal and hash alike."""
        assert Reference("http://a/b") == Reference("http://a/b")
        assert len({Reference("http://a/b"), Reference("http://a/b")}) == 1

    def test_blank_node(self):
        """Blank nodes carry the _: label convention."""
        node = Reference.blank("bn3")
        assert node.value == "_:bn3"
        assert node.is_blank
        assert node.label == "bn3"
        assert node.kind == TermKind.BNODE

    def test_iri(self):
        ref = Reference("http://a/b")
        assert not ref.is_blank
        assert ref.label is None
        assert str(ref) == "<http://a/b>"

    def test_immutable(self):
        ref = Reference("http://a/b")
        with pytest.raises(Exception):
            ref.value = "http://other"


class TestLiteral:
    """Test literal construction and formatting."""

    def test_build_plain(self):
        lit = build_literal("Hi")
        assert lit == Literal("Hi")
        assert lit.datatype is None
        assert lit.language is None

    def test_build_stores_verbatim(self):
        """Datatype and language are not validated."""
        lit = build_literal("x", datatype="not a uri", language="xx-!!")
        assert lit.datatype == Reference("not a uri")
        assert lit.language == "xx-!!"

    def test_empty_language_is_none(self):
        assert build_literal("x", language="").language is None

    def test_str_forms(self):
        assert str(Literal("Hi")) == '"Hi"'
        assert str(Literal("Hi", language="en")) == '"Hi"@en'
        assert str(Literal("5", datatype=Reference("http://dt"))) == '"5"^^<http://dt>'
        assert str(Literal('say "x"\n')) == '"say \\"x\\"\\n"'

    def test_triple_str(self):
        triple = Triple(Reference("http://s"), Reference("http://p"), Literal("o"))
        assert str(triple) == '<http://s> <http://p> "o" .'


class TestBlankNodeAllocator:
    """Test blank node label allocation."""

    def test_counter_starts_at_zero(self):
        allocator = BlankNodeAllocator()
        assert allocator.new_id() == "bn0"
        assert allocator.new_id() == "bn1"
        assert allocator.allocated == 2

    def test_instances_are_independent(self):
        """Each allocator owns its counter."""
        first = BlankNodeAllocator()
        first.new_id()
        first.new_id()
        second = BlankNodeAllocator()
        assert second.new_id() == "bn0"

    def test_custom_prefix(self):
        allocator = BlankNodeAllocator(prefix="genid")
        assert allocator.new_node() == Reference("_:genid0")

    def test_never_reused(self):
        allocator = BlankNodeAllocator()
        labels = [allocator.new_id() for _ in range(100)]
        assert len(set(labels)) == 100
