"""
Namespace constants and the scoped prefix table.
"""

from typing import Dict, List, Optional

from rdfxml_stream.terms import Reference


RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
XML_NS = "http://www.w3.org/XML/1998/namespace"

RDF_TYPE = Reference(RDF_NS + "type")
RDF_SUBJECT = Reference(RDF_NS + "subject")
RDF_PREDICATE = Reference(RDF_NS + "predicate")
RDF_OBJECT = Reference(RDF_NS + "object")
RDF_STATEMENT = Reference(RDF_NS + "Statement")
RDF_XML_LITERAL = Reference(RDF_NS + "XMLLiteral")

# Conventional prefix, honoured even when the document never binds it
RDF_PREFIX = "rdf"
XML_PREFIX = "xml"


class PrefixTable:
    """
    Prefix to namespace URI mapping, scoped by prefix-mapping events.

    Each prefix keeps a stack of bindings so that an inner re-declaration
    is undone when its scope ends. The empty prefix holds the default
    namespace.
    """

    def __init__(self):
        self._bindings: Dict[str, List[str]] = {}

    @staticmethod
    def _key(prefix: Optional[str]) -> str:
        return prefix or ""

    def push(self, prefix: Optional[str], uri: str) -> None:
        """Bind a prefix for the scope that starts now."""
        self._bindings.setdefault(self._key(prefix), []).append(uri)

    def pop(self, prefix: Optional[str]) -> Optional[str]:
        """End the innermost binding of a prefix. Returns the removed URI."""
        key = self._key(prefix)
        stack = self._bindings.get(key)
        if not stack:
            return None
        uri = stack.pop()
        if not stack:
            del self._bindings[key]
        return uri

    def get(self, prefix: Optional[str]) -> Optional[str]:
        key = self._key(prefix)
        if key == XML_PREFIX:
            return XML_NS
        stack = self._bindings.get(key)
        return stack[-1] if stack else None

    def __contains__(self, prefix: Optional[str]) -> bool:
        return self.get(prefix) is not None

    def __len__(self) -> int:
        return len(self._bindings)

    @property
    def rdf_is_default(self) -> bool:
        """True while the RDF namespace is the unprefixed default."""
        return self.get("") == RDF_NS

    def clear(self) -> None:
        self._bindings.clear()


def split_qname(qname: str) -> tuple:
    """Split 'prefix:local' into (prefix, local); prefix is '' when absent."""
    prefix, sep, local = qname.partition(":")
    if not sep:
        return "", qname
    return prefix, local


def is_rdf_name(
    name: str,
    qname: Optional[str],
    prefixes: PrefixTable,
    namespace_uri: Optional[str] = None,
    local_name: Optional[str] = None,
) -> bool:
    """
    Check whether an element or attribute names the RDF term `name`.

    Args:
        name: RDF local name to test for (e.g. "about", "Description")
        qname: Qualified name as written in the document
        prefixes: Live prefix table
        namespace_uri: Namespace URI reported by the tokenizer, if any
        local_name: Local name reported by the tokenizer, if any
    """
    if namespace_uri:
        return namespace_uri == RDF_NS and (local_name or "") == name
    if not qname:
        return False
    prefix, local = split_qname(qname)
    if local != name:
        return False
    if prefix:
        bound = prefixes.get(prefix)
        if bound is None:
            return prefix == RDF_PREFIX
        return bound == RDF_NS
    return prefixes.rdf_is_default
