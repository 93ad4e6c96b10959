"""
Reference resolution against the document base and the prefix table.

Resolution here is string concatenation. IRI normalization (dot segments,
percent-decoding) is left to whoever consumes the emitted triples.
"""

import re
from typing import Optional

from rdfxml_stream.errors import UnresolvedPrefixError
from rdfxml_stream.namespaces import PrefixTable, split_qname
from rdfxml_stream.terms import Reference


_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def is_relative(uri: str) -> bool:
    """True if the URI has no scheme."""
    return _SCHEME_RE.match(uri) is None


class ReferenceResolver:
    """
    Turns names and attribute values into References.

    Precedence for resolve():
        1. namespace URI (made absolute against base) + local name
        2. prefix of the qualified name looked up in the table + local part
        3. base + local name
    """

    def __init__(self, prefixes: PrefixTable, base: Optional[str] = None):
        self.prefixes = prefixes
        self.base = base or ""

    def resolve(
        self,
        namespace_uri: Optional[str] = None,
        local_name: Optional[str] = None,
        qname: Optional[str] = None,
    ) -> Reference:
        """
        Resolve a name to a Reference.

        Raises:
            UnresolvedPrefixError: qname prefix not bound
        """
        if namespace_uri is not None:
            prefix = self.base + namespace_uri if is_relative(namespace_uri) else namespace_uri
            return Reference(prefix + (local_name or ""))

        if qname is not None:
            prefix, local = split_qname(qname)
            if prefix:
                uri = self.prefixes.get(prefix)
                if uri is None:
                    raise UnresolvedPrefixError(qname, prefix)
                return Reference(uri + local)
            if local_name is None:
                local_name = local

        return Reference(self.base + (local_name or ""))

    def resolve_value(self, value: str) -> Reference:
        """Resolve an attribute value such as rdf:about or rdf:resource."""
        return self.resolve(namespace_uri=value)

    def resolve_fragment(self, identifier: str) -> Reference:
        """Resolve an rdf:ID value to base#identifier."""
        return self.resolve(local_name="#" + identifier)
