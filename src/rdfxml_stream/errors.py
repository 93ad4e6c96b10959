"""
Exceptions raised while reading RDF/XML.
"""


class RDFXMLError(Exception):
    """Base class for RDF/XML reading errors."""
    pass


class UnresolvedPrefixError(RDFXMLError):
    """A qualified name uses a prefix that is not bound in the current scope."""

    def __init__(self, qname: str, prefix: str):
        super().__init__(f"Unbound prefix '{prefix}' in qualified name '{qname}'")
        self.qname = qname
        self.prefix = prefix


class StructuralError(RDFXMLError):
    """The event stream does not mirror well-formed markup nesting."""
    pass


class ConfigValidationError(RDFXMLError):
    """Parser configuration validation error."""
    pass
