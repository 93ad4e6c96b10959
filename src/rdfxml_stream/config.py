"""
Parser configuration.

Options can be given in code, as a dict, or as a YAML document:

    base_uri: http://example.org/doc
    blank_node_prefix: genid
    strict: false
    inherit_language: true
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from rdfxml_stream.errors import ConfigValidationError

logger = logging.getLogger(__name__)

_PREFIX_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class ParserConfig:
    """
    Options for one RDF/XML parse.

    Attributes:
        base_uri: Base for relative references (overridden by xml:base on rdf:RDF)
        blank_node_prefix: Prefix of minted blank node labels
        strict: Raise on unbound prefixes instead of dropping the statement
        inherit_language: xml:lang applies to descendants, not just the element
        parse_type_resource_short_circuit: Stop scanning a property element's
            attributes after rdf:parseType="Resource"
        log_ignored_content: Debug-log text discarded after an object was fixed
    """
    base_uri: str = ""
    blank_node_prefix: str = "bn"
    strict: bool = False
    inherit_language: bool = True
    parse_type_resource_short_circuit: bool = False
    log_ignored_content: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_uri": self.base_uri,
            "blank_node_prefix": self.blank_node_prefix,
            "strict": self.strict,
            "inherit_language": self.inherit_language,
            "parse_type_resource_short_circuit": self.parse_type_resource_short_circuit,
            "log_ignored_content": self.log_ignored_content,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        known = set(cls().to_dict())
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown parser options: {sorted(unknown)}")
        config = cls(
            base_uri=data.get("base_uri") or "",
            blank_node_prefix=data.get("blank_node_prefix", "bn"),
            strict=bool(data.get("strict", False)),
            inherit_language=bool(data.get("inherit_language", True)),
            parse_type_resource_short_circuit=bool(
                data.get("parse_type_resource_short_circuit", False)
            ),
            log_ignored_content=bool(data.get("log_ignored_content", True)),
        )
        config.validate()
        return config

    @classmethod
    def from_yaml(cls, text: str) -> "ParserConfig":
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ConfigValidationError("Parser configuration must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a YAML file."""
        return cls.from_yaml(Path(path).read_text(encoding="utf-8"))

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ConfigValidationError: If an option is invalid
        """
        if not isinstance(self.base_uri, str):
            raise ConfigValidationError("base_uri must be a string")
        if not isinstance(self.blank_node_prefix, str) or not _PREFIX_RE.match(self.blank_node_prefix):
            raise ConfigValidationError(
                f"blank_node_prefix must be a non-empty name, got {self.blank_node_prefix!r}"
            )
