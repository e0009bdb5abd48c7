"""Tagged view over raw schema mappings.

A node's kind is decided once, here, so resolvers dispatch on a closed set
of tags instead of re-checking raw keys. A mapping carrying ``$ref`` is a
reference no matter what else it contains.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Mapping

COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")
PRIMITIVE_TYPES = frozenset({"string", "number", "integer", "boolean", "null"})


class SchemaKind(enum.Enum):
    REFERENCE = "reference"
    COMPOSITION = "composition"
    OBJECT = "object"
    ARRAY = "array"
    ENUM = "enum"
    PRIMITIVE = "primitive"


def _classify(raw: Mapping[str, Any]) -> SchemaKind:
    if isinstance(raw.get("$ref"), str):
        return SchemaKind.REFERENCE
    if any(isinstance(raw.get(k), list) for k in COMPOSITION_KEYWORDS):
        return SchemaKind.COMPOSITION
    schema_type = raw.get("type")
    if schema_type == "array":
        return SchemaKind.ARRAY
    if isinstance(raw.get("enum"), list):
        return SchemaKind.ENUM
    if schema_type in PRIMITIVE_TYPES:
        return SchemaKind.PRIMITIVE
    return SchemaKind.OBJECT


@dataclass(frozen=True)
class SchemaNode:
    """A schema mapping together with its resolved kind."""

    kind: SchemaKind
    raw: Mapping[str, Any]

    @property
    def is_reference(self) -> bool:
        return self.kind is SchemaKind.REFERENCE

    @property
    def ref(self) -> str | None:
        return self.raw["$ref"] if self.is_reference else None

    @property
    def type(self) -> str | None:
        schema_type = self.raw.get("type")
        return schema_type if isinstance(schema_type, str) else None

    @property
    def composition(self) -> tuple[str, list[Any]] | None:
        """Return (keyword, items) for the first composition keyword present."""
        if self.kind is not SchemaKind.COMPOSITION:
            return None
        for keyword in COMPOSITION_KEYWORDS:
            items = self.raw.get(keyword)
            if isinstance(items, list):
                return keyword, items
        return None

    @property
    def properties(self) -> dict[str, Any]:
        properties = self.raw.get("properties")
        return dict(properties) if isinstance(properties, Mapping) else {}

    @property
    def required(self) -> frozenset[str]:
        # Malformed `required` means nothing is required.
        required = self.raw.get("required")
        if not isinstance(required, list):
            return frozenset()
        return frozenset(r for r in required if isinstance(r, str))

    @property
    def read_only(self) -> bool:
        return bool(self.raw.get("readOnly"))

    @property
    def nullable(self) -> bool:
        return bool(self.raw.get("nullable"))

    @property
    def enum(self) -> list[Any] | None:
        values = self.raw.get("enum")
        return values if isinstance(values, list) else None

    def without(self, keyword: str) -> dict[str, Any]:
        """Return a copy of the raw mapping minus one keyword."""
        return {k: v for k, v in self.raw.items() if k != keyword}


def parse_node(raw: Any) -> SchemaNode:
    """Classify a raw schema. Non-mappings become an empty object node."""
    if isinstance(raw, SchemaNode):
        return raw
    if not isinstance(raw, Mapping):
        raw = {}
    return SchemaNode(_classify(raw), raw)
