"""Primitive, enum and array resolvers."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from . import objects, resolvers
from .context import ResolutionContext, ResolvedType
from .naming import get_key
from .nodes import SchemaKind, SchemaNode

_NUMERIC_TYPES = frozenset({"number", "integer"})


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    escaped = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _number_key(value: int | float) -> str:
    text = repr(value)
    key = "NUMBER_" + text.replace("-", "MINUS_").replace(".", "_DOT_")
    return re.sub(r"[^A-Za-z0-9_]", "_", key)


def enum_entries(values: Iterable[Any]) -> str:
    """Render ``key: literal,`` lines of a const enum object.

    null is left out; duplicate keys keep their first value.
    """
    lines: list[str] = []
    seen: set[str] = set()
    for value in values:
        if value is None:
            continue
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            key = _number_key(value)
        elif isinstance(value, str):
            key = get_key(value)
        else:
            key = get_key(_literal(value))
        if key in seen:
            continue
        seen.add(key)
        lines.append(f"  {key}: {_literal(value)},\n")
    return "".join(lines)


def get_enum(values: Iterable[Any], enum_name: str) -> str:
    """Render a named enum as a type plus an ``as const`` object."""
    return (
        f"export type {enum_name} = typeof {enum_name}[keyof typeof {enum_name}];\n"
        "\n\n"
        "// eslint-disable-next-line @typescript-eslint/no-redeclare\n"
        f"export const {enum_name} = {{\n{enum_entries(values)}}} as const;\n"
    )


def _get_enum_literal(node: SchemaNode) -> ResolvedType:
    values = node.enum or []
    literals: list[str] = []
    for value in values:
        literal = _literal(value)
        if literal not in literals:
            literals.append(literal)
    schema_type = node.type
    if schema_type in _NUMERIC_TYPES:
        schema_type = "number"
    return ResolvedType(
        value=" | ".join(literals) or "never",
        is_enum=True,
        type=schema_type or "string",
    )


def _get_primitive(node: SchemaNode) -> ResolvedType:
    schema_type = node.type
    if schema_type in _NUMERIC_TYPES:
        return ResolvedType("number", type="number")
    if schema_type == "boolean":
        return ResolvedType("boolean", type="boolean")
    if schema_type == "null":
        return ResolvedType("null", type="null")
    if node.raw.get("format") == "binary":
        return ResolvedType("Blob", type="string")
    return ResolvedType("string", type="string")


async def get_array(
    node: SchemaNode, name: str | None, context: ResolutionContext,
) -> ResolvedType:
    """Resolve ``type: array``; inline item objects are named ``<name>Item``."""
    items = node.raw.get("items")
    if not isinstance(items, Mapping):
        return ResolvedType("unknown[]", type="array")

    resolved = await resolvers.resolve_object(
        items, f"{name}Item" if name else None, context,
    )
    value = resolved.value
    if "|" in value or "&" in value:
        value = f"({value})"
    return ResolvedType(
        value=f"{value}[]",
        imports=list(resolved.imports),
        schemas=list(resolved.schemas),
        is_enum=False,
        type="array",
    )


async def get_scalar(
    node: SchemaNode, name: str | None, context: ResolutionContext,
) -> ResolvedType:
    """Resolve a non-reference node by kind. ``nullable`` adds ``| null``."""
    if node.kind is SchemaKind.ARRAY:
        resolved = await get_array(node, name, context)
    elif node.kind is SchemaKind.ENUM:
        resolved = _get_enum_literal(node)
    elif node.kind is SchemaKind.PRIMITIVE:
        resolved = _get_primitive(node)
    else:
        resolved = await objects.get_object(node, name, context)

    if node.nullable and resolved.value != "null" and not resolved.value.endswith("| null"):
        resolved.value += " | null"
    return resolved
