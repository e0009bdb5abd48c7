"""Synthesize structural types from object schemas."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from . import combine, resolvers
from .context import ImportRef, ResolutionContext, ResolvedType
from .doc import js_doc
from .naming import get_key, pascal
from .nodes import SchemaNode, parse_node
from .ordered import gather_ordered
from .ref import get_ref_info

logger = logging.getLogger(__name__)


def member_name(
    name: str | None, key: str, context: ResolutionContext,
) -> str | None:
    """Name nested declarations <Parent><Key>, avoiding top-level schemas."""
    if not name:
        return None
    prop_name = pascal(name) + pascal(key)
    if context.has_target_schema(prop_name):
        logger.debug("%s is a top-level schema, using %sProperty", prop_name, prop_name)
        prop_name += "Property"
    return prop_name


def member_names(
    name: str | None, keys: Iterable[str], context: ResolutionContext,
) -> list[str | None]:
    """Nested names for every key of one parent.

    Keys that PascalCase to the same word (``home_address``, ``homeAddress``)
    get a numeric suffix so each member keeps its own declaration.
    """
    names: list[str | None] = []
    used: set[str] = set()
    for key in keys:
        prop_name = member_name(name, key, context)
        if prop_name in used:
            index = 2
            while f"{prop_name}{index}" in used:
                index += 1
            logger.warning(
                "%s is used by another member of %s, using %s%d",
                prop_name, name, prop_name, index,
            )
            prop_name = f"{prop_name}{index}"
        if prop_name:
            used.add(prop_name)
        names.append(prop_name)
    return names


async def _get_properties(
    node: SchemaNode, name: str | None, context: ResolutionContext,
) -> ResolvedType:
    entries = list(node.properties.items())
    required = node.required
    keys = [key for key, _ in entries]
    names = dict(zip(keys, member_names(name, keys, context)))

    async def resolve_member(entry: tuple[str, Any]) -> ResolvedType:
        key, member = entry
        return await resolvers.resolve_object(member, names[key], context)

    # Members may resolve in any order; the body is assembled in declared order.
    members = await gather_ordered(entries, resolve_member)

    result = ResolvedType(value="{", type="object", schema=node.raw)
    for (key, member), resolved in zip(entries, members):
        member_schema = member if isinstance(member, Mapping) else {}
        is_read_only = node.read_only or bool(member_schema.get("readOnly"))
        doc = js_doc(member_schema, True)

        result.imports.extend(resolved.imports)
        result.schemas.extend(resolved.schemas)
        result.value += (
            f"\n  {doc + '  ' if doc else ''}"
            f"{'readonly ' if is_read_only else ''}"
            f"{get_key(key)}{'' if key in required else '?'}: {resolved.value};"
        )
    result.value += "\n}"
    return result


async def _get_additional_properties(
    node: SchemaNode, name: str | None, context: ResolutionContext,
) -> ResolvedType:
    additional = node.raw.get("additionalProperties")
    if additional is True:
        return ResolvedType("{ [key: string]: any }", type="object", schema=node.raw)

    resolved = await resolvers.resolve_value(additional, name, context)
    return ResolvedType(
        value=f"{{[key: string]: {resolved.value}}}",
        imports=list(resolved.imports),
        schemas=list(resolved.schemas),
        type="object",
        schema=node.raw,
    )


async def get_object(
    schema: SchemaNode | Mapping[str, Any],
    name: str | None,
    context: ResolutionContext,
) -> ResolvedType:
    """Return the type expression of an object-shaped schema.

    First match wins: reference, composition (the node's own properties
    joining the composition as one more item), properties,
    additionalProperties, then ``{}`` for ``type: object`` or ``unknown``.
    """
    node = parse_node(schema)

    if node.is_reference:
        info = await get_ref_info(node.ref, context)
        return ResolvedType(
            value=info.name,
            imports=[ImportRef(info.name, info.spec_key)],
            type="object",
            is_ref=True,
            schema=node.raw,
        )

    composition = node.composition
    if composition:
        keyword, items = composition
        if node.properties:
            items = [*items, node.without(keyword)]
        return await combine.combine_schemas(items, keyword, name, context)

    if node.properties:
        return await _get_properties(node, name, context)

    additional = node.raw.get("additionalProperties")
    if additional is True or isinstance(additional, Mapping):
        return await _get_additional_properties(node, name, context)

    return ResolvedType(
        value="{}" if node.type == "object" else "unknown",
        type="object",
        schema=node.raw,
    )
