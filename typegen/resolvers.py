"""Dispatch schema nodes to the resolver for their kind.

resolve_type is the entry point used by the definition and operation
generators. References always short-circuit: a node carrying $ref resolves
to the referenced declaration name and nothing else in it is inspected.
"""

from __future__ import annotations

import re
from typing import Any

from . import scalar
from .context import GeneratorSchema, ImportRef, ResolutionContext, ResolvedType
from .doc import js_doc
from .nodes import SchemaNode, parse_node
from .ref import get_ref_info, resolve_ref

_COMPOUND = re.compile(r"[{&|]")


def is_object_literal(value: str) -> bool:
    """Return True when ``value`` is a single ``{ ... }`` type literal."""
    if not (value.startswith("{") and value.endswith("}")):
        return False
    depth = 0
    quote = False
    i = 0
    while i < len(value):
        char = value[i]
        if quote:
            if char == "\\":
                i += 1
            elif char == "'":
                quote = False
        elif value.startswith("/*", i):
            end = value.find("*/", i + 2)
            if end == -1:
                return False
            i = end + 1
        elif char == "'":
            quote = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0 and i != len(value) - 1:
                return False
        i += 1
    return depth == 0


async def resolve_value(
    schema: Any, name: str | None, context: ResolutionContext,
) -> ResolvedType:
    """Resolve a node to a type expression."""
    node = parse_node(schema)

    if node.is_reference:
        info = await get_ref_info(node.ref, context)
        target, _ = await resolve_ref(node.ref, context)
        target_node = parse_node(target)
        return ResolvedType(
            value=info.name,
            imports=[ImportRef(info.name, info.spec_key)],
            schemas=[],
            is_enum=target_node.enum is not None,
            type=target_node.type or "object",
            is_ref=True,
            schema=target_node.raw,
        )

    resolved = await scalar.get_scalar(node, name, context)
    resolved.schema = node.raw
    resolved.is_ref = False
    return resolved


async def resolve_object(
    schema: Any,
    prop_name: str | None,
    context: ResolutionContext,
    combined: bool = False,
) -> ResolvedType:
    """Resolve a node that sits in a property, item or composition slot.

    With a ``prop_name``, inline object-like results and inline enums are
    hoisted into their own named declarations and the slot refers to them
    by name. Enums stay inline inside compositions (``combined``) so the
    combiner can merge them.
    """
    resolved = await resolve_value(schema, prop_name, context)
    doc = js_doc(resolved.schema)

    if (
        prop_name
        and not resolved.is_enum
        and resolved.type == "object"
        and _COMPOUND.search(resolved.value)
    ):
        if is_object_literal(resolved.value):
            model = f"{doc}export interface {prop_name} {resolved.value}\n"
        else:
            model = f"{doc}export type {prop_name} = {resolved.value};\n"
        return ResolvedType(
            value=prop_name,
            imports=[ImportRef(prop_name)],
            schemas=[
                *resolved.schemas,
                GeneratorSchema(prop_name, model, list(resolved.imports)),
            ],
            is_enum=False,
            type="object",
            is_ref=resolved.is_ref,
            schema=resolved.schema,
        )

    if prop_name and resolved.is_enum and not combined and not resolved.is_ref:
        model = doc + scalar.get_enum(resolved.schema.get("enum") or [], prop_name)
        return ResolvedType(
            value=prop_name,
            imports=[ImportRef(prop_name)],
            schemas=[
                *resolved.schemas,
                GeneratorSchema(prop_name, model, list(resolved.imports)),
            ],
            is_enum=False,
            type="enum",
            is_ref=False,
            schema=resolved.schema,
        )

    return resolved


async def resolve_type(
    node: SchemaNode | Any,
    name: str | None = None,
    *,
    context: ResolutionContext,
) -> ResolvedType:
    """Resolve one schema node for the emission stage.

    Raises ResolutionError for a dangling reference. Unrecognized shapes
    never fail; they degrade to ``unknown``.
    """
    return await resolve_value(node, name, context)
