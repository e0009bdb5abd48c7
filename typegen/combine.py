"""Combine allOf / oneOf / anyOf members into intersections and unions."""

from __future__ import annotations

from typing import Any, Sequence

from . import resolvers, scalar
from .context import GeneratorSchema, ImportRef, ResolutionContext, ResolvedType
from .naming import pascal
from .ordered import async_reduce

SEPARATORS: dict[str, str] = {
    "allOf": " & ",
    "oneOf": " | ",
    "anyOf": " | ",
}

# Neutral element of each operator.
_EMPTY_VALUES: dict[str, str] = {
    "allOf": "unknown",
    "oneOf": "never",
    "anyOf": "never",
}


def _combined_enum(name: str, resolved: list[ResolvedType]) -> ResolvedType:
    """Merge enum members into one named ``as const`` object."""
    enum_name = pascal(name)
    body = ""
    imports: list[ImportRef] = []
    schemas: list[GeneratorSchema] = []
    for item in resolved:
        imports.extend(item.imports)
        schemas.extend(item.schemas)
        if item.is_ref:
            body += f"  ...{item.value},\n"
        else:
            body += scalar.enum_entries(item.schema.get("enum") or [])

    model = (
        "// eslint-disable-next-line @typescript-eslint/no-redeclare\n"
        f"export const {enum_name} = {{\n{body}}} as const;\n"
    )
    return ResolvedType(
        value=f"typeof {enum_name}[keyof typeof {enum_name}]",
        imports=[ImportRef(enum_name)],
        schemas=[*schemas, GeneratorSchema(enum_name, model, imports)],
        is_enum=False,
        type="object",
    )


async def combine_schemas(
    items: Sequence[Any],
    separator: str,
    name: str | None,
    context: ResolutionContext,
) -> ResolvedType:
    """Resolve every item and join the results with ``&`` or ``|``.

    Inline object members are named ``<name><Separator>``, then
    ``<name><Separator>2`` and so on. When every member is an enum and a
    name is given, the members are merged into one named const enum.
    """
    if separator not in SEPARATORS:
        raise ValueError(f"Unknown composition keyword: {separator}")
    if not items:
        return ResolvedType(_EMPTY_VALUES[separator], type="object")

    base_name = pascal(name) + pascal(separator) if name else None

    async def step(
        acc: list[ResolvedType], item: Any, index: int, all_items: Sequence[Any],
    ) -> list[ResolvedType]:
        prop_name = base_name
        hoisted = sum(1 for previous in acc if previous.schemas)
        if prop_name and hoisted:
            prop_name += str(hoisted + 1)
        acc.append(
            await resolvers.resolve_object(item, prop_name, context, combined=True)
        )
        return acc

    resolved = await async_reduce(items, step, [])

    if name and len(items) > 1 and all(r.is_enum for r in resolved):
        return _combined_enum(name, resolved)

    values = []
    for item in resolved:
        value = item.value
        if separator == "allOf" and "|" in value and not item.is_ref:
            value = f"({value})"
        values.append(value)

    return ResolvedType(
        value=SEPARATORS[separator].join(values),
        imports=[i for item in resolved for i in item.imports],
        schemas=[s for item in resolved for s in item.schemas],
        is_enum=False,
        type="object",
    )
