"""Turn a document's component schemas into named declarations.

Handles:
- components.schemas, in declared order
- components.responses / components.requestBodies (JSON content schema,
  named with the configured suffix)
- documents without components: $defs / definitions maps, or the whole
  document as one schema named after its file
- interfaces for object literals, const enums for enums, type aliases
  for everything else
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .context import GeneratorSchema, ResolutionContext
from .doc import js_doc
from .errors import ResolutionError
from .loader import split_ref
from .naming import pascal
from .nodes import COMPOSITION_KEYWORDS
from .ordered import gather_ordered
from .ref import file_stem
from .resolvers import is_object_literal, resolve_type
from .scalar import get_enum

logger = logging.getLogger(__name__)

_SCHEMA_HINTS = frozenset({"type", "properties", "enum", "items", "$ref", *COMPOSITION_KEYWORDS})


def get_json_schema(component: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """Pick the JSON schema of a response or request body object."""
    if "$ref" in component:
        return component
    content = component.get("content") or {}
    for media_type in ("application/json", *sorted(content)):
        entry = content.get(media_type)
        if media_type.endswith("json") or "+json" in media_type:
            if isinstance(entry, Mapping) and isinstance(entry.get("schema"), Mapping):
                return entry["schema"]
    return None


def _merge_declarations(schemas: list[GeneratorSchema]) -> list[GeneratorSchema]:
    """Fold declarations sharing a name into one, keeping first position."""
    merged: dict[str, GeneratorSchema] = {}
    for schema in schemas:
        previous = merged.get(schema.name)
        if previous is None:
            merged[schema.name] = schema
            continue
        merged[schema.name] = GeneratorSchema(
            schema.name,
            previous.model + "\n" + schema.model,
            [*previous.imports, *schema.imports],
        )
    return list(merged.values())


async def generate_schema_definition(
    name: str,
    schema: Mapping[str, Any],
    context: ResolutionContext,
    suffix: str = "",
) -> list[GeneratorSchema]:
    """Resolve one top-level schema; nested declarations come first."""
    schema_name = pascal(name) + suffix
    try:
        resolved = await resolve_type(schema, schema_name, context=context)
    except ResolutionError as exc:
        if exc.schema_name:
            raise
        raise exc.with_schema(schema_name) from exc

    doc = js_doc(schema)
    if resolved.is_enum and not resolved.is_ref:
        model = doc + get_enum(resolved.schema.get("enum") or [], schema_name)
    elif resolved.value == "{}":
        model = (
            f"{doc}// eslint-disable-next-line @typescript-eslint/ban-types\n"
            f"export type {schema_name} = {{}};\n"
        )
    elif resolved.type == "object" and is_object_literal(resolved.value):
        model = f"{doc}export interface {schema_name} {resolved.value}\n"
    else:
        model = f"{doc}export type {schema_name} = {resolved.value};\n"

    return _merge_declarations([
        *resolved.schemas,
        GeneratorSchema(schema_name, model, list(resolved.imports)),
    ])


def _collect_entries(
    context: ResolutionContext,
) -> list[tuple[str, Mapping[str, Any], str]]:
    spec = context.specs.get(context.spec_key) or {}
    components = spec.get("components")
    entries: list[tuple[str, Mapping[str, Any], str]] = []

    if isinstance(components, Mapping):
        for name, schema in (components.get("schemas") or {}).items():
            entries.append((name, schema, ""))
        for component_type in ("responses", "requestBodies"):
            suffix = context.suffix_for(component_type)
            for name, component in (components.get(component_type) or {}).items():
                schema = get_json_schema(component)
                if schema is not None:
                    entries.append((name, schema, suffix))
        return entries

    for key in ("$defs", "definitions"):
        if isinstance(spec.get(key), Mapping):
            entries.extend((name, schema, "") for name, schema in spec[key].items())
    if not entries and _SCHEMA_HINTS & set(spec):
        entries.append((file_stem(split_ref(context.spec_key)[0]), spec, ""))
    return entries


async def generate_schema_definitions(
    context: ResolutionContext,
) -> list[GeneratorSchema]:
    """Generate declarations for every schema of ``context.target``."""
    entries = _collect_entries(context)

    async def generate(entry: tuple[str, Mapping[str, Any], str]) -> list[GeneratorSchema]:
        name, schema, suffix = entry
        return await generate_schema_definition(name, schema, context, suffix)

    results = await gather_ordered(entries, generate)
    definitions = [schema for result in results for schema in result]
    logger.info("Generated %d declaration(s) for %s", len(definitions), context.target)
    return definitions
