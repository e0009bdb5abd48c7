"""Build the Jinja2 template context for one generation run.

Loads the entry document and every document it references, generates the
declarations of each of them, resolves the target's operations, and
assembles the dict consumed by codegen.generate.
"""

from __future__ import annotations

import logging
from typing import Any

from .config import GeneratorConfig
from .context import GeneratorSchema, ResolutionContext
from .loader import DocumentCache, load_documents
from .naming import sanitize_spec_key
from .operations import generate_operation_types
from .schema_definitions import generate_schema_definitions

logger = logging.getLogger(__name__)


def _output_dirs(target: str, spec_keys: list[str]) -> dict[str, str]:
    """Map each document to its directory under the model folder."""
    dirs = {target: "."}
    used = {"."}
    for key in spec_keys:
        if key == target:
            continue
        slug = sanitize_spec_key(key)
        candidate = slug
        index = 2
        while candidate in used:
            candidate = f"{slug}_{index}"
            index += 1
        used.add(candidate)
        dirs[key] = candidate
    return dirs


def _dedupe(schemas: list[GeneratorSchema]) -> list[GeneratorSchema]:
    seen: dict[str, GeneratorSchema] = {}
    for schema in schemas:
        if schema.name in seen:
            logger.warning("Duplicate declaration %s, keeping the first", schema.name)
            continue
        seen[schema.name] = schema
    return list(seen.values())


async def build_context(
    config: GeneratorConfig,
    cache: DocumentCache | None = None,
) -> dict[str, Any]:
    """Build the full template context from the configured documents."""
    target, specs = load_documents(config.input, cache)
    base = ResolutionContext(specs=specs, target=target, override=config.override)

    dirs = _output_dirs(target, sorted(specs))
    operations = await generate_operation_types(base)
    documents = []
    for key in [target, *sorted(k for k in specs if k != target)]:
        context = base if key == target else ResolutionContext(
            specs=specs, target=key, override=config.override,
        )
        schemas = await generate_schema_definitions(context)
        if key == target:
            schemas = schemas + [s for op in operations for s in op.schemas]
        documents.append({
            "spec_key": key,
            "dir": dirs[key],
            "schemas": _dedupe(schemas),
        })

    info = specs[target].get("info") or {}
    return {
        "target": target,
        "dirs": dirs,
        "documents": documents,
        "operations": operations,
        "title": info.get("title", ""),
        "version": info.get("version", ""),
        "header": config.header,
        "schema_count": sum(len(d["schemas"]) for d in documents),
    }
