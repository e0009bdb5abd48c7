"""Resolve the request and response types of every operation.

Walks ``paths`` of the target document and, per operation, produces:
- ``<Operation>Params`` from its query parameters
- ``<Operation>Body`` from an inline JSON request body
- the success response type (``<Operation>Response`` when inline)
- the TypeScript types of its path parameters
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .context import GeneratorSchema, ImportRef, ResolutionContext, ResolvedType
from .doc import js_doc
from .errors import ResolutionError
from .loader import get_paths
from .naming import build_operation_name, get_key, pascal
from .objects import member_names
from .ordered import gather_ordered
from .ref import get_ref_info, resolve_ref
from .resolvers import resolve_object, resolve_value
from .schema_definitions import get_json_schema

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")

_SUCCESS_CODES = ("200", "201", "202", "203", "204")


@dataclass
class OperationTypes:
    name: str
    method: str
    path: str
    summary: str = ""
    path_params: list[tuple[str, str]] = field(default_factory=list)
    params_type: str | None = None
    body_type: str | None = None
    response_type: str = "void"
    imports: list[ImportRef] = field(default_factory=list)
    schemas: list[GeneratorSchema] = field(default_factory=list)

    def add(self, resolved: ResolvedType) -> str:
        self.imports.extend(resolved.imports)
        self.schemas.extend(resolved.schemas)
        return resolved.value


async def _deref(
    item: Mapping[str, Any], context: ResolutionContext,
) -> tuple[Mapping[str, Any], ResolutionContext]:
    if isinstance(item.get("$ref"), str):
        return await resolve_ref(item["$ref"], context)
    return item, context


async def _collect_parameters(
    path_item: Mapping[str, Any],
    operation: Mapping[str, Any],
    context: ResolutionContext,
) -> list[tuple[Mapping[str, Any], ResolutionContext]]:
    """Merge path-level and operation-level parameters; the latter win."""
    merged: dict[tuple[str, str], tuple[Mapping[str, Any], ResolutionContext]] = {}
    for raw in [*(path_item.get("parameters") or []), *(operation.get("parameters") or [])]:
        if not isinstance(raw, Mapping):
            continue
        parameter, owner = await _deref(raw, context)
        if "name" not in parameter:
            continue
        merged[(parameter["name"], parameter.get("in", "query"))] = (parameter, owner)
    return list(merged.values())


def _declared_names(context: ResolutionContext) -> set[str]:
    """Declaration names the target's components already claim."""
    components = (context.specs.get(context.target) or {}).get("components") or {}
    names = {pascal(name) for name in components.get("schemas") or {}}
    for component_type in ("responses", "requestBodies"):
        suffix = context.suffix_for(component_type)
        names.update(pascal(name) + suffix for name in components.get(component_type) or {})
    return names


def _hoisted_name(type_name: str, part: str, declared: set[str]) -> str:
    name = f"{type_name}{part}"
    if name in declared:
        logger.debug("%s is a component name, using %sProperty", name, name)
        name += "Property"
    return name


async def _resolve_query(
    query: list[tuple[Mapping[str, Any], ResolutionContext]],
    params_name: str,
    context: ResolutionContext,
) -> ResolvedType:
    """Build the params interface, each member resolved in its own document."""
    names = member_names(params_name, [p["name"] for p, _ in query], context)

    async def resolve_member(index: int) -> ResolvedType:
        parameter, owner = query[index]
        schema = parameter.get("schema")
        return await resolve_object(
            schema if isinstance(schema, Mapping) else {}, names[index], owner,
        )

    members = await gather_ordered(range(len(query)), resolve_member)

    body = "{"
    imports: list[ImportRef] = []
    schemas: list[GeneratorSchema] = []
    for (parameter, _), resolved in zip(query, members):
        schema = parameter.get("schema")
        schema = schema if isinstance(schema, Mapping) else {}
        doc = js_doc({
            "description": parameter.get("description") or schema.get("description"),
            "deprecated": parameter.get("deprecated") or schema.get("deprecated"),
        }, True)
        imports.extend(resolved.imports)
        schemas.extend(resolved.schemas)
        body += (
            f"\n  {doc + '  ' if doc else ''}"
            f"{get_key(parameter['name'])}{'' if parameter.get('required') else '?'}: {resolved.value};"
        )
    body += "\n}"

    model = f"export interface {params_name} {body}\n"
    return ResolvedType(
        value=params_name,
        imports=[ImportRef(params_name)],
        schemas=[*schemas, GeneratorSchema(params_name, model, imports)],
    )


def _success_response(responses: Mapping[Any, Any]) -> Mapping[str, Any] | None:
    # YAML loads unquoted status codes as integers.
    responses = {str(code): value for code, value in responses.items()}
    for code in _SUCCESS_CODES:
        if code in responses:
            return responses[code]
    for code in sorted(responses):
        if code.startswith("2"):
            return responses[code]
    return responses.get("default")


async def _resolve_content(
    component: Mapping[str, Any],
    name: str,
    context: ResolutionContext,
) -> ResolvedType | None:
    """Resolve a request body or response object to a type."""
    if isinstance(component.get("$ref"), str):
        info = await get_ref_info(component["$ref"], context)
        return ResolvedType(
            value=info.name,
            imports=[ImportRef(info.name, info.spec_key)],
            is_ref=True,
        )
    schema = get_json_schema(component)
    if schema is None:
        return None
    return await resolve_object(schema, name, context)


async def build_operation_types(
    method: str,
    path: str,
    path_item: Mapping[str, Any],
    context: ResolutionContext,
) -> OperationTypes:
    operation = path_item[method]
    name = build_operation_name(method, path, operation.get("operationId"))
    type_name = pascal(name)
    op = OperationTypes(
        name=name,
        method=method,
        path=path,
        summary=operation.get("summary") or "",
    )

    parameters = await _collect_parameters(path_item, operation, context)
    for parameter, owner in parameters:
        if parameter.get("in") == "path":
            resolved = await resolve_value(parameter.get("schema") or {}, None, owner)
            op.path_params.append((parameter["name"], op.add(resolved)))

    declared = _declared_names(context)
    query = [(p, owner) for p, owner in parameters if p.get("in", "query") == "query"]
    if query:
        params_name = _hoisted_name(type_name, "Params", declared)
        resolved = await _resolve_query(query, params_name, context)
        op.params_type = op.add(resolved)

    request_body = operation.get("requestBody")
    if isinstance(request_body, Mapping):
        resolved = await _resolve_content(
            request_body, _hoisted_name(type_name, "Body", declared), context,
        )
        if resolved is not None:
            op.body_type = op.add(resolved)

    response = _success_response(operation.get("responses") or {})
    if isinstance(response, Mapping):
        resolved = await _resolve_content(
            response, _hoisted_name(type_name, "Response", declared), context,
        )
        if resolved is not None:
            op.response_type = op.add(resolved)

    return op


async def generate_operation_types(context: ResolutionContext) -> list[OperationTypes]:
    """Resolve every operation of the target, sorted by path then method."""
    spec = context.specs.get(context.target) or {}
    entries = [
        (method, path, path_item)
        for path, path_item in sorted(get_paths(spec).items())
        for method in HTTP_METHODS
        if isinstance(path_item, Mapping) and method in path_item
    ]

    async def build(entry: tuple[str, str, Mapping[str, Any]]) -> OperationTypes:
        method, path, path_item = entry
        try:
            return await build_operation_types(method, path, path_item, context)
        except ResolutionError as exc:
            if exc.schema_name:
                raise
            raise exc.with_schema(f"{method.upper()} {path}") from exc

    operations = await gather_ordered(entries, build)
    logger.info("Resolved %d operation(s)", len(operations))
    return operations
