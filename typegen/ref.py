"""Turn $ref pointers into declaration names and referenced schemas."""

from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urljoin, urlparse

from .context import ResolutionContext
from .errors import ResolutionError
from .loader import decode_pointer, is_url, resolve_pointer, split_ref
from .naming import pascal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefInfo:
    name: str
    original_name: str
    spec_key: str
    pointer: str
    ref_paths: tuple[str, ...] = ()


def _document_key(path_part: str, context: ResolutionContext) -> str:
    """Resolve the document part of a $ref against the current document."""
    current = context.spec_key
    if not path_part:
        return current
    if is_url(path_part):
        return path_part
    if is_url(current):
        return urljoin(current, path_part)
    return os.path.normpath(os.path.join(os.path.dirname(current), path_part))


def _locate(ref: str, context: ResolutionContext) -> tuple[str, str, Any]:
    path_part, pointer = split_ref(ref)
    spec_key = _document_key(path_part, context)
    document = context.specs.get(spec_key)
    if document is None:
        raise ResolutionError(
            ref, context.spec_key, reason=f"document {spec_key} is not loaded",
        )
    try:
        node = resolve_pointer(document, pointer)
    except KeyError as exc:
        raise ResolutionError(
            ref, context.spec_key, reason=f"no node at #{pointer}",
        ) from exc
    return spec_key, pointer, node


def file_stem(path_part: str) -> str:
    if is_url(path_part):
        path_part = urlparse(path_part).path
    stem, _ = posixpath.splitext(posixpath.basename(path_part.replace("\\", "/")))
    return stem


async def get_ref_info(ref: str, context: ResolutionContext) -> RefInfo:
    """Return the declaration name and owning document of a $ref.

    Raises ResolutionError when the document is not in the registry or the
    pointer does not land on a node.
    """
    spec_key, pointer, _ = _locate(ref, context)
    ref_paths = tuple(decode_pointer(pointer))

    if ref_paths:
        original_name = ref_paths[-1]
        suffix = ""
        if len(ref_paths) > 2 and ref_paths[0] == "components":
            suffix = context.suffix_for(ref_paths[1])
    else:
        original_name = file_stem(split_ref(ref)[0])
        suffix = ""

    if spec_key != context.spec_key:
        logger.debug("Cross-document reference %s -> %s", ref, spec_key)

    return RefInfo(
        name=pascal(original_name) + suffix,
        original_name=original_name,
        spec_key=spec_key,
        pointer=pointer,
        ref_paths=ref_paths,
    )


async def resolve_ref(
    ref: str, context: ResolutionContext,
) -> tuple[Mapping[str, Any], ResolutionContext]:
    """Follow a chain of references to the schema it finally names.

    Returns the schema and a context reading the document that owns it.
    A chain that loops back on itself stops at the repeated reference,
    which is returned unresolved.
    """
    current = context
    while True:
        spec_key, pointer, node = _locate(ref, current)
        if current.is_visiting(spec_key, pointer):
            logger.debug("Reference cycle detected at %s in %s", ref, spec_key)
            return {"$ref": ref}, current
        current = current.for_spec(spec_key).entering(spec_key, pointer)
        if isinstance(node, Mapping) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            continue
        if not isinstance(node, Mapping):
            return {}, current
        return node, current
