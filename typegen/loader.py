"""Load OpenAPI / JSON-Schema documents into an in-memory registry.

Reads the entry document, then every document it reaches through
relative-file $refs, so cross-document references resolve without any
further I/O during type synthesis.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterator, Mapping
from urllib.parse import unquote

import yaml

from .errors import LoaderError

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def is_url(value: str) -> bool:
    """Return True for http(s) document keys."""
    return value.startswith(("http://", "https://"))


def spec_key_for(path: Path | str) -> str:
    """Return the registry key of a document on disk."""
    return os.path.normpath(os.path.abspath(str(path)))


def split_ref(ref: str) -> tuple[str, str]:
    """Split a $ref into (document part, pointer without '#')."""
    if "#" not in ref:
        return ref, ""
    path, pointer = ref.split("#", 1)
    return path, pointer


def decode_pointer(pointer: str) -> list[str]:
    """Decode a JSON pointer into its unescaped tokens."""
    if not pointer:
        return []
    if pointer.startswith("/"):
        pointer = pointer[1:]
    tokens = pointer.split("/")
    return [unquote(t).replace("~1", "/").replace("~0", "~") for t in tokens]


def resolve_pointer(spec: Any, pointer: str) -> Any:
    """Walk a JSON pointer through a document; KeyError when it dangles."""
    node = spec
    for token in decode_pointer(pointer):
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise KeyError(token)
    return node


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from a document."""
    return spec.get("paths") or {}


def get_schemas(spec: Mapping[str, Any]) -> Mapping[str, Any]:
    """Extract component schemas from a document."""
    return (spec.get("components") or {}).get("schemas") or {}


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load one JSON or YAML document from disk."""
    spec_file = Path(path)
    try:
        text = spec_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoaderError(f"Cannot read schema document {spec_file}: {exc}") from exc

    try:
        if spec_file.suffix.lower() in _YAML_SUFFIXES:
            document = yaml.safe_load(text)
        else:
            document = json.loads(text)
    except (yaml.YAMLError, ValueError) as exc:
        raise LoaderError(f"Failed to parse schema document {spec_file}: {exc}") from exc

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise LoaderError(f"Schema document root must be a mapping: {spec_file}")
    return document


class DocumentCache:
    """Per-run cache of parsed documents keyed by resolved path."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._documents

    def get(self, key: str) -> dict[str, Any] | None:
        return self._documents.get(key)

    def put(self, key: str, document: dict[str, Any]) -> None:
        self._documents[key] = document

    def invalidate(self, key: str | None = None) -> None:
        """Drop one document, or everything when no key is given."""
        if key is None:
            self._documents.clear()
        else:
            self._documents.pop(key, None)

    def load(self, path: Path | str) -> dict[str, Any]:
        key = spec_key_for(path)
        cached = self._documents.get(key)
        if cached is not None:
            return cached
        document = load_spec(key)
        self._documents[key] = document
        logger.debug("Loaded %s", key)
        return document


def _iter_refs(node: Any) -> Iterator[str]:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            yield ref
        for value in node.values():
            yield from _iter_refs(value)
    elif isinstance(node, list):
        for value in node:
            yield from _iter_refs(value)


def load_documents(
    entry: Path | str,
    cache: DocumentCache | None = None,
) -> tuple[str, dict[str, dict[str, Any]]]:
    """Load the entry document and every document it references.

    Returns ``(target_key, specs)``. Remote (URL) references are left out;
    they must already be present in the registry handed to the resolver.
    """
    cache = cache or DocumentCache()
    target = spec_key_for(entry)
    specs: dict[str, dict[str, Any]] = {}
    queue = [target]

    while queue:
        key = queue.pop(0)
        if key in specs:
            continue
        specs[key] = cache.load(key)
        base = os.path.dirname(key)
        for ref in _iter_refs(specs[key]):
            path_part, _ = split_ref(ref)
            if not path_part:
                continue
            if is_url(path_part):
                logger.debug("Skipping remote reference %s", ref)
                continue
            other = spec_key_for(os.path.join(base, path_part))
            if other not in specs and other not in queue:
                queue.append(other)

    logger.debug("Loaded %d document(s) for %s", len(specs), target)
    return target, specs
