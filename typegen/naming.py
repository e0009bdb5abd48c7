"""Identifier helpers for generated TypeScript declarations.

  - pascal("pet_status")            -> PetStatus
  - pascal("HTTP")                  -> Http
  - camel("list-pets")              -> listPets
  - get_key("petId")                -> petId
  - get_key("x-rate-limit")         -> 'x-rate-limit'
  - build_operation_name("get", "/pets/{petId}") -> getPetsPetId
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

_WORDS = re.compile(r"[A-Za-z0-9À-ſ]+")
_ALL_UPPER = re.compile(r"^[^a-z]*$")
_ES_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _words(text: str) -> list[str]:
    if _ALL_UPPER.match(text):
        text = text.lower()
    return _WORDS.findall(text)


def pascal(text: str) -> str:
    """Convert any name to PascalCase, keeping a leading underscore."""
    if not text:
        return ""
    result = "".join(word[:1].upper() + word[1:] for word in _words(text))
    if text.startswith("_"):
        return "_" + result
    return result


def camel(text: str) -> str:
    """Convert any name to camelCase."""
    result = pascal(text)
    if result.startswith("_"):
        return "_" + result[1:2].lower() + result[2:]
    return result[:1].lower() + result[1:]


def get_key(key: str) -> str:
    """Return a member name usable inside a TypeScript object type."""
    if _ES_IDENTIFIER.match(key):
        return key
    escaped = key.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _path_segments(path: str) -> list[str]:
    """Split a URL path into segments, unwrapping {params}."""
    return [p.strip("{}") for p in path.split("/") if p]


def build_operation_name(
    method: str, path: str, operation_id: str | None = None,
) -> str:
    """Build an operation name from its operationId or method and path."""
    if operation_id:
        return camel(operation_id)
    segments = "-".join(_path_segments(path)) or "root"
    return camel(f"{method.lower()}-{segments}")


def sanitize_spec_key(spec_key: str) -> str:
    """Turn a document key into a short directory-safe slug."""
    name = PurePosixPath(spec_key.replace("\\", "/")).name
    name = re.sub(r"\.(ya?ml|json)$", "", name, flags=re.IGNORECASE)
    name = re.sub(r"[^A-Za-z0-9_\-]", "_", name)
    name = re.sub(r"_+", "_", name)
    return name.strip("_") or "spec"
