"""Shared fixtures: an in-memory petstore registry split across two documents.

Document keys are absolute POSIX paths so relative-file $refs resolve the
same way they do for documents loaded from disk.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from typegen.context import ResolutionContext

PETSTORE_KEY = "/specs/petstore.yaml"
COMMON_KEY = "/specs/common.yaml"

SUFFIX_OVERRIDE = {
    "components": {
        "responses": {"suffix": "Response"},
        "requestBodies": {"suffix": "Body"},
    }
}

PETSTORE: dict[str, Any] = {
    "openapi": "3.0.0",
    "info": {"title": "Swagger Petstore", "version": "1.0.0"},
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "summary": "List all pets",
                "parameters": [
                    {
                        "name": "limit",
                        "in": "query",
                        "description": "How many items to return",
                        "schema": {"type": "integer"},
                    },
                ],
                "responses": {
                    "200": {
                        "description": "A paged array of pets",
                        "content": {
                            "application/json": {
                                "schema": {"$ref": "#/components/schemas/Pets"},
                            }
                        },
                    }
                },
            },
            "post": {
                "operationId": "createPets",
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "required": ["name"],
                                "properties": {
                                    "name": {"type": "string"},
                                    "tag": {"type": "string"},
                                },
                            }
                        }
                    }
                },
                "responses": {"201": {"description": "Null response"}},
            },
        },
        "/pets/{petId}": {
            "get": {
                "operationId": "showPetById",
                "parameters": [
                    {
                        "name": "petId",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "string"},
                    },
                ],
                "responses": {"200": {"$ref": "#/components/responses/Pet"}},
            }
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "type": "object",
                "required": ["id", "name"],
                "properties": {
                    "id": {"type": "integer", "readOnly": True},
                    "name": {"type": "string", "description": "Pet name"},
                    "status": {"type": "string", "enum": ["available", "sold"]},
                    "owner": {"$ref": "common.yaml#/components/schemas/Owner"},
                },
            },
            "Pets": {
                "type": "array",
                "items": {"$ref": "#/components/schemas/Pet"},
            },
            "Cat": {
                "allOf": [
                    {"$ref": "#/components/schemas/Pet"},
                    {"type": "object", "properties": {"indoor": {"type": "boolean"}}},
                ],
            },
            "Node": {
                "type": "object",
                "properties": {
                    "children": {
                        "type": "array",
                        "items": {"$ref": "#/components/schemas/Node"},
                    }
                },
            },
            "Color": {"type": "string", "enum": ["red", "green"]},
        },
        "responses": {
            "Pet": {
                "description": "A single pet",
                "content": {
                    "application/json": {
                        "schema": {"$ref": "#/components/schemas/Pet"},
                    }
                },
            }
        },
    },
}

COMMON: dict[str, Any] = {
    "components": {
        "schemas": {
            "Owner": {
                "type": "object",
                "properties": {"name": {"type": "string"}},
            }
        }
    }
}


@pytest.fixture
def specs() -> dict[str, dict[str, Any]]:
    return {PETSTORE_KEY: copy.deepcopy(PETSTORE), COMMON_KEY: copy.deepcopy(COMMON)}


@pytest.fixture
def context(specs) -> ResolutionContext:
    return ResolutionContext(specs=specs, target=PETSTORE_KEY, override=SUFFIX_OVERRIDE)


@pytest.fixture
def make_context() -> Callable[..., ResolutionContext]:
    """Build a single-document context from a components.schemas mapping."""

    def _make(schemas: dict[str, Any] | None = None, **extra: Any) -> ResolutionContext:
        document = {"components": {"schemas": schemas or {}}, **extra}
        return ResolutionContext(specs={PETSTORE_KEY: document}, target=PETSTORE_KEY)

    return _make


@pytest.fixture
def spec_files(tmp_path) -> Path:
    """Write the petstore documents to disk; return the entry document."""
    (tmp_path / "common.yaml").write_text(yaml.safe_dump(COMMON, sort_keys=False))
    entry = tmp_path / "petstore.yaml"
    entry.write_text(yaml.safe_dump(PETSTORE, sort_keys=False))
    return entry
