"""Tests for the context_builder module."""

from pathlib import Path

import pytest

from typegen.config import GeneratorConfig
from typegen.context import GeneratorSchema
from typegen.context_builder import _dedupe, _output_dirs, build_context
from typegen.loader import spec_key_for


class TestBuildContext:
    """Full pipeline from documents on disk to the template context."""

    @pytest.fixture
    async def ctx(self, spec_files):
        return await build_context(GeneratorConfig(input=spec_files))

    async def test_target(self, ctx, spec_files):
        assert ctx["target"] == spec_key_for(spec_files)
        assert ctx["title"] == "Swagger Petstore"
        assert ctx["version"] == "1.0.0"

    async def test_dirs(self, ctx, spec_files):
        assert ctx["dirs"] == {
            spec_key_for(spec_files): ".",
            spec_key_for(spec_files.parent / "common.yaml"): "common",
        }

    async def test_target_declarations_include_operation_types(self, ctx):
        target = ctx["documents"][0]
        assert target["dir"] == "."
        assert [s.name for s in target["schemas"]] == [
            "PetStatus", "Pet", "Pets", "CatAllOf", "Cat", "Node", "Color",
            "PetResponse", "ListPetsParams", "CreatePetsBody",
        ]

    async def test_referenced_document_declarations(self, ctx):
        common = ctx["documents"][1]
        assert common["dir"] == "common"
        assert [s.name for s in common["schemas"]] == ["Owner"]

    async def test_counts(self, ctx):
        assert ctx["schema_count"] == 11
        assert [op.name for op in ctx["operations"]] == ["listPets", "createPets", "showPetById"]

    async def test_header_flag(self, spec_files):
        ctx = await build_context(GeneratorConfig(input=spec_files, header=False))
        assert ctx["header"] is False


class TestOutputDirs:
    def test_slug_collisions(self):
        dirs = _output_dirs("/a/api.yaml", ["/a/api.yaml", "/a/common.yaml", "/b/common.json"])
        assert dirs == {"/a/api.yaml": ".", "/a/common.yaml": "common", "/b/common.json": "common_2"}


class TestDedupe:
    def test_first_wins(self, caplog):
        first = GeneratorSchema("Pet", "a")
        schemas = _dedupe([first, GeneratorSchema("Tag", "b"), GeneratorSchema("Pet", "c")])
        assert schemas == [first, GeneratorSchema("Tag", "b")]
        assert "Duplicate declaration Pet" in caplog.text


def test_paths_are_absolute(spec_files, monkeypatch):
    monkeypatch.chdir(spec_files.parent)
    assert Path(spec_key_for("petstore.yaml")).is_absolute()
