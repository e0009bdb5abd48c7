"""Tests for value dispatch and slot hoisting."""

import pytest
from conftest import PETSTORE_KEY

from typegen.context import ImportRef
from typegen.errors import ResolutionError
from typegen.nodes import parse_node
from typegen.resolvers import is_object_literal, resolve_object, resolve_type


class TestScalars:
    """Primitive, enum and array shapes."""

    @pytest.mark.parametrize(
        ("schema", "expected"),
        [
            ({"type": "string"}, "string"),
            ({"type": "integer"}, "number"),
            ({"type": "number"}, "number"),
            ({"type": "boolean"}, "boolean"),
            ({"type": "null"}, "null"),
            ({"type": "string", "format": "binary"}, "Blob"),
            ({"type": "string", "nullable": True}, "string | null"),
            ({"type": "string", "enum": ["a", "b"]}, "'a' | 'b'"),
            ({"type": "integer", "enum": [1, 2]}, "1 | 2"),
            ({"type": "string", "enum": ["it's"]}, "'it\\'s'"),
            ({"type": "array"}, "unknown[]"),
            ({"type": "array", "items": {"type": "string"}}, "string[]"),
        ],
    )
    async def test_scalar(self, make_context, schema, expected):
        result = await resolve_type(schema, context=make_context())
        assert result.value == expected

    async def test_enum_flag(self, make_context):
        result = await resolve_type({"type": "string", "enum": ["a"]}, context=make_context())
        assert result.is_enum is True
        assert result.type == "string"

    async def test_array_of_references(self, context):
        schema = {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
        result = await resolve_type(schema, context=context)
        assert result.value == "Pet[]"
        assert result.type == "array"
        assert result.imports == [ImportRef("Pet", PETSTORE_KEY)]

    async def test_array_of_union(self, context):
        schema = {
            "type": "array",
            "items": {
                "oneOf": [
                    {"$ref": "#/components/schemas/Pet"},
                    {"$ref": "#/components/schemas/Color"},
                ]
            },
        }
        result = await resolve_type(schema, context=context)
        assert result.value == "(Pet | Color)[]"

    async def test_array_item_object_named(self, make_context):
        schema = {"type": "array", "items": {"properties": {"id": {"type": "integer"}}}}
        result = await resolve_type(schema, "Pets", context=make_context())
        assert result.value == "PetsItem[]"
        assert [s.name for s in result.schemas] == ["PetsItem"]


class TestReferences:
    """References short-circuit every other shape check."""

    async def test_reference_with_stray_siblings(self, context):
        schema = {
            "$ref": "#/components/schemas/Pet",
            "type": "string",
            "properties": {"bogus": {"type": "string"}},
        }
        result = await resolve_type(schema, "Whatever", context=context)
        assert result.value == "Pet"
        assert result.is_ref is True
        assert result.schemas == []
        assert result.imports == [ImportRef("Pet", PETSTORE_KEY)]

    async def test_reference_to_enum(self, context):
        result = await resolve_type({"$ref": "#/components/schemas/Color"}, context=context)
        assert result.is_enum is True
        assert result.is_ref is True
        assert result.type == "string"

    async def test_dangling_reference_fails(self, context):
        with pytest.raises(ResolutionError):
            await resolve_type({"$ref": "#/components/schemas/Nope"}, context=context)

    async def test_dangling_reference_inside_properties_fails(self, context):
        schema = {"properties": {"a": {"$ref": "#/components/schemas/Nope"}}}
        with pytest.raises(ResolutionError):
            await resolve_type(schema, "Holder", context=context)

    async def test_self_reference_terminates(self, context):
        node = context.specs[PETSTORE_KEY]["components"]["schemas"]["Node"]
        result = await resolve_type(node, "Node", context=context)
        assert result.value == "{\n  children?: Node[];\n}"
        assert result.imports == [ImportRef("Node", PETSTORE_KEY)]

    async def test_accepts_parsed_node(self, context):
        node = parse_node({"$ref": "#/components/schemas/Pet"})
        result = await resolve_type(node, context=context)
        assert result.value == "Pet"


class TestResolveObject:
    """Hoisting of inline objects and enums in named slots."""

    async def test_inline_enum_hoisted(self, make_context):
        result = await resolve_object({"type": "string", "enum": ["on", "off"]}, "Switch", make_context())
        assert result.value == "Switch"
        assert result.type == "enum"
        model = result.schemas[0].model
        assert model.startswith("export type Switch = typeof Switch[keyof typeof Switch];\n")
        assert "export const Switch = {\n  on: 'on',\n  off: 'off',\n} as const;\n" in model

    async def test_combined_enum_not_hoisted(self, make_context):
        result = await resolve_object(
            {"type": "string", "enum": ["on"]}, "Switch", make_context(), combined=True,
        )
        assert result.value == "'on'"
        assert result.schemas == []

    async def test_intersection_hoisted_as_alias(self, context):
        schema = {
            "allOf": [
                {"$ref": "#/components/schemas/Pet"},
                {"$ref": "#/components/schemas/Node"},
            ]
        }
        result = await resolve_object(schema, "Both", context)
        assert result.value == "Both"
        assert result.schemas[0].model == "export type Both = Pet & Node;\n"

    async def test_primitive_not_hoisted(self, make_context):
        result = await resolve_object({"type": "string"}, "Name", make_context())
        assert result.value == "string"
        assert result.schemas == []

    async def test_doc_carried_onto_declaration(self, make_context):
        schema = {"description": "A tag", "properties": {"v": {"type": "string"}}}
        result = await resolve_object(schema, "Tag", make_context())
        assert result.schemas[0].model.startswith("/**\n * A tag\n */\nexport interface Tag")


class TestDeterminism:
    """Same input, same output."""

    async def test_repeatable(self, context):
        schema = context.specs[PETSTORE_KEY]["components"]["schemas"]["Pet"]
        first = await resolve_type(schema, "Pet", context=context)
        second = await resolve_type(schema, "Pet", context=context)
        assert first == second
        assert first.value == second.value
        assert first.imports == second.imports
        assert first.schemas == second.schemas


class TestIsObjectLiteral:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("{}", True),
            ("{\n  a?: string;\n}", True),
            ("{ [key: string]: any }", True),
            ("{\n  'a}b'?: string;\n}", True),
            ("{\n  /** } */\n  a?: string;\n}", True),
            ("{ a: string } & { b: string }", False),
            ("{ a: string } | null", False),
            ("Pet", False),
        ],
    )
    def test_is_object_literal(self, value, expected):
        assert is_object_literal(value) is expected
