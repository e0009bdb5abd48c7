"""Tests for doc comment rendering."""

from typegen.doc import js_doc


class TestJsDoc:
    def test_nothing_to_document(self):
        assert js_doc({"type": "string"}) == ""
        assert js_doc(None) == ""

    def test_description(self):
        assert js_doc({"description": "A pet"}) == "/**\n * A pet\n */\n"

    def test_multiline_description(self):
        assert js_doc({"description": "One\nTwo"}) == "/**\n * One\n * Two\n */\n"

    def test_one_line(self):
        assert js_doc({"description": "A pet"}, True) == "/** A pet */\n"

    def test_one_line_needs_single_item(self):
        doc = js_doc({"description": "A pet", "deprecated": True}, True)
        assert doc == "/**\n   * A pet\n   * @deprecated\n   */\n"

    def test_deprecated_and_summary(self):
        doc = js_doc({"deprecated": True, "summary": "Old"})
        assert doc == "/**\n * @deprecated\n * @summary Old\n */\n"

    def test_comment_terminator_escaped(self):
        doc = js_doc({"description": "ends */ here"}, True)
        assert doc == "/** ends *\\/ here */\n"
