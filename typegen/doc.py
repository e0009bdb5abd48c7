"""Render schema descriptions as /** ... */ doc comments."""

from __future__ import annotations

from typing import Any, Mapping


def _escape(text: str) -> str:
    return text.replace("*/", "*\\/")


def js_doc(schema: Mapping[str, Any] | None, try_one_line: bool = False) -> str:
    """Build a doc comment from description, deprecated and summary.

    Returns an empty string when the schema carries none of them. With
    ``try_one_line`` a comment holding a single item is kept on one line and
    multi-line comments are indented for use inside an object body.
    """
    if not isinstance(schema, Mapping):
        return ""

    description = schema.get("description")
    deprecated = schema.get("deprecated")
    summary = schema.get("summary")

    count = sum(1 for item in (description, deprecated, summary) if item)
    if not count:
        return ""

    if isinstance(description, list):
        lines = [_escape(str(line)) for line in description]
    else:
        lines = [_escape(line) for line in str(description or "").splitlines() or [""]]

    one_line = count == 1 and try_one_line
    indent = "  " if try_one_line else ""
    doc = "/**"

    if description:
        if not one_line:
            doc += f"\n{indent} *"
        doc += " " + f"\n{indent} * ".join(lines)
    if deprecated:
        if not one_line:
            doc += f"\n{indent} *"
        doc += " @deprecated"
    if summary:
        if not one_line:
            doc += f"\n{indent} *"
        doc += f" @summary {_escape(str(summary))}"

    doc += " " if one_line else f"\n {indent}"
    doc += "*/\n"
    return doc
