"""Render templates and write generated output.

Takes the context from context_builder and writes, under the output
directory, one model/<Name>.ts per declaration (other documents in
model/<slug>/), an index.ts per model directory, and operations.ts.
"""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Any, Iterable

import jinja2

from .context import GeneratorSchema, ImportRef
from .doc import js_doc
from .naming import get_key, pascal

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
MODEL_DIR = "model"


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
    env.filters["key"] = get_key
    return env


def render_header(title: str, version: str) -> str:
    lines = ["/**", " * Generated by typegen.", " * Do not edit manually."]
    if title:
        lines.append(f" * {title}")
    if version:
        lines.append(f" * OpenAPI spec version: {version}")
    lines.append(" */")
    return "\n".join(lines)


def import_path(from_dir: str, to_dir: str, name: str) -> str:
    """Relative module path from one model directory to a declaration."""
    path = posixpath.relpath(posixpath.join(to_dir, name), from_dir)
    return path if path.startswith(".") else f"./{path}"


def resolve_imports(
    imports: Iterable[ImportRef],
    own_dir: str,
    dirs: dict[str, str],
    exclude: str | None = None,
) -> list[dict[str, str]]:
    """Dedupe imports by name, first occurrence wins, and attach paths."""
    resolved: list[dict[str, str]] = []
    seen: set[str] = set()
    for item in imports:
        if item.name == exclude or item.name in seen:
            continue
        seen.add(item.name)
        to_dir = dirs.get(item.spec_key, own_dir) if item.spec_key else own_dir
        resolved.append({"name": item.name, "path": import_path(own_dir, to_dir, item.name)})
    return resolved


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def generate(context: dict[str, Any], output_dir: Path | str) -> list[Path]:
    """Render every declaration and operation file into ``output_dir``."""
    env = _environment()
    output = Path(output_dir)
    model_root = output / MODEL_DIR
    header = render_header(context["title"], context["version"]) if context["header"] else ""
    dirs: dict[str, str] = context["dirs"]
    written: list[Path] = []

    schema_template = env.get_template("schema.ts.j2")
    index_template = env.get_template("index.ts.j2")
    for document in context["documents"]:
        directory = document["dir"]
        schemas: list[GeneratorSchema] = document["schemas"]
        for schema in schemas:
            text = schema_template.render(
                header=header,
                imports=resolve_imports(schema.imports, directory, dirs, exclude=schema.name),
                model=schema.model,
            )
            written.append(_write(model_root / directory / f"{schema.name}.ts", text))
        if schemas:
            text = index_template.render(header=header, names=[s.name for s in schemas])
            written.append(_write(model_root / directory / "index.ts", text))

    operations = [
        {
            **vars(op),
            "type_name": pascal(op.name),
            "doc": js_doc({"summary": op.summary}),
        }
        for op in context["operations"]
    ]
    if operations:
        imports = resolve_imports(
            (item for op in context["operations"] for item in op.imports),
            ".",
            dirs,
        )
        for item in imports:
            item["path"] = import_path(".", MODEL_DIR, item["path"])
        text = env.get_template("operations.ts.j2").render(
            header=header, imports=imports, operations=operations,
        )
        written.append(_write(output / "operations.ts", text))

    logger.debug("Wrote %d file(s) under %s", len(written), output)
    print(f"Generated {len(written)} files in {output} ({context['schema_count']} declarations)")
    return written
