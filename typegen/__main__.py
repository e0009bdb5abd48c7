"""Entry point: python -m typegen

Reads an OpenAPI document (plus every document it references) and writes
TypeScript declarations for its schemas and operations.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .codegen import generate
from .config import ConfigCache, GeneratorConfig, build_config, load_config
from .context_builder import build_context
from .errors import TypegenError


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="typegen",
        description="Generate TypeScript types from OpenAPI documents.",
    )
    parser.add_argument("input", nargs="?", help="entry OpenAPI document (JSON or YAML)")
    parser.add_argument("-o", "--output", help="output directory")
    parser.add_argument("-c", "--config", help="YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    if args.config:
        config = load_config(args.config, ConfigCache())
    elif args.input:
        config = build_config({"input": args.input})
    else:
        raise TypegenError("An input document or a --config file is required.")

    if args.input and args.config:
        config = replace(config, input=Path(args.input))
    if args.output:
        config = replace(config, output=Path(args.output))
    return config


async def run(config: GeneratorConfig) -> list[Path]:
    context = await build_context(config)
    return generate(context, config.output)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = _resolve_config(args)
        asyncio.run(run(config))
    except TypegenError as exc:
        print(f"typegen: error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
