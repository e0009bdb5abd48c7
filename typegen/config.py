"""Generator configuration.

A YAML file such as::

    input: specs/petstore.yaml
    output: src/api
    suffixes:
      responses: Response
      requestBodies: Body
    header: true

Relative paths are resolved against the configuration file. The output
directory can be overridden with the TYPEGEN_OUTPUT environment variable.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

OUTPUT_ENV = "TYPEGEN_OUTPUT"

DEFAULT_SUFFIXES: dict[str, str] = {
    "responses": "Response",
    "requestBodies": "Body",
}


@dataclass(frozen=True)
class GeneratorConfig:
    input: Path
    output: Path = Path("generated")
    suffixes: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SUFFIXES))
    header: bool = True

    @property
    def override(self) -> dict[str, Any]:
        """Name suffixes in the shape the resolution context expects."""
        return {
            "components": {
                component_type: {"suffix": suffix}
                for component_type, suffix in self.suffixes.items()
            }
        }


class ConfigCache:
    """Per-run cache of parsed configuration files keyed by resolved path."""

    def __init__(self) -> None:
        self._entries: dict[Path, GeneratorConfig] = {}

    def get(self, path: Path) -> GeneratorConfig | None:
        return self._entries.get(path)

    def put(self, path: Path, config: GeneratorConfig) -> None:
        self._entries[path] = config

    def invalidate(self, path: Path | None = None) -> None:
        if path is None:
            self._entries.clear()
        else:
            self._entries.pop(path.resolve(), None)


def _require_string(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{label} must be a non-empty string.")
    return value


def _parse_suffixes(value: Any) -> dict[str, str]:
    if value is None:
        return dict(DEFAULT_SUFFIXES)
    if not isinstance(value, Mapping):
        raise ConfigError("suffixes must be a mapping of component type to suffix.")
    suffixes = dict(DEFAULT_SUFFIXES)
    for component_type, suffix in value.items():
        if not isinstance(suffix, str):
            raise ConfigError(f"suffixes.{component_type} must be a string.")
        suffixes[str(component_type)] = suffix
    return suffixes


def build_config(
    raw: Mapping[str, Any],
    base_path: Path = Path("."),
) -> GeneratorConfig:
    """Validate a configuration mapping."""
    input_path = base_path / _require_string(raw.get("input"), "input")
    output = raw.get("output", "generated")
    output_path = base_path / _require_string(output, "output")

    env_output = os.environ.get(OUTPUT_ENV)
    if env_output:
        output_path = Path(env_output)

    header = raw.get("header", True)
    if not isinstance(header, bool):
        raise ConfigError("header must be true or false.")

    return GeneratorConfig(
        input=input_path,
        output=output_path,
        suffixes=_parse_suffixes(raw.get("suffixes")),
        header=header,
    )


def load_config(
    config_path: Path | str,
    cache: ConfigCache | None = None,
) -> GeneratorConfig:
    """Load and validate a YAML configuration file."""
    path = Path(config_path).resolve()
    if cache is not None:
        cached = cache.get(path)
        if cached is not None:
            return cached

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, Mapping):
        raise ConfigError("Configuration root must be a mapping.")

    config = build_config(parsed, path.parent)
    if cache is not None:
        cache.put(path, config)
    return config
