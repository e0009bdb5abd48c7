"""Resolution state and the uniform result record of every resolver."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from .loader import get_schemas


@dataclass(frozen=True)
class ImportRef:
    """A named declaration a type expression depends on."""

    name: str
    spec_key: str | None = None


@dataclass(frozen=True)
class GeneratorSchema:
    """One top-level declaration: its name, body text and dependencies."""

    name: str
    model: str
    imports: list[ImportRef] = field(default_factory=list)


@dataclass
class ResolvedType:
    """Result of resolving one schema node.

    ``value`` is the TypeScript type expression. ``imports`` and ``schemas``
    keep resolution order and may contain duplicates; the emission stage
    dedupes them.
    """

    value: str
    imports: list[ImportRef] = field(default_factory=list)
    schemas: list[GeneratorSchema] = field(default_factory=list)
    is_enum: bool = False
    type: str = "object"
    is_ref: bool = False
    schema: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolutionContext:
    """Read-only state shared by every resolver during one generation run.

    ``specs`` maps document keys to loaded documents, ``target`` is the
    document being turned into declarations and ``spec_key`` the document
    the resolver is currently reading. ``visiting`` holds the
    (document, pointer) pairs of references being followed, for cycle
    detection. Derivations return new contexts; nothing is mutated.
    """

    specs: Mapping[str, Mapping[str, Any]]
    target: str
    spec_key: str | None = None
    override: Mapping[str, Any] = field(default_factory=dict)
    visiting: frozenset[tuple[str, str]] = frozenset()

    def __post_init__(self) -> None:
        if self.spec_key is None:
            object.__setattr__(self, "spec_key", self.target)

    @property
    def current_spec(self) -> Mapping[str, Any]:
        return self.specs.get(self.spec_key) or {}

    @property
    def target_schemas(self) -> Mapping[str, Any]:
        return get_schemas(self.specs.get(self.target) or {})

    def has_target_schema(self, name: str | None) -> bool:
        """Return True when ``name`` is a top-level schema of the target."""
        return bool(name) and name in self.target_schemas

    def suffix_for(self, component_type: str) -> str:
        components = self.override.get("components") or {}
        return (components.get(component_type) or {}).get("suffix", "")

    def for_spec(self, spec_key: str) -> ResolutionContext:
        if spec_key == self.spec_key:
            return self
        return replace(self, spec_key=spec_key)

    def entering(self, spec_key: str, pointer: str) -> ResolutionContext:
        return replace(self, visiting=self.visiting | {(spec_key, pointer)})

    def is_visiting(self, spec_key: str, pointer: str) -> bool:
        return (spec_key, pointer) in self.visiting
