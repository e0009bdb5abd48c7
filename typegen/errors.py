"""Error types raised while loading documents and synthesizing types."""

from __future__ import annotations


class TypegenError(Exception):
    """Base class for every failure that aborts a generation run."""


class LoaderError(TypegenError):
    """Raised when a schema document cannot be read or parsed."""


class ConfigError(TypegenError):
    """Raised when the configuration file is invalid."""


class ResolutionError(TypegenError):
    """Raised when a $ref pointer does not lead to a loaded node."""

    def __init__(
        self,
        ref: str,
        spec_key: str,
        *,
        reason: str | None = None,
        schema_name: str | None = None,
    ) -> None:
        self.ref = ref
        self.spec_key = spec_key
        self.reason = reason
        self.schema_name = schema_name

        super().__init__(str(self))

    def __str__(self) -> str:
        message = f"Unresolvable reference {self.ref!r} in {self.spec_key}"
        if self.reason:
            message += f": {self.reason}"
        if self.schema_name:
            message += f" (while generating {self.schema_name})"
        return message

    def with_schema(self, schema_name: str) -> ResolutionError:
        """Return a copy that names the top-level schema being generated."""
        if self.schema_name:
            return self
        return ResolutionError(
            self.ref, self.spec_key, reason=self.reason, schema_name=schema_name,
        )
