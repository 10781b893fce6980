"""Error taxonomy for drift runs."""

from __future__ import annotations


class DriftError(Exception):
    """Base class for every failure that ends a drift run."""


class ParseError(DriftError):
    """The manifest stream is not valid YAML."""


class NonStringKeyError(DriftError):
    """A decoded document holds a mapping key that is not a string."""

    def __init__(self, key: object) -> None:
        self.key = key
        super().__init__(f"Map has non-string key {key!r}")


class ReleaseError(DriftError):
    """The release manifest could not be fetched."""


class TypeResolutionError(DriftError):
    """No primary resource type matches the kind within its group-version."""


class NotFoundError(DriftError):
    """The declared resource does not exist in the cluster."""


class TransportError(DriftError):
    """Talking to the cluster failed (connectivity, authorization, bad output)."""


class ResourceError(DriftError):
    """A locator failure tagged with the resource that triggered it."""

    def __init__(self, kind: str, name: str, cause: DriftError) -> None:
        self.kind = kind
        self.name = name
        self.cause = cause
        super().__init__(f"finding {kind} {name} failed: {cause}")
