"""Run loop: locate, normalize and diff every declared resource in order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from helm_drift.config import NONDETERMINISTIC_FIELDS
from helm_drift.core.locator import ResourceLocator
from helm_drift.diff.engine import DiffLine, FieldChange, render, summarize_changes
from helm_drift.diff.filters import normalize
from helm_drift.errors import (
    NotFoundError,
    ResourceError,
    TransportError,
    TypeResolutionError,
)
from helm_drift.observability.logging import get_logger
from helm_drift.parser.manifest import Resource

logger = get_logger("reconcile")

_LOCATOR_ERRORS = (NotFoundError, TypeResolutionError, TransportError)


@dataclass
class ResourceOutcome:
    """Result for one declared resource, tagged with its manifest position."""

    index: int
    resource: Resource
    live: dict[str, Any] | None = None
    lines: list[DiffLine] = field(default_factory=list)
    changes: list[FieldChange] = field(default_factory=list)
    error: ResourceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def drifted(self) -> bool:
        return any(line.tag != "unchanged" for line in self.lines)


def reconcile(
    resources: list[Resource],
    locator: ResourceLocator,
    namespace: str,
    preserve_excluded_fields: bool = False,
    continue_on_error: bool = False,
    summarize: bool = False,
) -> list[ResourceOutcome]:
    """Compare every resource with its live counterpart.

    All resources are located before any diff is computed. With
    continue_on_error=False the first locator failure is raised as a
    ResourceError; otherwise it is recorded on that resource's outcome.
    """
    outcomes: list[ResourceOutcome] = []
    for index, resource in enumerate(resources):
        outcome = ResourceOutcome(index=index, resource=resource)
        try:
            outcome.live = locator.locate(
                resource.api_version,
                resource.kind,
                resource.name,
                resource.namespace or namespace,
            )
        except _LOCATOR_ERRORS as e:
            error = ResourceError(resource.kind, resource.name, e)
            if not continue_on_error:
                raise error from e
            logger.debug("resource_failed", kind=resource.kind, name=resource.name, error=str(e))
            outcome.error = error
        outcomes.append(outcome)

    for outcome in outcomes:
        if outcome.live is None:
            continue
        live = outcome.live
        if not preserve_excluded_fields:
            live = normalize(live, NONDETERMINISTIC_FIELDS)
        outcome.lines = render(outcome.resource.document, live)
        if summarize:
            outcome.changes = summarize_changes(outcome.resource.document, live)

    return sorted(outcomes, key=lambda o: o.index)
