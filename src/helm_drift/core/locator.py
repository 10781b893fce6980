"""Discovery-driven lookup of live objects for arbitrary resource kinds.

Nothing here knows about specific kinds. For every group-version the
locator asks the cluster's type catalog once, keeps the first primary
(non sub-resource) entry per kind, and uses that entry's plural name and
scope to address the object.
"""

from __future__ import annotations

from typing import Any, Protocol

from helm_drift.core.kubectl import ResourceType
from helm_drift.errors import NotFoundError, TypeResolutionError
from helm_drift.observability.logging import get_logger

logger = get_logger("locator")


class TypeCatalog(Protocol):
    def list_resource_types(self, group_version: str) -> list[ResourceType]: ...


class ObjectStore(Protocol):
    def get_object(
        self,
        group_version: str,
        plural: str,
        namespaced: bool,
        namespace: str,
        name: str,
    ) -> dict[str, Any]: ...


def parse_group_version(api_version: str) -> tuple[str, str]:
    """'apps/v1' -> ('apps', 'v1'); 'v1' -> ('', 'v1')."""
    parts = api_version.split("/")
    if len(parts) == 1 and parts[0]:
        return "", parts[0]
    if len(parts) == 2 and all(parts):
        return parts[0], parts[1]
    raise TypeResolutionError(f"Unexpected group version string {api_version!r}")


class ResourceLocator:
    """Resolve (apiVersion, kind) to a resource collection and fetch by name."""

    def __init__(self, catalog: TypeCatalog, store: ObjectStore) -> None:
        self.catalog = catalog
        self.store = store
        # group-version -> kind -> primary resource type
        self._registry: dict[str, dict[str, ResourceType]] = {}

    def resolve(self, api_version: str, kind: str) -> ResourceType:
        parse_group_version(api_version)
        kinds = self._registry.get(api_version)
        if kinds is None:
            kinds = self._load(api_version)
            self._registry[api_version] = kinds

        resource_type = kinds.get(kind)
        if resource_type is None:
            raise TypeResolutionError(
                f"Did not find matching resource for {api_version} {kind}"
            )
        return resource_type

    def locate(
        self, api_version: str, kind: str, name: str, namespace: str
    ) -> dict[str, Any]:
        """Fetch the live object. Cluster-scoped kinds ignore namespace."""
        resource_type = self.resolve(api_version, kind)
        logger.debug(
            "locating",
            api_version=api_version,
            resource=resource_type.name,
            namespaced=resource_type.namespaced,
            name=name,
        )
        try:
            return self.store.get_object(
                api_version,
                resource_type.name,
                resource_type.namespaced,
                namespace if resource_type.namespaced else "",
                name,
            )
        except NotFoundError as e:
            where = f" in namespace {namespace}" if resource_type.namespaced else ""
            raise NotFoundError(f"{kind} {name} not found{where}") from e

    def _load(self, api_version: str) -> dict[str, ResourceType]:
        try:
            records = self.catalog.list_resource_types(api_version)
        except NotFoundError as e:
            raise TypeResolutionError(
                f"Group version {api_version} is not served by the cluster"
            ) from e
        logger.debug("catalog_loaded", api_version=api_version, entries=len(records))

        kinds: dict[str, ResourceType] = {}
        for record in records:
            if record.is_subresource or record.kind in kinds:
                continue
            kinds[record.kind] = record
        return kinds
