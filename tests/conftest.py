"""Shared fakes for the cluster collaborators."""

from __future__ import annotations

import copy
from typing import Any

import pytest
import structlog

from helm_drift.core.kubectl import ResourceType
from helm_drift.errors import NotFoundError


class FakeCluster:
    """In-memory type catalog and object store.

    catalog: group-version -> list of ResourceType, in discovery order.
    objects: (group-version, plural, namespace, name) -> body; namespace is
    "" for cluster-scoped objects.
    """

    def __init__(
        self,
        catalog: dict[str, list[ResourceType]] | None = None,
        objects: dict[tuple[str, str, str, str], dict[str, Any]] | None = None,
    ) -> None:
        self.catalog = catalog or {}
        self.objects = objects or {}
        self.catalog_calls: list[str] = []
        self.object_calls: list[tuple[str, str, bool, str, str]] = []

    def list_resource_types(self, group_version: str) -> list[ResourceType]:
        self.catalog_calls.append(group_version)
        if group_version not in self.catalog:
            raise NotFoundError(f"/apis/{group_version} not found")
        return list(self.catalog[group_version])

    def get_object(
        self,
        group_version: str,
        plural: str,
        namespaced: bool,
        namespace: str,
        name: str,
    ) -> dict[str, Any]:
        self.object_calls.append((group_version, plural, namespaced, namespace, name))
        key = (group_version, plural, namespace if namespaced else "", name)
        if key not in self.objects:
            raise NotFoundError(f"{plural}/{name} not found")
        return copy.deepcopy(self.objects[key])


STANDARD_CATALOG: dict[str, list[ResourceType]] = {
    "v1": [
        ResourceType(kind="ConfigMap", name="configmaps", namespaced=True),
        ResourceType(kind="Namespace", name="namespaces", namespaced=False),
        ResourceType(kind="Namespace", name="namespaces/status", namespaced=False),
        ResourceType(kind="Service", name="services", namespaced=True),
        ResourceType(kind="Service", name="services/status", namespaced=True),
    ],
    "apps/v1": [
        ResourceType(kind="Deployment", name="deployments/status", namespaced=True),
        ResourceType(kind="Deployment", name="deployments", namespaced=True),
        ResourceType(kind="Scale", name="deployments/scale", namespaced=True),
    ],
    "rbac.authorization.k8s.io/v1": [
        ResourceType(kind="ClusterRole", name="clusterroles", namespaced=False),
    ],
}


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI runs bind log output to their own streams; undo that after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster(catalog=copy.deepcopy(STANDARD_CATALOG))
