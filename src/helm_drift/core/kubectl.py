"""Shell out to kubectl for API discovery and raw object reads."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from helm_drift.core.runner import RunError, run
from helm_drift.errors import NotFoundError, TransportError


@dataclass(frozen=True)
class ResourceType:
    """One entry of a group-version's APIResourceList."""

    kind: str
    name: str
    namespaced: bool

    @property
    def is_subresource(self) -> bool:
        # e.g. deployments/status, pods/log
        return "/" in self.name


def _kube_flags(**kube_opts: str | None) -> list[str]:
    """Build common kubectl flags from options."""
    flags: list[str] = []
    if kube_opts.get("kubeconfig"):
        flags += ["--kubeconfig", kube_opts["kubeconfig"]]
    if kube_opts.get("kube_context"):
        flags += ["--context", kube_opts["kube_context"]]
    return flags


def get_raw(path: str, **kube_opts: str | None) -> Any:
    """kubectl get --raw <path> -> decoded JSON.

    Raises NotFoundError on a 404 from the API server and TransportError on
    any other failure.
    """
    cmd = ["kubectl", "get", "--raw", path]
    cmd += _kube_flags(**kube_opts)
    try:
        output = run(cmd)
    except RunError as e:
        if "(NotFound)" in e.stderr:
            raise NotFoundError(f"{path} not found") from e
        raise TransportError(e.stderr.strip() or str(e)) from e
    try:
        return json.loads(output)
    except json.JSONDecodeError as e:
        raise TransportError(f"Invalid JSON from {path}: {e}") from e


def group_version_path(group_version: str) -> str:
    """Legacy core group lives under /api, everything else under /apis."""
    if "/" in group_version:
        return f"/apis/{group_version}"
    return f"/api/{group_version}"


def object_path(
    group_version: str,
    plural: str,
    namespaced: bool,
    namespace: str,
    name: str,
) -> str:
    path = group_version_path(group_version)
    if namespaced:
        path += f"/namespaces/{quote(namespace, safe='')}"
    return f"{path}/{plural}/{quote(name, safe='')}"


class KubectlCluster:
    """Type catalog and object store backed by kubectl."""

    def __init__(self, **kube_opts: str | None) -> None:
        self.kube_opts = kube_opts

    def list_resource_types(self, group_version: str) -> list[ResourceType]:
        body = get_raw(group_version_path(group_version), **self.kube_opts)
        if not isinstance(body, dict):
            raise TransportError(f"Unexpected discovery response for {group_version}")
        return [
            ResourceType(
                kind=entry.get("kind", ""),
                name=entry.get("name", ""),
                namespaced=bool(entry.get("namespaced", False)),
            )
            for entry in body.get("resources") or []
            if isinstance(entry, dict)
        ]

    def get_object(
        self,
        group_version: str,
        plural: str,
        namespaced: bool,
        namespace: str,
        name: str,
    ) -> dict[str, Any]:
        path = object_path(group_version, plural, namespaced, namespace, name)
        body = get_raw(path, **self.kube_opts)
        if not isinstance(body, dict):
            raise TransportError(f"Unexpected response for {path}")
        return body
