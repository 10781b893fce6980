"""Tests for the helm/kubectl subprocess collaborators."""

from __future__ import annotations

import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from helm_drift.core import helm, kubectl
from helm_drift.core.kubectl import KubectlCluster, ResourceType, object_path
from helm_drift.core.runner import RunError, run
from helm_drift.errors import NotFoundError, ReleaseError, TransportError

APPS_V1_DISCOVERY = {
    "kind": "APIResourceList",
    "groupVersion": "apps/v1",
    "resources": [
        {"name": "deployments", "kind": "Deployment", "namespaced": True, "verbs": ["get"]},
        {"name": "deployments/scale", "kind": "Scale", "namespaced": True, "group": "autoscaling"},
        {"name": "deployments/status", "kind": "Deployment", "namespaced": True},
    ],
}


class TestRunner:
    def test_returns_stdout(self) -> None:
        completed = subprocess.CompletedProcess(["x"], 0, stdout="out", stderr="")
        with patch("helm_drift.core.runner.subprocess.run", return_value=completed):
            assert run(["x"]) == "out"

    def test_non_zero_exit(self) -> None:
        completed = subprocess.CompletedProcess(["x"], 2, stdout="", stderr="boom\n")
        with patch("helm_drift.core.runner.subprocess.run", return_value=completed):
            with pytest.raises(RunError) as exc_info:
                run(["x"])
        assert exc_info.value.returncode == 2
        assert exc_info.value.stderr == "boom\n"

    def test_missing_executable(self) -> None:
        with patch("helm_drift.core.runner.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(RunError, match="executable not found"):
                run(["kubectl", "version"])

    def test_timeout(self) -> None:
        with patch(
            "helm_drift.core.runner.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["x"], 5),
        ):
            with pytest.raises(RunError, match="timed out after 5s"):
                run(["x"], timeout=5)


class TestObjectPath:
    def test_core_group_namespaced(self) -> None:
        assert object_path("v1", "configmaps", True, "prod", "cfg") == (
            "/api/v1/namespaces/prod/configmaps/cfg"
        )

    def test_named_group_namespaced(self) -> None:
        assert object_path("apps/v1", "deployments", True, "prod", "web") == (
            "/apis/apps/v1/namespaces/prod/deployments/web"
        )

    def test_cluster_scoped(self) -> None:
        assert object_path("rbac.authorization.k8s.io/v1", "clusterroles", False, "", "admin") == (
            "/apis/rbac.authorization.k8s.io/v1/clusterroles/admin"
        )

    def test_name_is_quoted(self) -> None:
        assert object_path("rbac.authorization.k8s.io/v1", "clusterroles", False, "", "system:aggregate") == (
            "/apis/rbac.authorization.k8s.io/v1/clusterroles/system%3Aaggregate"
        )


class TestKubectlCluster:
    def test_list_resource_types(self) -> None:
        run_mock = MagicMock(return_value=json.dumps(APPS_V1_DISCOVERY))
        with patch.object(kubectl, "run", run_mock):
            records = KubectlCluster(kubeconfig="/tmp/kc").list_resource_types("apps/v1")

        assert records == [
            ResourceType(kind="Deployment", name="deployments", namespaced=True),
            ResourceType(kind="Scale", name="deployments/scale", namespaced=True),
            ResourceType(kind="Deployment", name="deployments/status", namespaced=True),
        ]
        assert [r.is_subresource for r in records] == [False, True, True]
        run_mock.assert_called_once_with(
            ["kubectl", "get", "--raw", "/apis/apps/v1", "--kubeconfig", "/tmp/kc"]
        )

    def test_core_group_discovery_path(self) -> None:
        run_mock = MagicMock(return_value='{"resources": []}')
        with patch.object(kubectl, "run", run_mock):
            assert KubectlCluster(kube_context="staging").list_resource_types("v1") == []
        run_mock.assert_called_once_with(
            ["kubectl", "get", "--raw", "/api/v1", "--context", "staging"]
        )

    def test_get_object(self) -> None:
        body = {"kind": "ConfigMap", "metadata": {"name": "cfg"}}
        run_mock = MagicMock(return_value=json.dumps(body))
        with patch.object(kubectl, "run", run_mock):
            assert KubectlCluster().get_object("v1", "configmaps", True, "prod", "cfg") == body
        run_mock.assert_called_once_with(
            ["kubectl", "get", "--raw", "/api/v1/namespaces/prod/configmaps/cfg"]
        )

    def test_not_found(self) -> None:
        error = RunError(
            ["kubectl"], 1,
            "Error from server (NotFound): the server could not find the requested resource\n",
        )
        with patch.object(kubectl, "run", MagicMock(side_effect=error)):
            with pytest.raises(NotFoundError):
                KubectlCluster().get_object("v1", "configmaps", True, "prod", "cfg")

    def test_other_failures_are_transport_errors(self) -> None:
        error = RunError(["kubectl"], 1, "Error from server (Forbidden): denied\n")
        with patch.object(kubectl, "run", MagicMock(side_effect=error)):
            with pytest.raises(TransportError, match="Forbidden"):
                KubectlCluster().list_resource_types("apps/v1")

    def test_invalid_json(self) -> None:
        with patch.object(kubectl, "run", MagicMock(return_value="not json")):
            with pytest.raises(TransportError, match="Invalid JSON"):
                KubectlCluster().get_object("v1", "configmaps", True, "prod", "cfg")


class TestHelmReleaseSource:
    def test_manifest_text(self) -> None:
        run_mock = MagicMock(return_value="---\nkind: ConfigMap\n")
        with patch.object(helm, "run", run_mock):
            source = helm.HelmReleaseSource("web", "prod", kube_context="staging")
            assert source.get_manifest_text() == "---\nkind: ConfigMap\n"
            assert source.get_namespace() == "prod"
        run_mock.assert_called_once_with(
            ["helm", "get", "manifest", "web", "-n", "prod", "--kube-context", "staging"]
        )

    def test_release_failure(self) -> None:
        error = RunError(["helm"], 1, "Error: release: not found\n")
        with patch.object(helm, "run", MagicMock(side_effect=error)):
            with pytest.raises(ReleaseError, match="Getting Helm release web failed"):
                helm.HelmReleaseSource("web", "prod").get_manifest_text()
