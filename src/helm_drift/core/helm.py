"""Shell out to helm CLI for the deployed release manifest."""

from __future__ import annotations

from helm_drift.core.runner import RunError, run
from helm_drift.errors import ReleaseError


def _kube_flags(**kube_opts: str | None) -> list[str]:
    """Build common helm flags from options."""
    flags: list[str] = []
    if kube_opts.get("kubeconfig"):
        flags += ["--kubeconfig", kube_opts["kubeconfig"]]
    if kube_opts.get("kube_context"):
        flags += ["--kube-context", kube_opts["kube_context"]]
    return flags


def get_manifest(release: str, namespace: str, **kube_opts: str | None) -> str:
    """helm get manifest <release> -n <namespace> -> raw YAML string."""
    cmd = ["helm", "get", "manifest", release, "-n", namespace]
    cmd += _kube_flags(**kube_opts)
    return run(cmd)


class HelmReleaseSource:
    """Declared manifests of one installed release."""

    def __init__(self, release: str, namespace: str, **kube_opts: str | None) -> None:
        self.release = release
        self.namespace = namespace
        self.kube_opts = kube_opts

    def get_manifest_text(self) -> str:
        try:
            return get_manifest(self.release, self.namespace, **self.kube_opts)
        except RunError as e:
            raise ReleaseError(
                f"Getting Helm release {self.release} failed: {e.stderr.strip()}"
            ) from e

    def get_namespace(self) -> str:
        # Helm 3 stores a release in the namespace it was installed into.
        return self.namespace
