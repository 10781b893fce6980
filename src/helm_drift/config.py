"""Default field exclusions and run settings."""

from __future__ import annotations

from dataclasses import dataclass

# Key paths stripped from the live object before diffing. Order is kept so
# normalization is applied the same way on every run.
NONDETERMINISTIC_FIELDS: tuple[tuple[str, ...], ...] = (
    ("status",),
    ("metadata", "creationTimestamp"),
    ("metadata", "deletionTimestamp"),
    ("metadata", "selfLink"),
    ("metadata", "resourceVersion"),
    ("metadata", "generation"),
    ("metadata", "uid"),
    ("metadata", "namespace"),
)

# Default subprocess timeout in seconds
DEFAULT_TIMEOUT = 60

DEFAULT_NAMESPACE = "default"

LOG_LEVELS = ("debug", "info", "warning", "error")

DEFAULT_LOG_LEVEL = "warning"


@dataclass(frozen=True)
class DriftConfig:
    """Settings for one drift run, built once by the CLI."""

    release: str
    namespace: str = DEFAULT_NAMESPACE
    kubeconfig: str | None = None
    kube_context: str | None = None
    preserve_excluded_fields: bool = False
    continue_on_error: bool = False
    show_summary: bool = False
    color: bool = True

    @property
    def kube_opts(self) -> dict[str, str | None]:
        return {
            "kubeconfig": self.kubeconfig,
            "kube_context": self.kube_context,
        }
