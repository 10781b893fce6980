"""Click CLI entry point for helm-drift."""

from __future__ import annotations

import sys

import click

from helm_drift.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_NAMESPACE,
    LOG_LEVELS,
    DriftConfig,
)
from helm_drift.core.helm import HelmReleaseSource
from helm_drift.core.kubectl import KubectlCluster
from helm_drift.core.locator import ResourceLocator
from helm_drift.core.reconcile import reconcile
from helm_drift.errors import DriftError
from helm_drift.observability.logging import setup_logging
from helm_drift.output.terminal import render_terminal
from helm_drift.parser.manifest import parse_manifest


@click.group()
@click.version_option(package_name="helm-drift")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    envvar="HELM_DRIFT_LOG_LEVEL",
    show_default=True,
    help="Diagnostic verbosity (stderr)",
)
def main(log_level: str) -> None:
    """helm-drift: Line-level drift between a Helm release and the live cluster."""
    setup_logging(log_level)


@main.command()
@click.argument("release")
@click.option(
    "-n", "--namespace",
    default=DEFAULT_NAMESPACE,
    envvar="HELM_DRIFT_NAMESPACE",
    help="Release namespace",
)
@click.option(
    "--keep-common-changes",
    is_flag=True,
    envvar="HELM_DRIFT_KEEP_COMMON_CHANGES",
    help="Do not remove server-managed fields (status, uid, ...) before diffing",
)
@click.option(
    "--continue-on-error",
    is_flag=True,
    help="Report resources that cannot be found and keep going",
)
@click.option("--summary", is_flag=True, help="List drifted field paths per resource")
@click.option("--kubeconfig", default=None, help="Path to kubeconfig")
@click.option("--kube-context", default=None, help="Kubernetes context to use")
@click.option("--no-color", is_flag=True, help="Disable colored output")
def diff(
    release: str,
    namespace: str,
    keep_common_changes: bool,
    continue_on_error: bool,
    summary: bool,
    kubeconfig: str | None,
    kube_context: str | None,
    no_color: bool,
) -> None:
    """Diff a release's last-applied manifests against live cluster state."""
    config = DriftConfig(
        release=release,
        namespace=namespace,
        kubeconfig=kubeconfig,
        kube_context=kube_context,
        preserve_excluded_fields=keep_common_changes,
        continue_on_error=continue_on_error,
        show_summary=summary,
        color=not no_color,
    )
    sys.exit(run_diff(config))


def run_diff(config: DriftConfig) -> int:
    """Execute one drift run and return the process exit code."""
    source = HelmReleaseSource(config.release, config.namespace, **config.kube_opts)
    cluster = KubectlCluster(**config.kube_opts)

    try:
        # 1. Fetch and parse the declared manifests
        resources = parse_manifest(source.get_manifest_text())

        # 2-3. Locate, normalize & diff
        outcomes = reconcile(
            resources,
            ResourceLocator(cluster, cluster),
            namespace=source.get_namespace(),
            preserve_excluded_fields=config.preserve_excluded_fields,
            continue_on_error=config.continue_on_error,
            summarize=config.show_summary,
        )
    except DriftError as e:
        click.echo(f"Error: {e}", err=True)
        return 1

    # 4. Output
    render_terminal(outcomes, no_color=not config.color, show_summary=config.show_summary)
    return 0 if all(o.ok for o in outcomes) else 1
