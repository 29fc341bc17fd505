"""CLI context and dependency container."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import click
import typer

from tkn_results.cli.shared.console import CLIConsole, console
from tkn_results.core.selector import WILDCARD
from tkn_results.infra.results import ClientConfig, ResultsClient, new_client
from tkn_results.runtime.config import KubeConfig, ResultsConfig

DEFAULT_NAMESPACE = "default"


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands.

    Kubeconfig and the client are created on demand so commands that need
    neither (``version``) work without a cluster.
    """

    console: CLIConsole
    namespace_flag: str | None = None
    all_namespaces: bool = False
    load_kubeconfig: Callable[[], KubeConfig] = KubeConfig.load
    client_factory: Callable[[ClientConfig], ResultsClient] = new_client

    def kubeconfig(self) -> KubeConfig:
        return self.load_kubeconfig()

    def namespace(self, kubeconfig: KubeConfig | None = None) -> str:
        """Namespace to search: ``-`` for all, else flag, context, ``default``."""
        if self.all_namespaces:
            return WILDCARD
        if self.namespace_flag:
            return self.namespace_flag
        kubeconfig = kubeconfig or self.kubeconfig()
        return kubeconfig.namespace or DEFAULT_NAMESPACE

    def results_config(self, kubeconfig: KubeConfig | None = None) -> ResultsConfig:
        return ResultsConfig(kubeconfig or self.kubeconfig(), console=self.console)

    def client(self, kubeconfig: KubeConfig | None = None) -> ResultsClient:
        """Load (and if needed populate) the configuration, then connect."""
        config = self.results_config(kubeconfig)
        config.load()
        return self.client_factory(config.client_config())


def build_cli_context(namespace: str | None = None, all_namespaces: bool = False) -> CLIContext:
    """Build a fresh CLIContext."""
    return CLIContext(console=console, namespace_flag=namespace, all_namespaces=all_namespaces)


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    while context is not None:
        if isinstance(context.obj, CLIContext):
            return context.obj
        context = context.parent
    return build_cli_context()
