"""Minimal kubeconfig reader/writer.

Only the pieces tkn-results needs are interpreted: the current context, its
namespace and user, and named context extensions. Everything else in the
file is preserved as-is on save.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from tkn_results.core.errors import ConfigError
from tkn_results.infra.results import ImpersonationConfig

DEFAULT_KUBECONFIG = Path("~/.kube/config")


def kubeconfig_path() -> Path:
    """First path of ``$KUBECONFIG``, or ``~/.kube/config``."""
    env = os.environ.get("KUBECONFIG", "")
    first = next((p for p in env.split(os.pathsep) if p), None)
    return Path(first).expanduser() if first else DEFAULT_KUBECONFIG.expanduser()


def _named(entries: list[dict[str, Any]] | None, name: str) -> dict[str, Any] | None:
    for entry in entries or []:
        if entry.get("name") == name:
            return entry
    return None


class KubeConfig:
    """A loaded kubeconfig file.

    Example:
        kube = KubeConfig.load()
        ext = kube.extension("tekton-results")
    """

    def __init__(self, data: dict[str, Any], path: Path):
        self.data = data
        self.path = path

    @classmethod
    def load(cls, path: Path | None = None) -> KubeConfig:
        """Read and parse a kubeconfig.

        Raises:
            ConfigError: If the file is missing or not valid YAML
        """
        path = path or kubeconfig_path()
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigError(f"kubeconfig not found at {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing kubeconfig {path}", details=str(e)) from e
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid kubeconfig {path}")
        logger.debug(f"Loaded kubeconfig from {path}")
        return cls(data, path)

    # -------------------------------------------------------------------------
    # Context
    # -------------------------------------------------------------------------

    @property
    def current_context(self) -> str:
        return self.data.get("current-context") or ""

    def _context(self) -> dict[str, Any]:
        entry = _named(self.data.get("contexts"), self.current_context)
        if not self.current_context or entry is None:
            raise ConfigError("current context not set in kubeconfig")
        context = entry.setdefault("context", {})
        if context is None:
            context = entry["context"] = {}
        return context

    @property
    def namespace(self) -> str:
        try:
            return self._context().get("namespace") or ""
        except ConfigError:
            return ""

    def _user(self) -> dict[str, Any]:
        entry = _named(self.data.get("users"), self._context().get("user", ""))
        return (entry or {}).get("user") or {}

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    @property
    def bearer_token(self) -> str:
        """Token of the current user, read from ``token`` or ``tokenFile``."""
        user = self._user()
        if token := user.get("token"):
            return token
        if token_file := user.get("tokenFile"):
            try:
                return Path(token_file).expanduser().read_text().strip()
            except OSError as e:
                logger.warning(f"Could not read token file {token_file}: {e}")
        return ""

    @property
    def impersonation(self) -> ImpersonationConfig:
        user = self._user()
        return ImpersonationConfig(
            user=user.get("as") or "",
            uid=user.get("as-uid") or "",
            groups=list(user.get("as-groups") or []),
            extra={k: list(v) for k, v in (user.get("as-user-extra") or {}).items()},
        )

    # -------------------------------------------------------------------------
    # Extensions
    # -------------------------------------------------------------------------

    def extension(self, name: str) -> dict[str, Any] | None:
        entry = _named(self._context().get("extensions"), name)
        if entry is None:
            return None
        return entry.get("extension") or {}

    def set_extension(self, name: str, value: dict[str, Any]) -> None:
        context = self._context()
        extensions = context.get("extensions")
        if extensions is None:
            extensions = context["extensions"] = []
        entry = _named(extensions, name)
        if entry is None:
            extensions.append({"name": name, "extension": value})
        else:
            entry["extension"] = value

    def save(self) -> None:
        """Write the kubeconfig back. In order to do it transactionally,
        it first writes to a temporary file and then renames it to the target path.
        """
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(temp_path, "w") as f:
            yaml.safe_dump(self.data, f, default_flow_style=False, sort_keys=False, indent=2)
        os.chmod(temp_path, 0o600)
        temp_path.replace(self.path)
        logger.debug(f"Saved kubeconfig to {self.path}")
