"""Results API client configuration, backed by the kubeconfig."""

from __future__ import annotations

import os
from collections.abc import Callable

from loguru import logger
from pydantic import ValidationError

from tkn_results.core.errors import ConfigError
from tkn_results.infra.k8s import Endpoint, discover_endpoints_sync
from tkn_results.infra.results import ClientConfig, ClientType, ImpersonationConfig, TLSConfig
from tkn_results.utils.console_like import ConsoleLike, coalesce_console

from .extension import EXTENSION_NAME, ResultsExtension, parse_bool, parse_duration
from .kubeconfig import KubeConfig

ENV_HOST = "TKN_RESULTS_HOST"
ENV_TOKEN = "TKN_RESULTS_TOKEN"
ENV_CLIENT_TYPE = "TKN_RESULTS_CLIENT_TYPE"

# Keys filled in interactively when missing
PROMPTED_KEYS = ("host", "client-type", "token")

MASK = "REDACTED"


class ResultsConfig:
    """Read, populate and persist the ``tekton-results`` extension.

    Args:
        kubeconfig: Loaded kubeconfig holding the extension
        console: Used for prompts; without one, prompting is disabled
        discover: Cluster lookup used to suggest hosts
    """

    def __init__(
        self,
        kubeconfig: KubeConfig,
        console: ConsoleLike | None = None,
        discover: Callable[[], list[Endpoint]] = discover_endpoints_sync,
    ):
        self.kubeconfig = kubeconfig
        self.console = coalesce_console(console)
        self.discover = discover
        self.extension = self._read()

    def _read(self) -> ResultsExtension:
        raw = self.kubeconfig.extension(EXTENSION_NAME) or {}
        try:
            return ResultsExtension.model_validate(raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid {EXTENSION_NAME} extension", details=str(e)) from e

    def _save(self) -> None:
        self.kubeconfig.set_extension(EXTENSION_NAME, self.extension.to_kubeconfig())
        self.kubeconfig.save()

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------

    def _ask_host(self) -> str:
        try:
            endpoints = self.discover()
        except ConfigError as e:
            logger.debug(f"Endpoint discovery failed: {e.message}")
            endpoints = []
        if not endpoints:
            return self.console.ask("Host :", self.extension.host)
        return self.console.choose(
            "Tekton Results Routes:",
            [e.host for e in endpoints],
            [f"[{e.namespace}]" for e in endpoints],
        )

    def _ask_client_type(self) -> str:
        return self.console.choose("Client Type :", [t.value for t in ClientType])

    def _ask_token(self) -> str:
        default = self.extension.token or self.kubeconfig.bearer_token
        return self.console.ask("Token :", default, password=True)

    def _ask(self, key: str) -> str:
        match key:
            case "host":
                return self._ask_host()
            case "client-type":
                return self._ask_client_type()
            case "token":
                return self._ask_token()
            case _:
                return self.console.ask(f"{key} :", self.extension.get(key))

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def load(self) -> ResultsExtension:
        """Fill in missing settings and persist them if anything changed."""
        changed = False
        for key in PROMPTED_KEYS:
            if self.extension.get(key):
                continue
            if key == "token" and (token := self.kubeconfig.bearer_token):
                value = token
            else:
                value = self._ask(key)
            self.extension.set(key, value)
            changed = changed or bool(value)
        if changed:
            self._save()
        return self.extension

    def set(self, values: dict[str, str] | None, prompt: bool = True) -> None:
        """Update settings.

        Args:
            values: ``key -> value``; an empty value asks for that key. None
                asks for every prompted key.
            prompt: Whether asking is allowed

        Raises:
            ConfigError: On unknown keys, or when a value is needed but
                prompting is disabled
        """
        if values is None:
            values = {key: "" for key in PROMPTED_KEYS}
        for key, value in values.items():
            ResultsExtension.attribute(key)
            if not value:
                if not prompt:
                    raise ConfigError(f"no value given for {key}", details="use key=value")
                value = self._ask(key)
            self.extension.set(key, value)
        self._save()

    def reset(self, prompt: bool = True) -> None:
        """Clear every setting, then populate the required ones again."""
        self.extension = ResultsExtension()
        if prompt:
            self.load()
        else:
            self._save()

    def view(self, raw: bool = False) -> dict[str, str]:
        """The stored settings; the token is masked unless ``raw``."""
        data = self.extension.to_kubeconfig()
        if not raw and data.get("token"):
            data["token"] = MASK
        return data

    def client_config(self) -> ClientConfig:
        """Build transport settings from the extension and environment.

        Raises:
            ConfigError: If the host is missing or a value is malformed
        """
        ext = self.extension
        host = os.environ.get(ENV_HOST) or ext.host
        if not host:
            raise ConfigError(
                "tekton results host is not configured", details="run `tkn-results config results`"
            )

        raw_type = (os.environ.get(ENV_CLIENT_TYPE) or ext.client_type or ClientType.REST).upper()
        try:
            client_type = ClientType(raw_type)
        except ValueError as e:
            raise ConfigError(f"invalid client type: {raw_type}", details="use GRPC or REST") from e

        impersonation = self.kubeconfig.impersonation
        if ext.act_as:
            impersonation = ImpersonationConfig(
                user=ext.act_as,
                uid=ext.act_as_uid,
                groups=[g.strip() for g in ext.act_as_groups.split(",") if g.strip()],
                extra=impersonation.extra,
            )

        config = ClientConfig(
            host=host,
            client_type=client_type,
            timeout=parse_duration(ext.timeout),
            token=os.environ.get(ENV_TOKEN) or ext.token,
            tls=TLSConfig(
                insecure=parse_bool(ext.insecure_skip_tls_verify, default=True),
                ca_file=ext.certificate_authority,
                cert_file=ext.client_certificate,
                key_file=ext.client_key,
                server_name=ext.tls_server_name,
            ),
            impersonation=impersonation,
        )
        if ext.api_path:
            config.api_path = ext.api_path
        logger.debug(f"Using {config.client_type} client for {config.host}")
        return config
