"""The ``tekton-results`` kubeconfig context extension.

Settings are stored per kubeconfig context, as an extension of the current
context, so switching clusters switches Results API endpoints too::

    contexts:
    - name: prod
      context:
        cluster: prod
        extensions:
        - name: tekton-results
          extension:
            host: https://tekton-results.apps.example.com
            client-type: REST
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from tkn_results.core.errors import ConfigError

EXTENSION_NAME = "tekton-results"

DEFAULT_TIMEOUT = 10.0

_DURATION_UNITS = {"ns": 1e-9, "us": 1e-6, "µs": 1e-6, "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0}
_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")


class ResultsExtension(BaseModel):
    """Results API client settings, keyed by their kubeconfig names.

    Every value is a string, the way kubectl extensions store them; empty
    means unset.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    client_type: str = Field(default="", alias="client-type")
    host: str = ""
    api_path: str = Field(default="", alias="api-path")
    insecure_skip_tls_verify: str = Field(default="", alias="insecure-skip-tls-verify")
    timeout: str = ""
    certificate_authority: str = Field(default="", alias="certificate-authority")
    client_certificate: str = Field(default="", alias="client-certificate")
    client_key: str = Field(default="", alias="client-key")
    tls_server_name: str = Field(default="", alias="tls-server-name")
    act_as: str = Field(default="", alias="act-as")
    act_as_uid: str = Field(default="", alias="act-as-uid")
    act_as_groups: str = Field(default="", alias="act-as-groups")
    token: str = ""

    @classmethod
    def keys(cls) -> list[str]:
        """Kubeconfig names of every setting, in declaration order."""
        return [f.alias or name for name, f in cls.model_fields.items()]

    @classmethod
    def attribute(cls, key: str) -> str:
        """Map a kubeconfig key to the model attribute.

        Raises:
            ConfigError: If ``key`` is not a known setting
        """
        for name, f in cls.model_fields.items():
            if key in (name, f.alias):
                return name
        raise ConfigError(f"unknown config key: {key}", details=f"valid keys: {', '.join(cls.keys())}")

    def get(self, key: str) -> str:
        return getattr(self, self.attribute(key))

    def set(self, key: str, value: str) -> None:
        setattr(self, self.attribute(key), value)

    def to_kubeconfig(self) -> dict[str, str]:
        """Serialized form written into the kubeconfig, empty values omitted."""
        return {k: v for k, v in self.model_dump(by_alias=True).items() if v}


def parse_duration(value: str, default: float = DEFAULT_TIMEOUT) -> float:
    """Parse a duration such as ``10s``, ``1m30s`` or ``500ms`` into seconds.

    A bare number is taken as seconds. Empty means ``default``.

    Raises:
        ConfigError: If the value is not a duration
    """
    value = value.strip()
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        pass
    parts = _DURATION_PART.findall(value)
    if not parts or "".join(n + u for n, u in parts) != value:
        raise ConfigError(f"invalid timeout: {value!r}", details="use a duration like 10s or 1m")
    return sum(float(n) * _DURATION_UNITS[u] for n, u in parts)


def parse_bool(value: str, default: bool) -> bool:
    """Parse a kubeconfig boolean string.

    Raises:
        ConfigError: If the value is not a boolean
    """
    value = value.strip().lower()
    if not value:
        return default
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    raise ConfigError(f"invalid boolean: {value!r}")
