"""Locate the Results API endpoint from the current cluster.

The API service carries the ``app.kubernetes.io/name=tekton-results-api``
label; on OpenShift it is exposed through a Route that targets one of the
service's ports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import kr8s
from cachetools.func import ttl_cache
from kr8s.asyncio.objects import Service, new_class
from loguru import logger

from tkn_results.core.errors import ConfigError

from .utils import run_sync

SERVICE_LABEL = "app.kubernetes.io/name=tekton-results-api"
DISCOVERY_TTL = 60

Route = new_class(kind="Route", version="route.openshift.io/v1", namespaced=True)


@dataclass
class Endpoint:
    """An exposed Results API address."""

    host: str
    namespace: str


def _targets_service(route: Any, service: Any) -> bool:
    spec = route.spec
    if spec.get("to", {}).get("name") != service.name:
        return False
    target = spec.get("port", {}).get("targetPort")
    for port in service.spec.get("ports", []):
        if target in (port.get("port"), port.get("name")):
            return True
    return False


def route_host(route: Any) -> str:
    """URL of a route: https when it terminates TLS, http otherwise."""
    scheme = "https" if route.spec.get("tls") else "http"
    return f"{scheme}://{route.spec.get('host', '')}"


async def discover_endpoints() -> list[Endpoint]:
    """Find every route exposing a Results API service.

    Returns:
        Endpoints in discovery order

    Raises:
        ConfigError: If no service or route is found, or the cluster is unreachable
    """
    try:
        api = await kr8s.asyncio.api()
        services = [
            s async for s in Service.list(namespace=kr8s.ALL, label_selector=SERVICE_LABEL, api=api)
        ]
        if not services:
            raise ConfigError("services for tekton results not found, try manual configuration")

        endpoints: list[Endpoint] = []
        for service in services:
            routes = [r async for r in Route.list(namespace=service.namespace, api=api)]
            if not routes:
                raise ConfigError("routes for tekton results not found, try manual configuration")
            for route in routes:
                if _targets_service(route, service):
                    endpoints.append(Endpoint(host=route_host(route), namespace=service.namespace))
    except (kr8s.ServerError, kr8s.APITimeoutError, httpx.HTTPError) as e:
        raise ConfigError("could not query the cluster for tekton results", details=str(e)) from e

    logger.debug(f"Discovered {len(endpoints)} tekton results endpoint(s)")
    return endpoints


@ttl_cache(maxsize=1, ttl=DISCOVERY_TTL)
def discover_endpoints_sync() -> list[Endpoint]:
    """Blocking :func:`discover_endpoints`; a successful lookup is reused for a minute."""
    return run_sync(discover_endpoints())
