"""Unit tests for Results API endpoint discovery."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from tkn_results.core.errors import ConfigError
from tkn_results.infra.k8s import discovery, run_sync
from tkn_results.infra.k8s.discovery import Endpoint, discover_endpoints, route_host


def _service(name="tekton-results-api-service", namespace="tekton-pipelines"):
    return SimpleNamespace(
        name=name,
        namespace=namespace,
        spec={"ports": [{"name": "server", "port": 8080}, {"name": "prometheus", "port": 9090}]},
    )


def _route(host, target_port, to="tekton-results-api-service", tls=True):
    spec = {"host": host, "to": {"kind": "Service", "name": to}, "port": {"targetPort": target_port}}
    if tls:
        spec["tls"] = {"termination": "reencrypt"}
    return SimpleNamespace(spec=spec)


def _lister(items):
    async def list_(**kwargs):
        for item in items:
            yield item

    return list_


@pytest.fixture
def cluster():
    """Patch kr8s so listings return the objects placed in the returned dict."""
    objects = {"services": [], "routes": []}
    seen = {}

    def services(**kwargs):
        seen["services"] = kwargs
        return _lister(objects["services"])()

    def routes(**kwargs):
        seen.setdefault("routes", []).append(kwargs)
        return _lister(objects["routes"])()

    with (
        patch("kr8s.asyncio.api", new=AsyncMock(return_value="api")),
        patch.object(discovery.Service, "list", side_effect=services),
        patch.object(discovery.Route, "list", side_effect=routes),
    ):
        objects["seen"] = seen
        yield objects


class TestDiscoverEndpoints:
    @pytest.mark.asyncio
    async def test_routes_targeting_the_service(self, cluster):
        cluster["services"] = [_service()]
        cluster["routes"] = [
            _route("results.apps.example.com", "server"),
            _route("metrics.apps.example.com", "prometheus"),
            _route("other.apps.example.com", 8080, to="something-else"),
            _route("plain.apps.example.com", 8080, tls=False),
        ]

        endpoints = await discover_endpoints()

        assert endpoints == [
            Endpoint("https://results.apps.example.com", "tekton-pipelines"),
            Endpoint("https://metrics.apps.example.com", "tekton-pipelines"),
            Endpoint("http://plain.apps.example.com", "tekton-pipelines"),
        ]
        assert cluster["seen"]["services"]["label_selector"] == discovery.SERVICE_LABEL
        assert cluster["seen"]["routes"][0]["namespace"] == "tekton-pipelines"

    @pytest.mark.asyncio
    async def test_no_services(self, cluster):
        with pytest.raises(ConfigError, match="services for tekton results not found"):
            await discover_endpoints()

    @pytest.mark.asyncio
    async def test_no_routes(self, cluster):
        cluster["services"] = [_service()]

        with pytest.raises(ConfigError, match="routes for tekton results not found"):
            await discover_endpoints()

    @pytest.mark.asyncio
    async def test_unreachable_cluster(self, cluster):
        with patch("kr8s.asyncio.api", new=AsyncMock(side_effect=httpx.ConnectError("refused"))):
            with pytest.raises(ConfigError, match="could not query the cluster"):
                await discover_endpoints()


def test_route_host_scheme_follows_tls():
    assert route_host(_route("a.example.com", 1)) == "https://a.example.com"
    assert route_host(_route("a.example.com", 1, tls=False)) == "http://a.example.com"


class TestRunSync:
    def test_outside_a_loop(self):
        async def answer():
            return 42

        assert run_sync(answer()) == 42

    @pytest.mark.asyncio
    async def test_inside_a_running_loop(self):
        async def answer():
            await asyncio.sleep(0)
            return "ok"

        assert run_sync(answer()) == "ok"


def test_sync_lookup_is_cached(cluster):
    cluster["services"] = [_service()]
    cluster["routes"] = [_route("results.apps.example.com", "server")]
    discovery.discover_endpoints_sync.cache_clear()

    try:
        first = discovery.discover_endpoints_sync()
        second = discovery.discover_endpoints_sync()
    finally:
        discovery.discover_endpoints_sync.cache_clear()

    assert first == second == [Endpoint("https://results.apps.example.com", "tekton-pipelines")]
    assert len(cluster["seen"]["routes"]) == 1
