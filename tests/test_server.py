"""Tests for the HTTP query surface."""

import httpx
import pytest

from docnav import __version__
from docnav.server import create_app
from docnav.services.version_registry import VersionRegistry


@pytest.fixture
def api(registry: VersionRegistry) -> httpx.AsyncClient:
    app = create_app(registry)
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://docnav")


class TestHealth:
    """Tests for health and readiness."""

    @pytest.mark.asyncio
    async def test_health(self, api: httpx.AsyncClient) -> None:
        response = await api.get("/health")
        assert response.status_code == 200
        assert response.json()["version"] == __version__

    @pytest.mark.asyncio
    async def test_ready_reports_not_ready(self, api: httpx.AsyncClient) -> None:
        response = await api.get("/ready")
        assert response.status_code == 503
        assert response.json()["ready"] is False

    @pytest.mark.asyncio
    async def test_ready_after_refresh(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/ready")
        assert response.status_code == 200
        assert response.json()["latest"] == "v1.0.0"


class TestVersions:
    """Tests for catalog endpoints."""

    @pytest.mark.asyncio
    async def test_not_ready_is_503(self, api: httpx.AsyncClient) -> None:
        response = await api.get("/versions")
        assert response.status_code == 503
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_list_versions(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/versions")
        assert response.json() == {"releases": ["v1.0.0"], "branches": ["master"], "latest": "v1.0.0"}

    @pytest.mark.asyncio
    async def test_search_versions(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/versions/search", params={"q": "mas"})
        assert response.json()["tags"] == ["master"]

    @pytest.mark.asyncio
    async def test_refresh_endpoint(self, api: httpx.AsyncClient) -> None:
        response = await api.post("/versions/refresh")
        assert response.status_code == 200
        assert response.json()["ready"] is True

    @pytest.mark.asyncio
    async def test_refresh_failure_is_502(self, api: httpx.AsyncClient, fake_github) -> None:
        fake_github.tree_status = 500
        response = await api.post("/versions/refresh")
        assert response.status_code == 502


class TestDocs:
    """Tests for per-version query endpoints."""

    @pytest.mark.asyncio
    async def test_resolve_method_first(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/versions/v1.0.0/resolve", params={"class_name": "Foo", "member": "bar"})
        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "method"
        assert body["descriptor"]["description"] == "the method"

    @pytest.mark.asyncio
    async def test_resolve_class_uses_manifest_field_names(
        self, api: httpx.AsyncClient, registry: VersionRegistry
    ) -> None:
        await registry.refresh()
        response = await api.get("/versions/v1.0.0/resolve", params={"class_name": "SlashCreator"})
        body = response.json()
        assert body["kind"] == "class"
        assert body["descriptor"]["construct"]["params"][0]["name"] == "opts"

    @pytest.mark.asyncio
    async def test_resolve_miss_is_404(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/versions/v1.0.0/resolve", params={"class_name": "Nope"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_tag_is_404(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/versions/v0.0.1/search", params={"q": "foo"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_document_fetch_failure_is_502(
        self, api: httpx.AsyncClient, registry: VersionRegistry, fake_github
    ) -> None:
        await registry.refresh()
        fake_github.document_status = 500
        response = await api.get("/versions/master/search", params={"q": "foo"})
        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_search(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/versions/v1.0.0/search", params={"q": "foo", "kind": "prop"})
        body = response.json()
        assert body["scope"] == "prop"
        assert body["results"] == [
            {"key": "Foo~bar", "kind": "prop"},
            {"key": "Foo~baz", "kind": "prop"},
        ]

    @pytest.mark.asyncio
    async def test_search_empty_result_is_200(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/versions/v1.0.0/search", params={"q": "zzzz"})
        assert response.status_code == 200
        assert response.json()["results"] == []

    @pytest.mark.asyncio
    async def test_search_limit(self, api: httpx.AsyncClient, registry: VersionRegistry) -> None:
        await registry.refresh()
        response = await api.get("/versions/v1.0.0/search", params={"q": "", "limit": 2})
        assert len(response.json()["results"]) == 2

    @pytest.mark.asyncio
    async def test_scoped_search_reports_scope_kind(
        self, api: httpx.AsyncClient, registry: VersionRegistry, fake_github
    ) -> None:
        fake_github.documents["v1.0.0"] = {"classes": [{"name": "Shared"}], "typedefs": [{"name": "Shared"}]}
        await registry.refresh()

        scoped = await api.get("/versions/v1.0.0/search", params={"q": "shared", "kind": "class"})
        assert scoped.json()["results"] == [{"key": "Shared", "kind": "class"}]

        unscoped = await api.get("/versions/v1.0.0/search", params={"q": "shared"})
        assert unscoped.json()["results"] == [{"key": "Shared", "kind": "typedef"}]
