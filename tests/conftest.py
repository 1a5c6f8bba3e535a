"""Shared fixtures: a sample manifest and a fake GitHub served over httpx.MockTransport."""

import copy
import json
from collections.abc import Callable

import httpx
import pytest

from docnav.config import Settings
from docnav.engine.navigator import TypeNavigator
from docnav.services.docs_source import DocsSourceClient
from docnav.services.version_registry import VersionRegistry

SAMPLE_MANIFEST = {
    "meta": {"generator": "0.0.0-dev", "format": 20, "date": 1700000000000},
    "custom": {},
    "classes": [
        {
            "name": "SlashCreator",
            "description": "The main class for using commands and interactions.",
            "extends": [[[["EventEmitter"]]]],
            "construct": {"name": "SlashCreator", "params": [{"name": "opts", "type": [[["SlashCreatorOptions"]]]}]},
            "meta": {"line": 10, "file": "creator.ts", "path": "src"},
            "events": [
                {"name": "commandRun", "meta": {"line": 40, "file": "creator.ts", "path": "src"}},
                {"name": "ready"},
            ],
            "methods": [
                {
                    "name": "registerCommand",
                    "description": "Registers a single command.",
                    "params": [{"name": "command", "type": [[["SlashCommand"]]]}],
                    "meta": {"line": 120, "file": "creator.ts", "path": "src"},
                },
                {"name": "_handleCommand", "meta": {"line": 3, "file": "internal.ts", "path": "src"}},
                {"name": "syncCommands", "deprecated": True},
                {"name": "[Symbol.iterator]", "meta": {"line": 7, "file": "iter.ts", "path": "src"}},
            ],
            "props": [
                {"name": "commands", "type": [[["Collection"]]], "readonly": True},
                {"name": "options"},
                {"name": "_state", "meta": {"line": 9, "file": "creator.ts", "path": "src"}},
            ],
        },
        {
            "name": "Foo",
            "meta": {"line": 5, "file": "foo.ts#L5", "path": "src/structures"},
            "methods": [{"name": "bar", "description": "the method"}],
            "props": [{"name": "bar", "description": "the prop"}, {"name": "baz"}],
            "events": [{"name": "baz"}, {"name": "qux"}],
        },
        {
            "name": "External",
            "meta": {"line": 1, "file": "index.d.ts", "path": "node_modules/external"},
        },
    ],
    "typedefs": [
        {
            "name": "CommandOptions",
            "type": [[["Object"]]],
            "props": [{"name": "name", "type": [[["string"]]]}],
            "meta": {"line": 2, "file": "constants.ts", "path": "src"},
        },
        {"name": "CommandCallback", "params": [{"name": "ctx"}], "returns": [[["void"]]]},
    ],
}


def sample_manifest() -> dict:
    return copy.deepcopy(SAMPLE_MANIFEST)


def tree_node(path: str, node_type: str = "blob") -> dict:
    return {"path": path, "mode": "100644", "type": node_type, "sha": "0" * 40, "size": 10, "url": "x"}


class FakeGitHub:
    """Serves a tree listing and per-tag manifests; records requests."""

    def __init__(self, paths: list[str] | None = None):
        self.paths = paths if paths is not None else ["v1.0.0.json", "master.json"]
        self.documents: dict[str, dict] = {}
        self.tree_status = 200
        self.document_status = 200
        self.requests: list[httpx.Request] = []

    def document_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "raw.githubusercontent.com"]

    def tree_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "api.github.com"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "api.github.com":
            if self.tree_status != 200:
                return httpx.Response(self.tree_status, text="upstream trouble")
            tree = [tree_node(p) for p in self.paths]
            return httpx.Response(200, json={"sha": "abc", "url": str(request.url), "tree": tree, "truncated": False})

        if self.document_status != 200:
            return httpx.Response(self.document_status, text="nope")
        name = request.url.path.rsplit("/", 1)[-1]
        tag = name.removesuffix(".json")
        document = self.documents.get(tag, sample_manifest())
        return httpx.Response(200, content=json.dumps(document).encode())


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        fetch_max_retries=2,
        fetch_retry_delay_seconds=0,
        fetch_timeout_seconds=5,
    )


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def make_source(settings: Settings) -> Callable[..., DocsSourceClient]:
    def factory(github: FakeGitHub, source_settings: Settings | None = None) -> DocsSourceClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(github.handler))
        return DocsSourceClient(source_settings or settings, client=client)

    return factory


@pytest.fixture
def registry(settings: Settings, fake_github: FakeGitHub, make_source) -> VersionRegistry:
    return VersionRegistry(settings, source=make_source(fake_github))


@pytest.fixture
def navigator() -> TypeNavigator:
    return TypeNavigator("v1.0.0", sample_manifest())


@pytest.fixture
def manifest() -> dict:
    return sample_manifest()
