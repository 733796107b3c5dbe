"""Pytest configuration and fixtures."""

from typing import Callable

import httpx
import pytest

from memegen_mcp.config import Settings
from memegen_mcp.services.memegen import MemegenService
from memegen_mcp.services.tools import ToolDispatcher

API_BASE = "https://api.memegen.link"

SAMPLE_TEMPLATES = [
    {
        "id": "drake",
        "name": "Drakeposting",
        "lines": 2,
        "overlays": 0,
        "styles": [],
        "blank": "https://api.memegen.link/images/drake.png",
        "example": {
            "text": ["left on read", "read receipts off"],
            "url": "https://api.memegen.link/images/drake/left_on_read/read_receipts_off.png",
        },
        "source": "http://knowyourmeme.com/memes/drakeposting",
        "keywords": ["hotline bling"],
        "_self": "https://api.memegen.link/templates/drake",
    },
    {
        "id": "buzz",
        "name": "X, X Everywhere",
        "lines": 2,
        "blank": "https://api.memegen.link/images/buzz.png",
        "example": {
            "text": ["memes", "memes everywhere"],
            "url": "https://api.memegen.link/images/buzz/memes/memes_everywhere.png",
        },
        "keywords": [],
    },
    {
        # Sparse entry: no lines, example or keywords
        "id": "ds",
        "name": "Daily Struggle",
        "blank": "https://api.memegen.link/images/ds.png",
    },
    {
        "id": "gb",
        "name": "Galaxy Brain",
        "lines": 0,
        "blank": "https://api.memegen.link/images/gb.png",
        "example": {"text": [], "url": ""},
        "keywords": ["expanding brain", "drake alternative"],
    },
]


class UpstreamRecorder:
    """Fake memegen.link: records requests and answers from a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


def default_upstream(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/templates":
        return httpx.Response(200, json=SAMPLE_TEMPLATES)
    if request.url.path.startswith("/templates/"):
        template_id = request.url.path.rsplit("/", 1)[-1]
        for template in SAMPLE_TEMPLATES:
            if template["id"] == template_id:
                return httpx.Response(200, json=template)
        return httpx.Response(404, json={"error": "Template not found"})
    return httpx.Response(500, text="unexpected path")


@pytest.fixture
def settings() -> Settings:
    return Settings(MEMEGEN_API_BASE=API_BASE)


@pytest.fixture
def upstream() -> UpstreamRecorder:
    return UpstreamRecorder(default_upstream)


@pytest.fixture
def make_service(settings):
    """Build a MemegenService backed by a fake upstream handler."""

    def _make(recorder: UpstreamRecorder) -> MemegenService:
        return MemegenService(settings, transport=httpx.MockTransport(recorder))

    return _make


@pytest.fixture
def dispatcher(settings, make_service, upstream) -> ToolDispatcher:
    return ToolDispatcher(make_service(upstream), settings)
