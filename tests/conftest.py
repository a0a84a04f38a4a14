import json
import os
import tempfile

# Keep config and log files out of the real user directories
os.environ.setdefault("MCDEVKIT_HOME", tempfile.mkdtemp(prefix="mcdevkit-test-home"))

import httpx
import pytest

from mcdevkit.config.settings import config


@pytest.fixture
def temp_root(tmp_path):
    previous = config.get("workspace.temp_root")
    config.set("workspace.temp_root", str(tmp_path))
    yield tmp_path
    config.set("workspace.temp_root", previous)


class RecordingTransport(httpx.MockTransport):
    """MockTransport serving canned responses by URL and recording requests."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []
        super().__init__(self._handle)

    def _handle(self, request):
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        if callable(route):
            return route(request)
        status, body = route
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, content=json.dumps(body).encode())


@pytest.fixture
def make_transport():
    return RecordingTransport
