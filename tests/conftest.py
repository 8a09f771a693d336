import json
import sys
from pathlib import Path
from typing import Callable, Dict, List, Union

import httpx
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

Behavior = Union[httpx.Response, Callable[[httpx.Request], httpx.Response], type]


class FakeNetwork:
    """Routes requests by ``host:port`` to canned responses or transport errors.

    A behavior is either an ``httpx.Response``, a callable taking the request,
    or an httpx exception class to raise. Unknown hosts are refused.
    """

    def __init__(self):
        self.routes: Dict[str, Behavior] = {}
        self.requests: List[httpx.Request] = []

    def route(self, authority: str, behavior: Behavior) -> None:
        self.routes[authority] = behavior

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        authority = f"{request.url.host}:{request.url.port}"
        behavior = self.routes.get(authority, httpx.ConnectError)

        if isinstance(behavior, type) and issubclass(behavior, Exception):
            raise behavior(f"{behavior.__name__} for {authority}", request=request)
        if callable(behavior):
            return behavior(request)
        return behavior

    @property
    def contacted(self) -> List[str]:
        return [f"{r.url.host}:{r.url.port}" for r in self.requests]

    def json_bodies(self) -> List[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def network():
    return FakeNetwork()


@pytest.fixture
def http_client(network):
    client = httpx.Client(transport=httpx.MockTransport(network.handler))
    yield client
    client.close()
