from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from question_search.config import Settings
from question_search.index import RetryPolicy, TypesenseClient


BASE_URL = "http://typesense.test:8108"

Reply = Tuple[int, Dict[str, Any]]


class FakeTypesense:
    """Scripted Typesense backend for httpx.MockTransport.

    Each route maps to a list of (status, json) replies served in order; the
    last reply repeats once the list is used up.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, *replies: Reply) -> "FakeTypesense":
        self.routes[(method, path)] = list(replies)
        return self

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        replies = self.routes.get((request.method, request.url.path))
        if not replies:
            return httpx.Response(404, json={"message": "Not Found"})
        served = len(self.calls(request.method, request.url.path))
        status, body = replies[min(served, len(replies)) - 1]
        return httpx.Response(status, json=body)


@pytest.fixture
def backend() -> FakeTypesense:
    return FakeTypesense()


@pytest.fixture
def delays() -> List[float]:
    return []


@pytest.fixture
def make_client(backend: FakeTypesense, delays: List[float]) -> Callable[..., TypesenseClient]:
    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    def _make(policy: Optional[RetryPolicy] = None) -> TypesenseClient:
        return TypesenseClient(
            BASE_URL,
            "test-key",
            policy=policy or RetryPolicy(),
            transport=httpx.MockTransport(backend),
            sleep=fake_sleep,
        )

    return _make


@pytest.fixture
def settings() -> Settings:
    return Settings(typesense_uri="typesense://typesense.test:8108", typesense_api_key="test-key")
