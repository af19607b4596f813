"""
CourseDesk - Test Configuration and Fixtures
"""
import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
from faker import Faker

from coursedesk.client import AuthenticatedClient
from coursedesk.config import ClientConfig
from coursedesk.navigation import Navigator
from coursedesk.session import Session, CredentialStore

fake = Faker()

BASE_URL = "http://backend.test/api"

Handler = Callable[[httpx.Request], Any]
Reply = Union[httpx.Response, Handler, Exception]


class FakeBackend:
    """
    Scripted backend behind httpx.MockTransport.

    Replies are queued per (method, path); the last reply sticks. A reply is
    an httpx.Response, an exception to raise, or a (possibly async) callable
    taking the request.
    """

    def __init__(self, prefix: str = "/api"):
        self.prefix = prefix
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}

    def on(self, method: str, path: str, *replies: Reply) -> "FakeBackend":
        self.routes.setdefault((method.upper(), path), []).extend(replies)
        return self

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method.upper() and self._path(r) == path
        ]

    def _path(self, request: httpx.Request) -> str:
        path = request.url.path
        if path.startswith(self.prefix):
            path = path[len(self.prefix):]
        return path

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, self._path(request)))
        if not queue:
            return httpx.Response(404, json={"message": "Route not found"})

        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply

        result = reply(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def json_response(status: int, data: Any = None, **kwargs) -> httpx.Response:
    return httpx.Response(status, json=data if data is not None else {}, **kwargs)


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


def bearer(request: httpx.Request) -> Optional[str]:
    values = request.headers.get_list("authorization")
    return values[0] if values else None


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    return ClientConfig(
        api_base_url=BASE_URL,
        config_dir=str(tmp_path),
        persist_credentials=False
    )


@pytest.fixture
def session(config) -> Session:
    return Session(CredentialStore(), config)


@pytest.fixture
def navigator() -> Navigator:
    return Navigator(current_path="/admin")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_client(config, session, navigator, backend):
    """Factory so tests can attach extra listeners"""
    def _make(**kwargs) -> AuthenticatedClient:
        return AuthenticatedClient(
            kwargs.pop("config", config),
            session=kwargs.pop("session", session),
            navigator=kwargs.pop("navigator", navigator),
            transport=backend.transport,
            **kwargs
        )
    return _make


@pytest.fixture
def test_user() -> Dict[str, Any]:
    return {
        "id": fake.uuid4(),
        "firstName": fake.first_name(),
        "lastName": fake.last_name(),
        "email": fake.email(),
        "role": "teacher",
        "isEmailVerified": True,
    }


@pytest.fixture
def logged_in(session, test_user) -> Session:
    session.set_credentials(test_user, "A1", "R1")
    return session
