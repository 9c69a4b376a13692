"""Shared test fixtures for the rextract test suite."""

from collections.abc import Awaitable, Callable, Generator
from datetime import UTC, datetime

import pytest

from rextract.config.models.directive import DirectiveConfig
from rextract.environment import InMemoryRequestEnvironment
from rextract.models import RenderChain, RenderContext, RenderPurpose, Request, Response
from tests.factories import RequestFactory, ResponseFactory


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from rextract.config import get_settings
    from rextract.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


@pytest.fixture
def now() -> datetime:
    """A fixed clock for age computations."""
    return datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def request_def() -> Request:
    return RequestFactory.create()


@pytest.fixture
def sent_bodies() -> list[bytes]:
    """Bodies returned by the fake sender, consumed in order."""
    return []


@pytest.fixture
def sender(
    now: datetime, sent_bodies: list[bytes]
) -> Callable[[Request, RenderChain], Awaitable[Response]]:
    """Fake transport returning a fresh 200 response."""

    async def _send(request: Request, render_chain: RenderChain) -> Response:  # noqa: ARG001
        body = sent_bodies.pop(0) if sent_bodies else b"user id=99 fresh"
        return ResponseFactory.create(request_id=request.id, body=body, now=now)

    return _send


@pytest.fixture
def env(
    request_def: Request,
    sender: Callable[[Request, RenderChain], Awaitable[Response]],
) -> InMemoryRequestEnvironment:
    """In-memory environment holding the default request."""
    environment = InMemoryRequestEnvironment(sender=sender)
    environment.add_request(request_def)
    return environment


@pytest.fixture
def send_context() -> RenderContext:
    return RenderContext(environment_id="env_dev", purpose=RenderPurpose.SEND)


@pytest.fixture
def preview_context() -> RenderContext:
    return RenderContext(environment_id="env_dev", purpose=RenderPurpose.PREVIEW)


@pytest.fixture
def directive_config() -> DirectiveConfig:
    return DirectiveConfig()
