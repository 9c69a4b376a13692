"""Tests for InMemoryRequestEnvironment."""

from datetime import datetime

import pytest

from rextract.environment import InMemoryRequestEnvironment
from rextract.models import RenderChain, Request, Response
from tests.factories import RequestFactory, ResponseFactory


class TestInMemoryRequestEnvironment:
    """Tests for InMemoryRequestEnvironment."""

    @pytest.fixture
    def store(self) -> InMemoryRequestEnvironment:
        """Create an environment with one request."""
        environment = InMemoryRequestEnvironment()
        environment.add_request(RequestFactory.create(id="req_a"))
        return environment

    @pytest.mark.asyncio
    async def test_resolve_request(self, store: InMemoryRequestEnvironment) -> None:
        request = await store.resolve_request("req_a")
        assert request is not None
        assert request.id == "req_a"

    @pytest.mark.asyncio
    async def test_resolve_missing_request(self, store: InMemoryRequestEnvironment) -> None:
        assert await store.resolve_request("req_missing") is None

    @pytest.mark.asyncio
    async def test_latest_response_by_created_at(
        self, store: InMemoryRequestEnvironment, now: datetime
    ) -> None:
        newer = store.add_response(ResponseFactory.create(request_id="req_a", now=now))
        store.add_response(ResponseFactory.create(request_id="req_a", age_seconds=30, now=now))

        latest = await store.get_latest_response("req_a", "env_dev")

        assert latest == newer

    @pytest.mark.asyncio
    async def test_latest_response_scoped_to_environment(
        self, store: InMemoryRequestEnvironment
    ) -> None:
        store.add_response(ResponseFactory.create(request_id="req_a", environment_id="env_prod"))

        assert await store.get_latest_response("req_a", "env_dev") is None
        assert await store.get_latest_response("req_a", "env_prod") is not None

    @pytest.mark.asyncio
    async def test_execute_without_sender_records_error(
        self, store: InMemoryRequestEnvironment
    ) -> None:
        request = await store.resolve_request("req_a")
        assert request is not None

        response = await store.execute_request(request, render_chain=("req_a",), environment_id="env_dev")

        assert response.error
        assert await store.get_latest_response("req_a", "env_dev") == response

    @pytest.mark.asyncio
    async def test_execute_records_chain_and_environment(
        self, store: InMemoryRequestEnvironment
    ) -> None:
        seen: list[RenderChain] = []

        async def _send(request: Request, render_chain: RenderChain) -> Response:
            seen.append(render_chain)
            return Response(request_id=request.id, status_code=201, body=b"ok")

        store.set_sender(_send)
        request = await store.resolve_request("req_a")
        assert request is not None

        response = await store.execute_request(
            request, render_chain=("req_x", "req_a"), environment_id="env_dev"
        )

        assert seen == [("req_x", "req_a")]
        assert response.environment_id == "env_dev"
        assert store.executions[0].render_chain == ("req_x", "req_a")

    @pytest.mark.asyncio
    async def test_get_response_body(self, store: InMemoryRequestEnvironment) -> None:
        response = ResponseFactory.create(body=b"\x00\x01raw")
        assert await store.get_response_body(response, "") == b"\x00\x01raw"
