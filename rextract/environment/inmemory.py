"""In-memory implementation of RequestEnvironment."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from rextract.environment.host import RequestEnvironment
from rextract.models import RenderChain, Request, Response

Sender = Callable[[Request, RenderChain], Awaitable[Response]]


@dataclass(frozen=True)
class Execution:
    """A recorded send: which request, under which render chain."""

    request_id: str
    render_chain: RenderChain


class InMemoryRequestEnvironment(RequestEnvironment):
    """In-memory implementation of RequestEnvironment for testing and development.

    Sending is delegated to ``sender``; without one, every send yields a
    response with an error, mirroring a host without network access.
    """

    def __init__(self, sender: Sender | None = None) -> None:
        """Initialize empty storage."""
        self._requests: dict[str, Request] = {}
        self._responses: dict[tuple[str, str | None], list[Response]] = {}
        self._sender = sender
        self.executions: list[Execution] = []

    def add_request(self, request: Request) -> Request:
        self._requests[request.id] = request
        return request

    def add_response(self, response: Response) -> Response:
        """Record a response as the newest for its request and environment."""
        key = (response.request_id, response.environment_id)
        self._responses.setdefault(key, []).append(response)
        return response

    def set_sender(self, sender: Sender | None) -> None:
        self._sender = sender

    async def resolve_request(self, request_id: str) -> Request | None:
        """Get a request by ID."""
        return self._requests.get(request_id)

    async def get_latest_response(
        self, request_id: str, environment_id: str | None
    ) -> Response | None:
        """Get the most recently created response for a request."""
        responses = self._responses.get((request_id, environment_id))
        if not responses:
            return None
        return max(responses, key=lambda r: r.created_at)

    async def execute_request(
        self,
        request: Request,
        *,
        render_chain: RenderChain,
        environment_id: str | None = None,
    ) -> Response:
        """Send a request through the configured sender and record the result."""
        self.executions.append(Execution(request_id=request.id, render_chain=render_chain))

        if self._sender is None:
            response = Response(
                request_id=request.id,
                environment_id=environment_id,
                error="No sender configured",
            )
        else:
            response = await self._sender(request, render_chain)
            if response.environment_id != environment_id:
                response = response.model_copy(update={"environment_id": environment_id})

        return self.add_response(response)

    async def get_response_body(self, response: Response, encoding_hint: str = "") -> bytes:  # noqa: ARG002
        """Get the raw body stored on the response."""
        return response.body
