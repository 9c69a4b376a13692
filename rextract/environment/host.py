"""RequestEnvironment abstract interface."""

from abc import ABC, abstractmethod

from rextract.models import RenderChain, Request, Response


class RequestEnvironment(ABC):
    """Abstract interface to the host that owns requests and responses.

    Transport failures are reported on the returned Response's error
    field, not raised.
    """

    @abstractmethod
    async def resolve_request(self, request_id: str) -> Request | None:
        """Get a request by ID."""
        pass

    @abstractmethod
    async def get_latest_response(
        self, request_id: str, environment_id: str | None
    ) -> Response | None:
        """Get the most recent response for a request in an environment."""
        pass

    @abstractmethod
    async def execute_request(
        self,
        request: Request,
        *,
        render_chain: RenderChain,
        environment_id: str | None = None,
    ) -> Response:
        """Send a request.

        The render chain is handed to any nested directive evaluation
        triggered while rendering this request.
        """
        pass

    @abstractmethod
    async def get_response_body(self, response: Response, encoding_hint: str = "") -> bytes:
        """Get the raw body bytes of a response."""
        pass
