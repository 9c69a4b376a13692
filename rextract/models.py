"""Domain models for response extraction.

Requests and responses are owned by the host environment; this module
only describes the attributes the directive consumes. The render context
carries what the host used to keep in ambient state (purpose, active
environment, visited requests) so it can be passed explicitly.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rextract.observability.logging import get_logger

logger = get_logger(__name__)

RenderChain = tuple[str, ...]


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class TriggerPolicy(str, Enum):
    """When a dependent request is re-executed before reading its response."""

    NEVER = "never"
    NO_HISTORY = "no-history"
    WHEN_EXPIRED = "when-expired"
    ALWAYS = "always"

    @classmethod
    def parse(cls, value: "str | TriggerPolicy | object | None") -> "TriggerPolicy":
        """Parse a policy value case-insensitively.

        Missing values resolve to NEVER. Unknown values, including
        non-string ones from host forms, also resolve to NEVER so a stale
        template never triggers a send.
        """
        if isinstance(value, TriggerPolicy):
            return value
        if not value:
            return cls.NEVER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("unknown_trigger_policy", policy=value)
            return cls.NEVER


class RenderPurpose(str, Enum):
    """Why a render pass is happening."""

    SEND = "send"
    PREVIEW = "preview"
    GENERAL = "general"


class Request(BaseModel):
    """A request definition resolved from the host."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Host request identifier")
    name: str = ""
    method: str = "GET"
    url: str = ""


class Response(BaseModel):
    """A recorded result of executing a request."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    request_id: str
    environment_id: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    status_code: int | None = None
    content_type: str | None = None
    error: str | None = None
    body: bytes = b""

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Treat naive timestamps from the host as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def is_valid(self) -> bool:
        """A response is usable when it has no error and a status code."""
        return not self.error and bool(self.status_code)

    def age_seconds(self, now: datetime | None = None) -> float:
        """Seconds elapsed since the response was recorded."""
        return ((now or utc_now()) - self.created_at).total_seconds()


class RenderContext(BaseModel):
    """Per-render state threaded through every stage.

    The chain is a tuple; extending it returns a new context so sibling
    evaluations in the same render never observe each other's sends.
    """

    model_config = ConfigDict(frozen=True)

    environment_id: str | None = None
    purpose: RenderPurpose = RenderPurpose.GENERAL
    render_chain: RenderChain = ()

    @property
    def is_send(self) -> bool:
        return self.purpose == RenderPurpose.SEND

    def has_visited(self, request_id: str) -> bool:
        """Check whether the request was already sent in this render."""
        return request_id in self.render_chain

    def with_request(self, request_id: str) -> "RenderContext":
        """Return a copy whose chain has the request appended."""
        return self.model_copy(
            update={"render_chain": (*self.render_chain, request_id)}
        )
