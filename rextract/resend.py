"""Resend decision engine.

Decides whether a dependency request must be (re-)sent before its
response can be read, sends it when allowed, and validates the
resulting response.

Recursion is bounded by the render chain: a request already present in
the chain is never sent again in the same render, whatever the policy.
"""

import time
from datetime import datetime

from rextract.environment.host import RequestEnvironment
from rextract.errors import (
    DependencyFailedError,
    NoResponseError,
    NoSuccessfulResponseError,
    RequestNotFoundError,
    StageResult,
)
from rextract.models import RenderContext, Response, TriggerPolicy, utc_now
from rextract.observability.logging import get_logger
from rextract.observability.metrics import DEPENDENCY_SEND_LATENCY, RESEND_DECISIONS

logger = get_logger(__name__)


def should_resend(
    policy: TriggerPolicy,
    cached: Response | None,
    max_age_seconds: float,
    now: datetime | None = None,
) -> bool:
    """Apply the trigger policy to the cached response.

    ``max_age_seconds`` is honored literally; a response exactly
    ``max_age_seconds`` old is still fresh.
    """
    if policy == TriggerPolicy.ALWAYS:
        return True
    if policy == TriggerPolicy.NO_HISTORY:
        return cached is None
    if policy == TriggerPolicy.WHEN_EXPIRED:
        if cached is None:
            return True
        return cached.age_seconds(now) > max_age_seconds
    return False


def validate_response(response: Response | None) -> StageResult[Response]:
    """Check that a working response is present and successful."""
    if response is None:
        logger.info("no_response_found")
        return StageResult.failure(NoResponseError())

    if response.error:
        logger.info("dependency_response_error", request_id=response.request_id, error=response.error)
        return StageResult.failure(DependencyFailedError(response.error))

    if not response.is_valid:
        logger.info(
            "invalid_status_code",
            request_id=response.request_id,
            status_code=response.status_code,
        )
        return StageResult.failure(NoSuccessfulResponseError())

    return StageResult.success(response)


async def decide_and_fetch(
    env: RequestEnvironment,
    request_id: str | None,
    policy: TriggerPolicy | str | None,
    max_age_seconds: float,
    context: RenderContext,
    now: datetime | None = None,
) -> StageResult[Response]:
    """Resolve a dependency request and return a usable response.

    Args:
        env: Host environment owning requests and responses
        request_id: Reference to the dependency request
        policy: Trigger policy (parsed case-insensitively, default never)
        max_age_seconds: Freshness limit for the when-expired policy
        context: Current render context; never mutated
        now: Clock override for age computation

    Returns:
        StageResult with the working response or the first failure
    """
    if not request_id:
        return StageResult.failure(RequestNotFoundError(request_id))

    request = await env.resolve_request(request_id)
    if request is None:
        return StageResult.failure(RequestNotFoundError(request_id))

    trigger = TriggerPolicy.parse(policy)
    response = await env.get_latest_response(request.id, context.environment_id)
    resend = should_resend(trigger, response, max_age_seconds, now or utc_now())

    outcome = "skipped"
    if context.has_visited(request.id):
        if resend:
            logger.info(
                "recursive_render_prevented",
                request_id=request.id,
                render_chain=list(context.render_chain),
            )
            outcome = "cycle_prevented"
        resend = False
    elif resend and not context.is_send:
        outcome = "preview_suppressed"
        resend = False

    if resend:
        nested = context.with_request(request.id)
        logger.info(
            "resending_dependency",
            request_id=request.id,
            policy=trigger.value,
            render_chain=list(nested.render_chain),
        )
        started = time.perf_counter()
        response = await env.execute_request(
            request,
            render_chain=nested.render_chain,
            environment_id=context.environment_id,
        )
        DEPENDENCY_SEND_LATENCY.labels(policy=trigger.value).observe(
            time.perf_counter() - started
        )
        outcome = "sent"

    RESEND_DECISIONS.labels(policy=trigger.value, outcome=outcome).inc()
    return validate_response(response)
