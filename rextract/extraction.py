"""Extract a value from a response body with a regular expression."""

import re

from rextract.environment.host import RequestEnvironment
from rextract.errors import (
    InvalidFilterError,
    MissingFilterError,
    NoMatchError,
    StageResult,
    TooManyMatchesError,
    UnsupportedAttributeError,
)
from rextract.models import Response
from rextract.observability.logging import get_logger
from rextract.observability.metrics import DECODE_FALLBACKS

logger = get_logger(__name__)

BODY_ATTRIBUTE = "body"
DEFAULT_CHARSET = "utf-8"
CHARSET_PATTERN = re.compile(r"charset=([\w-]+)", re.IGNORECASE)


def resolve_charset(content_type: str | None, default: str = DEFAULT_CHARSET) -> str:
    """Read the charset parameter from a content type, else the default."""
    if content_type:
        match = CHARSET_PATTERN.search(content_type)
        if match:
            return match.group(1)
    return default


def decode_body(body: bytes, charset: str) -> str:
    """Decode body bytes, degrading to lossy UTF-8 on failure.

    Unknown charsets and invalid byte sequences are logged, never raised.
    """
    try:
        return body.decode(charset)
    except (LookupError, UnicodeDecodeError) as exc:
        logger.warning("body_decode_failed", charset=charset, error=str(exc))
        DECODE_FALLBACKS.labels(charset=charset.lower()).inc()
        return body.decode(DEFAULT_CHARSET, errors="replace")


def apply_filter(text: str, pattern: str) -> StageResult[str]:
    """Run the pattern once against the text.

    Zero capture groups return the whole match, exactly one returns the
    group, more than one is ambiguous and fails.
    """
    try:
        compiled = re.compile(pattern)
        match = compiled.search(text)
    except (re.error, RecursionError, OverflowError) as exc:
        return StageResult.failure(InvalidFilterError(pattern, str(exc)))

    if match is None:
        return StageResult.failure(NoMatchError(pattern))

    if compiled.groups > 1:
        return StageResult.failure(TooManyMatchesError(pattern, compiled.groups))

    if compiled.groups == 1:
        # An optional group that did not participate
        return StageResult.success(match.group(1) or "")

    return StageResult.success(match.group(0))


async def extract(
    env: RequestEnvironment,
    response: Response,
    attribute: str | None,
    filter: str | None,
    fallback_charset: str = DEFAULT_CHARSET,
) -> StageResult[str]:
    """Extract a single value from a response.

    Args:
        env: Host environment used to read the body
        response: A validated response
        attribute: Response attribute selector; only "body" is supported
        filter: Regular expression to apply
        fallback_charset: Charset used when the content type declares none

    Returns:
        StageResult with the extracted string or the failure
    """
    if not filter:
        return StageResult.failure(MissingFilterError())

    if attribute != BODY_ATTRIBUTE:
        return StageResult.failure(UnsupportedAttributeError(attribute))

    body = await env.get_response_body(response, "")
    charset = resolve_charset(response.content_type, fallback_charset)
    text = decode_body(body, charset)

    result = apply_filter(text, filter)
    logger.debug(
        "filter_applied",
        request_id=response.request_id,
        charset=charset,
        matched=result.ok,
    )
    return result
