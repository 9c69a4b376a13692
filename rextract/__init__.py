"""rextract: extract values from other requests' responses in templates.

A template directive resolves a dependency request, resends it when its
trigger policy asks for it, and applies a regular expression to the
response body. Render state is passed explicitly through RenderContext;
the render chain bounds recursive resends.
"""

from rextract.bootstrap import configure
from rextract.directive import DirectiveArgument, ResponseRegexDirective
from rextract.environment import InMemoryRequestEnvironment, RequestEnvironment
from rextract.errors import (
    DependencyFailedError,
    DirectiveError,
    ErrorCode,
    InvalidFilterError,
    MissingFilterError,
    NoMatchError,
    NoResponseError,
    NoSuccessfulResponseError,
    RequestNotFoundError,
    StageResult,
    TooManyMatchesError,
    UnsupportedAttributeError,
)
from rextract.extraction import extract
from rextract.models import (
    RenderChain,
    RenderContext,
    RenderPurpose,
    Request,
    Response,
    TriggerPolicy,
)
from rextract.resend import decide_and_fetch, should_resend

__all__ = [
    "configure",
    # Directive
    "DirectiveArgument",
    "ResponseRegexDirective",
    # Stages
    "decide_and_fetch",
    "extract",
    "should_resend",
    # Environment
    "InMemoryRequestEnvironment",
    "RequestEnvironment",
    # Models
    "RenderChain",
    "RenderContext",
    "RenderPurpose",
    "Request",
    "Response",
    "TriggerPolicy",
    # Errors
    "DependencyFailedError",
    "DirectiveError",
    "ErrorCode",
    "InvalidFilterError",
    "MissingFilterError",
    "NoMatchError",
    "NoResponseError",
    "NoSuccessfulResponseError",
    "RequestNotFoundError",
    "StageResult",
    "TooManyMatchesError",
    "UnsupportedAttributeError",
]
