"""Template directive that extracts a value from another request's response.

The directive resolves the referenced request, resends it according to
its trigger policy, and applies a regular expression to the response
body. Argument definitions are declarative so hosts can render their
own forms from them.
"""

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from rextract.config import get_settings
from rextract.config.models.directive import DirectiveConfig
from rextract.environment.host import RequestEnvironment
from rextract.errors import DirectiveError
from rextract.extraction import BODY_ATTRIBUTE, extract
from rextract.models import RenderContext, TriggerPolicy
from rextract.observability.logging import get_logger
from rextract.observability.metrics import EXTRACTIONS
from rextract.resend import decide_and_fetch

logger = get_logger(__name__)

ArgumentKind = Literal["model", "enum", "string", "number"]


class ArgumentOption(BaseModel):
    """One choice of an enum argument."""

    model_config = ConfigDict(frozen=True)

    value: str
    display_name: str
    description: str = ""


class DirectiveArgument(BaseModel):
    """Declarative definition of a directive argument.

    ``visible_when`` receives the current argument values keyed by name
    and decides whether the argument is shown.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    kind: ArgumentKind
    default: Any = None
    help: str = ""
    model: str | None = None
    options: tuple[ArgumentOption, ...] = ()
    visible_when: Callable[[Mapping[str, Any]], bool] | None = Field(default=None, exclude=True)

    def is_visible(self, values: Mapping[str, Any]) -> bool:
        return self.visible_when is None or self.visible_when(values)


def _policy_is_when_expired(values: Mapping[str, Any]) -> bool:
    return TriggerPolicy.parse(values.get("trigger_policy")) == TriggerPolicy.WHEN_EXPIRED


def build_arguments(config: DirectiveConfig) -> tuple[DirectiveArgument, ...]:
    """Argument schema in positional order."""
    return (
        DirectiveArgument(name="request_id", display_name="Request", kind="model", model="Request"),
        DirectiveArgument(
            name="attribute",
            display_name="Attribute",
            kind="enum",
            default=config.default_attribute,
            options=(ArgumentOption(value=BODY_ATTRIBUTE, display_name="Response body"),),
        ),
        DirectiveArgument(name="filter", display_name="RegExp", kind="string", default=""),
        DirectiveArgument(
            name="trigger_policy",
            display_name="Trigger Behavior",
            kind="enum",
            help="Configure when to resend the dependent request",
            default=config.default_policy.value,
            options=(
                ArgumentOption(value=TriggerPolicy.NEVER.value, display_name="Never",
                               description="never resend request"),
                ArgumentOption(value=TriggerPolicy.NO_HISTORY.value, display_name="No History",
                               description="resend when no responses present"),
                ArgumentOption(value=TriggerPolicy.WHEN_EXPIRED.value, display_name="When Expired",
                               description="resend when existing response has expired"),
                ArgumentOption(value=TriggerPolicy.ALWAYS.value, display_name="Always",
                               description="resend request when needed"),
            ),
        ),
        DirectiveArgument(
            name="max_age_seconds",
            display_name="Max age (seconds)",
            kind="number",
            help="The maximum age of a response to use before it expires",
            default=config.default_max_age_seconds,
            visible_when=_policy_is_when_expired,
        ),
    )


class ResponseRegexDirective:
    """Directive returning a regex capture from a dependency response."""

    name = "RegExpExtractor"
    display_name = "RegExp from response"
    description = "reference values from other request's responses"

    def __init__(
        self,
        env: RequestEnvironment,
        config: DirectiveConfig | None = None,
    ) -> None:
        self._env = env
        self._config = config or get_settings().directive
        self.arguments = build_arguments(self._config)

    def visible_arguments(self, values: Mapping[str, Any]) -> list[DirectiveArgument]:
        """Arguments to show for the given argument values."""
        return [argument for argument in self.arguments if argument.is_visible(values)]

    async def run(
        self,
        context: RenderContext,
        request_id: str | None,
        attribute: str | None = None,
        filter: str | None = None,
        trigger_policy: TriggerPolicy | str | None = None,
        max_age_seconds: float | None = None,
        now: datetime | None = None,
    ) -> str:
        """Evaluate the directive.

        Args:
            context: Render context for this evaluation
            request_id: Dependency request reference
            attribute: Response attribute; defaults to the body
            filter: Regular expression to apply
            trigger_policy: Resend rule; defaults to configuration
            max_age_seconds: Freshness limit for when-expired
            now: Clock override for age computation

        Returns:
            The extracted value

        Raises:
            DirectiveError: The first failure of either stage
        """
        policy = TriggerPolicy.parse(trigger_policy or self._config.default_policy)
        max_age = self._config.default_max_age_seconds if max_age_seconds is None else max_age_seconds

        try:
            response = (
                await decide_and_fetch(self._env, request_id, policy, max_age, context, now=now)
            ).unwrap()
            value = (
                await extract(
                    self._env,
                    response,
                    attribute or self._config.default_attribute,
                    filter,
                    fallback_charset=self._config.fallback_charset,
                )
            ).unwrap()
        except DirectiveError as exc:
            EXTRACTIONS.labels(status=exc.error_code.value).inc()
            logger.info(
                "directive_failed",
                request_id=request_id,
                error_code=exc.error_code.value,
                error=exc.message,
            )
            raise

        EXTRACTIONS.labels(status="ok").inc()
        return value
