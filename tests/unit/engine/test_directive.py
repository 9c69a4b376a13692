"""Tests for ResponseRegexDirective."""

from datetime import datetime

import pytest

from rextract.config.models.directive import DirectiveConfig
from rextract.directive import ResponseRegexDirective
from rextract.environment import InMemoryRequestEnvironment
from rextract.errors import (
    DependencyFailedError,
    InvalidFilterError,
    NoMatchError,
    RequestNotFoundError,
    TooManyMatchesError,
    UnsupportedAttributeError,
)
from rextract.models import RenderContext, TriggerPolicy
from tests.factories import ResponseFactory


@pytest.fixture
def directive(
    env: InMemoryRequestEnvironment, directive_config: DirectiveConfig
) -> ResponseRegexDirective:
    return ResponseRegexDirective(env, config=directive_config)


class TestDirectiveArguments:
    """Tests for the declarative argument schema."""

    def test_argument_order(self, directive: ResponseRegexDirective) -> None:
        assert [a.name for a in directive.arguments] == [
            "request_id",
            "attribute",
            "filter",
            "trigger_policy",
            "max_age_seconds",
        ]

    def test_defaults(self, directive: ResponseRegexDirective) -> None:
        defaults = {a.name: a.default for a in directive.arguments}
        assert defaults["attribute"] == "body"
        assert defaults["trigger_policy"] == "never"
        assert defaults["max_age_seconds"] == 60

    def test_policy_options(self, directive: ResponseRegexDirective) -> None:
        policy = directive.arguments[3]
        assert [o.value for o in policy.options] == [
            "never",
            "no-history",
            "when-expired",
            "always",
        ]

    @pytest.mark.parametrize(
        ("values", "visible"),
        [
            ({"trigger_policy": "when-expired"}, True),
            ({"trigger_policy": "WHEN-EXPIRED"}, True),
            ({"trigger_policy": "always"}, False),
            ({}, False),
        ],
    )
    def test_max_age_visibility(
        self, directive: ResponseRegexDirective, values: dict, visible: bool
    ) -> None:
        names = [a.name for a in directive.visible_arguments(values)]
        assert ("max_age_seconds" in names) is visible

    def test_metadata(self, directive: ResponseRegexDirective) -> None:
        assert directive.name == "RegExpExtractor"
        assert directive.display_name == "RegExp from response"


class TestDirectiveRun:
    """Tests for ResponseRegexDirective.run."""

    @pytest.mark.asyncio
    async def test_extracts_from_cached_response(
        self,
        directive: ResponseRegexDirective,
        env: InMemoryRequestEnvironment,
        send_context: RenderContext,
    ) -> None:
        env.add_response(ResponseFactory.create(body="user id=42 active"))

        value = await directive.run(send_context, "req_login", "body", r"id=(\d+)")

        assert value == "42"
        assert env.executions == []

    @pytest.mark.asyncio
    async def test_attribute_defaults_to_body(
        self,
        directive: ResponseRegexDirective,
        env: InMemoryRequestEnvironment,
        send_context: RenderContext,
    ) -> None:
        env.add_response(ResponseFactory.create(body="user id=42 active"))

        assert await directive.run(send_context, "req_login", None, r"id=(\d+)") == "42"

    @pytest.mark.asyncio
    async def test_resend_then_extract(
        self,
        directive: ResponseRegexDirective,
        env: InMemoryRequestEnvironment,
        send_context: RenderContext,
        sent_bodies: list[bytes],
        now: datetime,
    ) -> None:
        env.add_response(ResponseFactory.create(body="user id=1 stale", age_seconds=120, now=now))
        sent_bodies.append(b"user id=2 fresh")

        value = await directive.run(
            send_context,
            "req_login",
            "body",
            r"id=(\d+)",
            trigger_policy="when-expired",
            max_age_seconds=60,
            now=now,
        )

        assert value == "2"
        assert len(env.executions) == 1

    @pytest.mark.asyncio
    async def test_default_policy_from_config(
        self, env: InMemoryRequestEnvironment, send_context: RenderContext
    ) -> None:
        directive = ResponseRegexDirective(
            env, config=DirectiveConfig(default_policy=TriggerPolicy.NO_HISTORY)
        )

        value = await directive.run(send_context, "req_login", "body", r"id=(\d+)")

        assert value == "99"
        assert len(env.executions) == 1

    @pytest.mark.asyncio
    async def test_no_match(
        self,
        directive: ResponseRegexDirective,
        env: InMemoryRequestEnvironment,
        send_context: RenderContext,
    ) -> None:
        env.add_response(ResponseFactory.create(body="bar baz"))

        with pytest.raises(NoMatchError):
            await directive.run(send_context, "req_login", "body", "foo")

    @pytest.mark.asyncio
    async def test_too_many_groups(
        self,
        directive: ResponseRegexDirective,
        env: InMemoryRequestEnvironment,
        send_context: RenderContext,
    ) -> None:
        env.add_response(ResponseFactory.create(body="abc"))

        with pytest.raises(TooManyMatchesError):
            await directive.run(send_context, "req_login", "body", "(a)(b)")

    @pytest.mark.asyncio
    async def test_invalid_filter(
        self,
        directive: ResponseRegexDirective,
        env: InMemoryRequestEnvironment,
        send_context: RenderContext,
    ) -> None:
        env.add_response(ResponseFactory.create())

        with pytest.raises(InvalidFilterError, match="Wrong regexp"):
            await directive.run(send_context, "req_login", "body", "[a-")

    @pytest.mark.asyncio
    async def test_dependency_error_precedes_filter_validation(
        self,
        directive: ResponseRegexDirective,
        env: InMemoryRequestEnvironment,
        send_context: RenderContext,
    ) -> None:
        env.add_response(ResponseFactory.create(error="socket hang up"))

        with pytest.raises(DependencyFailedError) as exc_info:
            await directive.run(send_context, "req_login", "body", "(unclosed")

        assert exc_info.value.dependency_error == "socket hang up"

    @pytest.mark.asyncio
    async def test_unsupported_attribute(
        self,
        directive: ResponseRegexDirective,
        env: InMemoryRequestEnvironment,
        send_context: RenderContext,
    ) -> None:
        env.add_response(ResponseFactory.create())

        with pytest.raises(UnsupportedAttributeError):
            await directive.run(send_context, "req_login", "headers", "id")

    @pytest.mark.asyncio
    async def test_missing_request(
        self, directive: ResponseRegexDirective, send_context: RenderContext
    ) -> None:
        with pytest.raises(RequestNotFoundError, match="No request specified"):
            await directive.run(send_context, None, "body", "id")
