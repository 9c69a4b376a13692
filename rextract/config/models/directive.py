"""Directive default configuration."""

from pydantic import BaseModel, Field, field_validator

from rextract.models import TriggerPolicy


class DirectiveConfig(BaseModel):
    """Defaults applied when a directive argument is left empty."""

    default_policy: TriggerPolicy = Field(
        default=TriggerPolicy.NEVER,
        description="Trigger policy used when none is given",
    )
    default_max_age_seconds: float = Field(
        default=60,
        description="Max response age for the when-expired policy",
    )
    default_attribute: str = Field(
        default="body",
        description="Response attribute to extract from",
    )
    fallback_charset: str = Field(
        default="utf-8",
        description="Charset used when the content type declares none",
    )

    @field_validator("default_policy", mode="before")
    @classmethod
    def parse_policy(cls, value: object) -> TriggerPolicy:
        """Accept policy names in any case."""
        return TriggerPolicy.parse(value)  # type: ignore[arg-type]
