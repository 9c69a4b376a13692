"""Process-level initialization for hosts embedding the directive."""

from rextract.config import Settings, get_settings
from rextract.observability.logging import get_logger, setup_logging


def configure(settings: Settings | None = None) -> Settings:
    """Apply logging configuration from settings.

    Call once at host startup. Returns the settings used.
    """
    settings = settings or get_settings()
    logging_config = settings.observability.logging
    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        redact_sensitive=logging_config.redact_sensitive,
    )
    get_logger(__name__).debug(
        "rextract_configured",
        app_name=settings.app_name,
        default_policy=settings.directive.default_policy.value,
    )
    return settings
