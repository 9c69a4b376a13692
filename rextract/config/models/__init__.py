"""Configuration models for rextract."""

from rextract.config.models.directive import DirectiveConfig
from rextract.config.models.observability import LoggingConfig, ObservabilityConfig

__all__ = ["DirectiveConfig", "LoggingConfig", "ObservabilityConfig"]
