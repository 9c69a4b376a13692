"""Test factories for creating test data."""

from tests.factories.responses import RequestFactory, ResponseFactory

__all__ = [
    "RequestFactory",
    "ResponseFactory",
]
