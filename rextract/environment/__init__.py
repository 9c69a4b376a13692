"""Host request execution environment.

The directive only consumes this interface; hosts provide their own
implementation. An in-memory implementation is included for tests and
development.
"""

from rextract.environment.host import RequestEnvironment
from rextract.environment.inmemory import Execution, InMemoryRequestEnvironment, Sender

__all__ = [
    "Execution",
    "InMemoryRequestEnvironment",
    "RequestEnvironment",
    "Sender",
]
