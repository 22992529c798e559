"""Mini README: Envelope storage backends.

``base`` defines the repository contract, ``memory`` and ``sql`` implement
it, and ``registry`` selects one from configuration.
"""

from .base import EnvelopeRepository
from .memory import InMemoryEnvelopeRepository
from .registry import REGISTRY, RepositoryRegistry
from .sql import SqlEnvelopeRepository

__all__ = [
    "EnvelopeRepository",
    "InMemoryEnvelopeRepository",
    "REGISTRY",
    "RepositoryRegistry",
    "SqlEnvelopeRepository",
]
