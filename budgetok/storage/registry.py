"""Mini README: Registry mapping storage backend names to repositories.

Structure:
    * RepositoryRegistry - registers ``EnvelopeRepository`` classes and
      builds instances from settings.
    * REGISTRY - module-level registry with the built-in backends.

The configured ``storage_backend`` setting is resolved here, so adding a new
backend only requires registering its class.
"""

from __future__ import annotations

from typing import Dict, Iterable, Type

from ..logging_utils import get_logger
from .base import EnvelopeRepository
from .memory import InMemoryEnvelopeRepository
from .sql import SqlEnvelopeRepository

LOGGER = get_logger(__name__)


class RepositoryRegistry:
    """Simple registry for mapping backend identifiers to classes."""

    def __init__(self) -> None:
        self._backends: Dict[str, Type[EnvelopeRepository]] = {}

    def register(self, backend: Type[EnvelopeRepository]) -> None:
        """Register a repository class under its ``backend_name``."""

        identifier = backend.backend_name.lower()
        LOGGER.debug("Registering storage backend '%s'", identifier)
        self._backends[identifier] = backend

    def available_backends(self) -> Iterable[str]:
        return sorted(self._backends.keys())

    def create(self, identifier: str, settings) -> EnvelopeRepository:
        """Instantiate the backend matching the identifier."""

        backend_cls = self._backends.get(identifier.lower())
        if not backend_cls:
            raise KeyError(f"Unknown storage backend '{identifier}'")
        LOGGER.info("Creating storage backend '%s'", identifier)
        return backend_cls.from_settings(settings)


REGISTRY = RepositoryRegistry()
REGISTRY.register(InMemoryEnvelopeRepository)
REGISTRY.register(SqlEnvelopeRepository)
