"""Mini README: Abstract storage contract for envelopes.

Structure:
    * EnvelopeRepository - interface every storage backend implements.

Backends own identifier generation: ``save`` assigns the envelope id and
``save``/``update`` assign ids to expenses that do not have one yet.
Returned envelopes are detached copies; callers mutate them freely and
persist the result with ``update`` or ``update_many``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..envelopes.models import Envelope
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class EnvelopeRepository(ABC):
    """Base interface for envelope storage backends."""

    backend_name: str = "generic"

    @classmethod
    @abstractmethod
    def from_settings(cls, settings) -> "EnvelopeRepository":
        """Build the backend from ``BudgetOkSettings``."""

    @abstractmethod
    def save(self, envelope: Envelope) -> Envelope:
        """Store a new envelope and return it with identifiers assigned."""

    @abstractmethod
    def find_by_id(self, envelope_id: int) -> Optional[Envelope]:
        """Return the envelope or ``None`` when unknown."""

    @abstractmethod
    def find_all(self) -> List[Envelope]:
        """Return every envelope ordered by identifier."""

    @abstractmethod
    def delete(self, envelope_id: int) -> None:
        """Remove the envelope and its expenses; unknown ids are ignored."""

    @abstractmethod
    def update(self, envelope: Envelope) -> Optional[Envelope]:
        """Persist name, budget and new expenses of a stored envelope.

        Returns ``None`` when the envelope is not stored.
        """

    def update_many(self, envelopes: Iterable[Envelope]) -> List[Envelope]:
        """Persist several envelopes as one unit of work."""

        updated = []
        for envelope in envelopes:
            result = self.update(envelope)
            if result is not None:
                updated.append(result)
        LOGGER.debug("%s backend updated %s envelopes", self.backend_name, len(updated))
        return updated
