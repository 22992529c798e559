"""Mini README: Dictionary-backed envelope storage.

Structure:
    * InMemoryEnvelopeRepository - keeps deep copies of envelopes keyed by id.

State lives only as long as the process. Identifier counters belong to the
repository instance, so two repositories never share ids and tests start
from a clean slate.
"""

from __future__ import annotations

import copy
import itertools
import threading
from typing import Dict, List, Optional

from ..envelopes.models import Envelope
from ..logging_utils import get_logger
from .base import EnvelopeRepository

LOGGER = get_logger(__name__)


class InMemoryEnvelopeRepository(EnvelopeRepository):
    """Store envelopes in a process-local dictionary."""

    backend_name = "memory"

    def __init__(self) -> None:
        self._envelopes: Dict[int, Envelope] = {}
        self._envelope_ids = itertools.count(1)
        self._expense_ids = itertools.count(1)
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "InMemoryEnvelopeRepository":
        return cls()

    def _assign_expense_ids(self, envelope: Envelope) -> None:
        for expense in envelope.expenses:
            expense.envelope_id = envelope.envelope_id
            if expense.expense_id is None:
                expense.expense_id = next(self._expense_ids)

    def save(self, envelope: Envelope) -> Envelope:
        stored = copy.deepcopy(envelope)
        with self._lock:
            if stored.envelope_id is None:
                stored.envelope_id = next(self._envelope_ids)
            self._assign_expense_ids(stored)
            self._envelopes[stored.envelope_id] = stored
        LOGGER.debug("Saved envelope %s", stored.envelope_id)
        return copy.deepcopy(stored)

    def find_by_id(self, envelope_id: int) -> Optional[Envelope]:
        with self._lock:
            stored = self._envelopes.get(envelope_id)
            return copy.deepcopy(stored) if stored is not None else None

    def find_all(self) -> List[Envelope]:
        with self._lock:
            return [copy.deepcopy(self._envelopes[key]) for key in sorted(self._envelopes)]

    def delete(self, envelope_id: int) -> None:
        with self._lock:
            self._envelopes.pop(envelope_id, None)

    def update(self, envelope: Envelope) -> Optional[Envelope]:
        with self._lock:
            if envelope.envelope_id not in self._envelopes:
                LOGGER.debug("Ignoring update for unknown envelope %s", envelope.envelope_id)
                return None
            stored = copy.deepcopy(envelope)
            self._assign_expense_ids(stored)
            self._envelopes[stored.envelope_id] = stored
            return copy.deepcopy(stored)
