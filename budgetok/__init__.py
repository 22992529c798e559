"""Mini README: Core package initializer for the Budget OK envelope tracker.

Exposes the logging factory so entry points can obtain loggers without
knowing the module layout. Domain types live in ``budgetok.envelopes``,
storage backends in ``budgetok.storage`` and transports in
``budgetok.interface``.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
