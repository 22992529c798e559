"""Mini README: Transport bindings for the Budget OK ledger.

Exports the FastAPI application factory. The Typer CLI that serves it lives
in ``budgetok.cli``.
"""

from .web_app import create_application

__all__ = ["create_application"]
