"""
HTTP API for the maternity coverage dashboard.

Serves dashboard, claim, smart contract, pregnancy and assistant endpoints
over the in-memory entity store.
"""

from .app import app, main

__all__ = ["app", "main"]
