"""
Storage module for maternity coverage entities.

Provides in-memory storage for:
- Users and their pregnancy profile
- Policies and coverage used
- Claims and the smart contract transactions derived from them
"""

from .entity_store import (
    EntityKind,
    EntityStore,
    InMemoryEntityStore,
    create_entity_store,
    get_entity_store,
)
from .sample_data import SAMPLE_USER_ID, seed_sample_data

__all__ = [
    "EntityKind",
    "EntityStore",
    "InMemoryEntityStore",
    "create_entity_store",
    "get_entity_store",
    "SAMPLE_USER_ID",
    "seed_sample_data",
]
