"""
In-memory entity storage.

Keeps users, policies, claims and smart contract transactions in keyed
collections for the lifetime of the process. Callers depend on the
EntityStore interface so the in-memory backend can be swapped for a real
database without touching them.
"""

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel

from ..claims.schema import Claim, Policy, SmartContractTransaction, User, utcnow

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    """Entity collections held by the store."""
    USER = "user"
    POLICY = "policy"
    CLAIM = "claim"
    TRANSACTION = "transaction"


MODELS: Dict[EntityKind, Type[BaseModel]] = {
    EntityKind.USER: User,
    EntityKind.POLICY: Policy,
    EntityKind.CLAIM: Claim,
    EntityKind.TRANSACTION: SmartContractTransaction,
}


def _field_name(model: Type[BaseModel], key: str) -> str:
    """Resolve a camelCase alias or snake_case name to the model's field name."""
    if key in model.model_fields:
        return key
    for name, info in model.model_fields.items():
        if info.alias == key:
            return name
    raise KeyError(f"{model.__name__} has no field {key!r}")


def _normalize(model: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, Any]:
    return {_field_name(model, key): value for key, value in data.items()}


class EntityStore(ABC):
    """
    Keyed storage for the four entity kinds.

    Usage:
        store = InMemoryEntityStore()

        claim = store.insert(EntityKind.CLAIM, claim_data)
        store.get(EntityKind.CLAIM, claim.id)
        store.get_by_foreign_key(EntityKind.CLAIM, "user_id", "user-1")
        store.update(EntityKind.CLAIM, claim.id, {"status": "approved"})
    """

    @abstractmethod
    def get(self, kind: EntityKind, entity_id: str) -> Optional[BaseModel]:
        """Return the entity with this id, or None."""

    @abstractmethod
    def get_by_foreign_key(self, kind: EntityKind, field: str, value: Any) -> List[BaseModel]:
        """Return every entity whose ``field`` equals ``value``, newest first."""

    @abstractmethod
    def insert(self, kind: EntityKind, data: Dict[str, Any]) -> BaseModel:
        """
        Store a new entity.

        Args:
            kind: Entity collection
            data: Entity fields; omitted optional fields take their declared defaults

        Returns:
            The stored entity with its generated id
        """

    @abstractmethod
    def update(self, kind: EntityKind, entity_id: str, changes: Dict[str, Any]) -> Optional[BaseModel]:
        """
        Merge ``changes`` into an existing entity.

        Returns:
            The updated entity, or None if no entity has this id. Never inserts.
        """

    @abstractmethod
    def increment(self, kind: EntityKind, entity_id: str, field: str, delta: Any) -> Optional[BaseModel]:
        """
        Add ``delta`` to a numeric field in one step.

        Returns:
            The updated entity, or None if no entity has this id. Never inserts.
        """

    @abstractmethod
    def count(self, kind: EntityKind) -> int:
        """Number of stored entities of a kind."""

    # Typed lookups shared by every backend

    def get_user(self, user_id: str) -> Optional[User]:
        return self.get(EntityKind.USER, user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        users = self.get_by_foreign_key(EntityKind.USER, "username", username)
        return users[0] if users else None

    def get_policy(self, policy_id: str) -> Optional[Policy]:
        return self.get(EntityKind.POLICY, policy_id)

    def get_policy_by_user_id(self, user_id: str) -> Optional[Policy]:
        """First policy held by a user. Sample data has one policy per user."""
        policies = self.get_by_foreign_key(EntityKind.POLICY, "user_id", user_id)
        return policies[0] if policies else None

    def get_claim(self, claim_id: str) -> Optional[Claim]:
        return self.get(EntityKind.CLAIM, claim_id)

    def get_claims_by_user_id(self, user_id: str) -> List[Claim]:
        return self.get_by_foreign_key(EntityKind.CLAIM, "user_id", user_id)

    def get_transactions_by_user_id(self, user_id: str) -> List[SmartContractTransaction]:
        return self.get_by_foreign_key(EntityKind.TRANSACTION, "user_id", user_id)


class InMemoryEntityStore(EntityStore):
    """
    Dict-backed store, one collection per entity kind.

    Each collection has its own lock, so requests served from FastAPI's
    threadpool are serialized per collection. Reads return copies; stored
    instances are never handed to callers.
    """

    def __init__(self):
        self._collections: Dict[EntityKind, Dict[str, BaseModel]] = {kind: {} for kind in EntityKind}
        self._locks: Dict[EntityKind, threading.Lock] = {kind: threading.Lock() for kind in EntityKind}

    def get(self, kind: EntityKind, entity_id: str) -> Optional[BaseModel]:
        with self._locks[kind]:
            entity = self._collections[kind].get(entity_id)
            return entity.model_copy(deep=True) if entity is not None else None

    def get_by_foreign_key(self, kind: EntityKind, field: str, value: Any) -> List[BaseModel]:
        model = MODELS[kind]
        name = _field_name(model, field)
        with self._locks[kind]:
            # Reversed first so that, for equal timestamps, later inserts still sort first
            matches = [
                entity.model_copy(deep=True)
                for entity in reversed(list(self._collections[kind].values()))
                if getattr(entity, name) == value
            ]
        if "created_at" in model.model_fields:
            matches.sort(key=lambda entity: entity.created_at, reverse=True)
        return matches

    def insert(self, kind: EntityKind, data: Dict[str, Any]) -> BaseModel:
        model = MODELS[kind]
        fields = _normalize(model, data)
        fields.setdefault("id", str(uuid.uuid4()))
        entity = model.model_validate(fields)

        with self._locks[kind]:
            if entity.id in self._collections[kind]:
                raise ValueError(f"{kind.value} {entity.id!r} already exists")
            self._collections[kind][entity.id] = entity
            logger.debug(f"Inserted {kind.value} {entity.id}")
            return entity.model_copy(deep=True)

    def update(self, kind: EntityKind, entity_id: str, changes: Dict[str, Any]) -> Optional[BaseModel]:
        fields = _normalize(MODELS[kind], changes)
        fields.pop("id", None)

        with self._locks[kind]:
            current = self._collections[kind].get(entity_id)
            if current is None:
                return None
            return self._replace(kind, current, fields)

    def increment(self, kind: EntityKind, entity_id: str, field: str, delta: Any) -> Optional[BaseModel]:
        name = _field_name(MODELS[kind], field)

        # Read-modify-write under a single lock acquisition
        with self._locks[kind]:
            current = self._collections[kind].get(entity_id)
            if current is None:
                return None
            return self._replace(kind, current, {name: getattr(current, name) + delta})

    def _replace(self, kind: EntityKind, current: BaseModel, fields: Dict[str, Any]) -> BaseModel:
        """Merge ``fields`` into ``current`` and store the result. Caller holds the lock."""
        model = MODELS[kind]
        merged = dict(current)
        merged.update(fields)
        if "updated_at" in model.model_fields:
            merged["updated_at"] = utcnow()

        updated = model.model_validate(merged)
        self._collections[kind][current.id] = updated
        logger.debug(f"Updated {kind.value} {current.id}: {sorted(fields)}")
        return updated.model_copy(deep=True)

    def count(self, kind: EntityKind) -> int:
        with self._locks[kind]:
            return len(self._collections[kind])


# =============================================================================
# Convenience Functions
# =============================================================================


def create_entity_store(seed: bool = True) -> InMemoryEntityStore:
    """Create an in-memory store, optionally populated with the demo data."""
    store = InMemoryEntityStore()
    if seed:
        from .sample_data import seed_sample_data
        seed_sample_data(store)
    return store


@lru_cache
def get_entity_store() -> EntityStore:
    """Get the default entity store (singleton)."""
    from ..utils.config import settings

    store = create_entity_store(seed=settings.seed_sample_data)
    logger.info(
        f"Entity store ready: {store.count(EntityKind.USER)} user(s), "
        f"{store.count(EntityKind.CLAIM)} claim(s)"
    )
    return store
