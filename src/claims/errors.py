"""Exceptions raised by the claim lifecycle and dashboard services."""

from typing import Dict, List, Optional


class CoverageError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    message = "Internal server error"

    def to_dict(self) -> dict:
        return {"error": self.message}


class NotFoundError(CoverageError):
    """An entity referenced by id does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        self.message = f"{entity} not found"
        super().__init__(f"{entity} {entity_id!r} not found")


class ClaimValidationError(CoverageError):
    """
    A claim payload failed validation.

    Carries one ``{"field": ..., "message": ...}`` entry per offending field.
    """

    status_code = 400
    message = "Invalid data"

    def __init__(self, details: Optional[List[Dict[str, str]]] = None):
        self.details = details or []
        fields = ", ".join(d["field"] for d in self.details) or "payload"
        super().__init__(f"Invalid claim data: {fields}")

    def to_dict(self) -> dict:
        return {"error": self.message, "details": self.details}
