"""Common helpers for aggregate roots."""

from datetime import datetime, timezone
from typing import Any


# Only create()/reconstitute() in this package hold the key
_CONSTRUCTION_KEY = object()


def utc_now() -> datetime:
    """Current timestamp in UTC."""
    return datetime.now(timezone.utc)


class AggregateRoot:
    """
    Base class for entities that own and validate their own state.

    Instances must come from the subclass ``create`` (validating) or
    ``reconstitute`` (trusting, for storage hydration) class methods.
    """

    def __init__(self, key: object, entity_id: Any, created_at: datetime):
        if key is not _CONSTRUCTION_KEY:
            raise TypeError(
                f"{self.__class__.__name__} must be built with create() or reconstitute()"
            )
        self._id = entity_id
        self._created_at = created_at

    @property
    def id(self):
        return self._id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self._id))
