"""Field registry for formstate.

Holds the live FieldEntity records of one form. Names are unique: the first
registration of a name wins and later registrations under the same name are
dropped until the first one is removed.
"""

import logging
from collections.abc import Callable

from formstate.types import FieldEntity

logger = logging.getLogger(__name__)


class Registration:
    """Handle returned by a registration.

    deregister() is idempotent; calling it more than once is a no-op.
    """

    def __init__(self, entity: FieldEntity, release: Callable[[FieldEntity], None]):
        self.entity = entity
        self._release = release
        self._released = False

    @property
    def active(self) -> bool:
        return not self._released

    def deregister(self) -> None:
        if self._released:
            return
        self._released = True
        self._release(self.entity)


class FieldRegistry:
    """Ordered collection of registered field entities.

    Example:
        registry = FieldRegistry()
        registry.add(entity)          # True
        registry.add(same_name)       # False, first registration wins
        registry.names()              # ["email"]
    """

    def __init__(self) -> None:
        self._entities: list[FieldEntity] = []

    def add(self, entity: FieldEntity) -> bool:
        """Add an entity.

        Returns:
            False if a field with the same name is already registered (the
            new entity is ignored), True otherwise.
        """
        if entity.name is not None and self.get(entity.name) is not None:
            logger.warning(
                "Field '%s' is already registered; dropping duplicate registration",
                entity.name,
            )
            return False

        self._entities.append(entity)
        logger.debug("Registered field %r", entity.name)
        return True

    def remove(self, name: str) -> FieldEntity | None:
        """Remove the entity registered under ``name``, if any."""
        entity = self.get(name)
        if entity is None:
            return None
        self._entities = [e for e in self._entities if e is not entity]
        logger.debug("Deregistered field %r", name)
        return entity

    def discard(self, entity: FieldEntity) -> bool:
        """Remove this exact entity. Returns False if it is not registered."""
        if not self.contains(entity):
            return False
        self._entities = [e for e in self._entities if e is not entity]
        logger.debug("Deregistered field %r", entity.name)
        return True

    def contains(self, entity: FieldEntity) -> bool:
        return any(e is entity for e in self._entities)

    def get(self, name: str) -> FieldEntity | None:
        for entity in self._entities:
            if entity.name is not None and entity.name == name:
                return entity
        return None

    def entities(self, include_unnamed: bool = False) -> list[FieldEntity]:
        """Registered entities in registration order.

        Unnamed entities are only included for raw introspection.
        """
        if include_unnamed:
            return list(self._entities)
        return [e for e in self._entities if e.name is not None]

    def names(self) -> list[str]:
        return [e.name for e in self._entities if e.name is not None]

    def __len__(self) -> int:
        return len(self._entities)
