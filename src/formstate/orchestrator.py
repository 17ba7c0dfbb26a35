"""Validation orchestration for formstate.

Fans validation out to each field's validate() callable and records the
verdicts in the error store. The orchestrator never evaluates rules itself.
"""

import asyncio
import logging

from formstate.name_path import NamePathLike, resolve
from formstate.registry import FieldRegistry
from formstate.stores import ErrorStore
from formstate.types import Errors, FieldError

logger = logging.getLogger(__name__)


class ValidationOrchestrator:
    """Runs field validations and aggregates their results.

    All validations of one pass run concurrently and every one of them is
    allowed to finish, even when another raises. There is no cancellation:
    a slow result for an older value still overwrites the error slot when
    it lands.
    """

    def __init__(self, registry: FieldRegistry, errors: ErrorStore):
        self.registry = registry
        self.errors = errors
        self._pending: set[asyncio.Task] = set()

    async def validate_one(self, name: str) -> FieldError | None:
        """Validate one field and record the verdict.

        Args:
            name: Field name; unknown names resolve to no result

        Returns:
            The FieldError produced by the validator, or None if it passed
        """
        entity = self.registry.get(name)
        if entity is None:
            logger.debug("validate_one: no field registered as %r", name)
            return None

        result = await entity.validate()

        # A field removed mid-flight must not get its slot back.
        if self.registry.contains(entity):
            self.errors.set(name, result)

        return result

    async def validate_many(self, path: NamePathLike = None) -> Errors:
        """Validate every field the path resolves to.

        Returns:
            Mapping of reported field name -> FieldError, for failed fields only.
            The key is the field named inside the error, so validators must echo
            the requested name.

        Raises:
            Whatever a validator raised that is not a structured failure, after
            all validations have settled.
        """
        names = resolve(path, self.registry.names())
        results = await asyncio.gather(
            *(self.validate_one(name) for name in names),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            raise failures[0]

        errors: Errors = {}
        for name, result in zip(names, results):
            if result is None:
                continue
            errors[result.field_name or name] = result
        return errors

    def schedule(self, name: str) -> asyncio.Task | None:
        """Start validate_one(name) in the background.

        Returns None (and skips validation) when no event loop is running.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; skipping validation of %r", name)
            return None

        task = loop.create_task(self.validate_one(name))
        self._pending.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background field validation failed: %s", exc, exc_info=exc)

    @property
    def pending(self) -> int:
        return sum(1 for task in self._pending if not task.done())

    async def settle(self) -> None:
        """Wait until no background validation is in flight."""
        while True:
            tasks = [task for task in self._pending if not task.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)
