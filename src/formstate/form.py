"""Form instance: the public contract of the formstate engine.

A FormInstance composes the field registry, the value and error stores and
the validation orchestrator. The view layer talks to it only through the
methods below:

1. sign_in_field / sign_out_field: field registration lifecycle
2. set_fields_value / get_field_value: value reads and merge-writes
3. set_field_error / get_field_error: error slot reads and overwrites
4. validate_field / submit: validation passes and the two-phase submit

All store mutations are synchronous. Suspension happens only while awaiting
validators, so a read issued right after a write always sees the write.
"""

import logging
from collections.abc import Callable, Mapping
from copy import deepcopy
from typing import Any

from formstate.config import FormConfig
from formstate.name_path import NamePath, NamePathLike, resolve
from formstate.orchestrator import ValidationOrchestrator
from formstate.registry import FieldRegistry, Registration
from formstate.stores import ErrorStore, ValueStore
from formstate.types import Callbacks, Errors, FieldEntity, FieldError

logger = logging.getLogger(__name__)


class FormInstance:
    """State engine for one form.

    Example:
        form = FormInstance(on_render=view.refresh)
        handle = form.sign_in_field(entity)
        form.set_fields_value({"email": "a@b.co"})
        await form.submit()
        handle.deregister()
    """

    def __init__(
        self,
        on_render: Callable[[], None] | None = None,
        config: FormConfig | None = None,
    ):
        """Initialize the form.

        Args:
            on_render: Re-render request, invoked after a failed submit
            config: Engine defaults (FormConfig() if not provided)
        """
        self.on_render = on_render
        self.config = config or FormConfig()
        self.callbacks = Callbacks()
        self.registry = FieldRegistry()
        self.values = ValueStore()
        self.errors = ErrorStore()
        self.orchestrator = ValidationOrchestrator(self.registry, self.errors)
        self._initial_values: dict[str, Any] = {}

    # =========================================================================
    # Registration
    # =========================================================================

    def get_field_entities(self, include_unnamed: bool = False) -> list[FieldEntity]:
        return self.registry.entities(include_unnamed)

    def get_field_entity_names(
        self,
        names: list[str] | None = None,
        include_unnamed: bool = False,
    ) -> list[str | None]:
        """Names of registered entities, optionally filtered to ``names``."""
        entity_names = [e.name for e in self.registry.entities(include_unnamed)]
        if names is None:
            return entity_names
        return [name for name in entity_names if name is not None and name in names]

    def sign_in_field(self, entity: FieldEntity) -> Registration:
        """Register a field entity.

        The first registration of a name wins; a duplicate is dropped and its
        handle deregisters nothing. A newly registered named field starts
        with an empty value slot and no recorded error.
        """
        if self.registry.add(entity) and entity.name is not None:
            self.set_fields_value({entity.name: None}, validate=False, notify=False)
            self.errors.set(entity.name, None)

        return Registration(entity, self._release)

    def sign_out_field(self, name: NamePathLike = None) -> None:
        """Deregister every field the path resolves to and purge its slots."""
        for field_name in resolve(name, self.registry.names()):
            if self.registry.remove(field_name) is not None:
                self._purge(field_name)

    def _release(self, entity: FieldEntity) -> None:
        if self.registry.discard(entity) and entity.name is not None:
            self._purge(entity.name)

    def _purge(self, name: str) -> None:
        self.values.discard(name)
        self.errors.discard(name)
        logger.debug("Purged value and error slots of %r", name)

    # =========================================================================
    # Values
    # =========================================================================

    def set_fields_value(
        self,
        values: Mapping[str, Any] | None = None,
        *,
        validate: bool | None = None,
        notify: bool = True,
        touch: bool = True,
    ) -> None:
        """Merge values into the store.

        Args:
            values: Partial mapping of field name -> value
            validate: Start background validation of each written field
                (defaults to config.validate_on_change)
            notify: Mark written fields touched, ask them to re-render and,
                if ``validate``, validate them
            touch: Whether notified fields are marked touched
        """
        values = dict(values or {})
        if validate is None:
            validate = self.config.validate_on_change

        merged = self.values.merge(values)

        if notify:
            changed: list[str] = []
            for name in values:
                entity = self.registry.get(name)
                if entity is None:
                    continue
                changed.append(name)
                if touch:
                    entity.touched = True
                entity.on_store_change(name)
                if validate:
                    self.orchestrator.schedule(name)

            if changed:
                self._notify_dependents(values, changed)

        on_values_change = self.callbacks.on_values_change
        if on_values_change:
            on_values_change(values, merged)

    def _notify_dependents(self, values: Mapping[str, Any], changed: list[str]) -> None:
        for entity in self.registry.entities():
            if not entity.descriptor.should_update or entity.name in values:
                continue
            for name in changed:
                entity.on_store_change(name)

    def get_field_value(self, name: NamePathLike = None) -> Any:
        """Read values.

        None returns the whole store, a key returns that slot's value (None if
        missing) and a list returns a mapping of the registered names in it.
        """
        return self.values.select(name, self.registry.names())

    # =========================================================================
    # Errors
    # =========================================================================

    def set_field_error(self, errors: Mapping[str, FieldError | None] | None) -> None:
        """Overwrite the error slot of every key in ``errors``."""
        for name, error in (errors or {}).items():
            self.errors.set(name, error)

    def get_field_error(self, name: NamePathLike = None) -> Any:
        """Read recorded errors, with the same shapes as get_field_value()."""
        return self.errors.select(name, self.registry.names())

    # =========================================================================
    # Initial values & callbacks
    # =========================================================================

    def set_initial_values(
        self,
        values: Mapping[str, Any] | None = None,
        already_initialized: bool = False,
    ) -> None:
        """Record initial values and push them to the fields registered now.

        Skipped entirely when ``already_initialized`` is true. Fields that
        register afterwards do not receive the initial values. The push does
        not validate and does not mark fields touched.
        """
        if already_initialized:
            logger.debug("Initial values already applied; skipping")
            return

        self._initial_values.update(deepcopy(dict(values or {})))

        registered = set(self.registry.names())
        self.set_fields_value(
            {k: v for k, v in self._initial_values.items() if k in registered},
            validate=False,
            touch=False,
        )

    def get_initial_values(self) -> dict[str, Any]:
        return deepcopy(self._initial_values)

    def set_callbacks(self, callbacks: Callbacks | None = None, **slots: Any) -> None:
        """Replace callback slots.

        Only slots given a callable (through ``callbacks`` or keyword) are
        replaced; the others keep their current value.
        """
        if callbacks is not None:
            for slot in ("on_finish", "on_finish_failed", "on_values_change"):
                fn = getattr(callbacks, slot)
                if fn is not None:
                    setattr(self.callbacks, slot, fn)

        for slot, fn in slots.items():
            if not hasattr(self.callbacks, slot):
                raise TypeError(f"Unknown callback slot: {slot}")
            setattr(self.callbacks, slot, fn)

    # =========================================================================
    # Touched state
    # =========================================================================

    def set_field_touched(self, name: str, touched: bool) -> None:
        entity = self.registry.get(name)
        if entity is None:
            logger.debug("set_field_touched: no field registered as %r", name)
            return
        entity.touched = touched

    def is_field_touched(self, name: NamePathLike = None) -> bool:
        """True when every resolved, registered field is touched.

        Unregistered names are skipped, so a single unknown name and a list
        of unknown names both resolve to nothing. An empty resolution (e.g.,
        no registered fields) is vacuously true.
        """
        for field_name in resolve(name, self.registry.names()):
            entity = self.registry.get(field_name)
            if entity is None:
                continue
            if not entity.touched:
                return False
        return True

    # =========================================================================
    # Validation & submission
    # =========================================================================

    async def validate_field(self, name: NamePathLike = None) -> Any:
        """Validate the fields the path resolves to.

        Returns:
            For a single key, that field's FieldError or None. Otherwise a
            mapping of field name -> FieldError holding failed fields only.
        """
        path = NamePath.coerce(name)
        errors = await self.orchestrator.validate_many(path)
        if path.is_single:
            return errors.get(path.key)
        return errors

    def reset_field(self, name: NamePathLike = None) -> None:
        """Clear the value and error of every resolved field, without validating."""
        for field_name in resolve(name, self.registry.names()):
            if self.registry.get(field_name) is None:
                continue
            self.set_fields_value({field_name: None}, validate=False)
            self.errors.set(field_name, None)

    async def submit(self, skip_validate: bool = False) -> bool:
        """Submit the form.

        With ``skip_validate`` the finish callback runs at once with the
        current values. Otherwise every field is validated first; on failure
        the failure callback receives the error map and a re-render is
        requested. Values written before a failed submit are kept.

        Returns:
            True if on_finish was reached, False otherwise
        """
        if not skip_validate:
            errors: Errors = await self.validate_field()
            if any(error is not None for error in errors.values()):
                logger.debug("Submit failed for fields: %s", sorted(errors))
                if self.callbacks.on_finish_failed:
                    self.callbacks.on_finish_failed(errors)
                if self.on_render:
                    self.on_render()
                return False

        if self.callbacks.on_finish:
            self.callbacks.on_finish(self.values.snapshot())
        return True

    async def settle(self) -> None:
        """Wait for background validations started by set_fields_value()."""
        await self.orchestrator.settle()
