"""View-layer adapters for formstate.

These objects sit between a rendering layer and a FormInstance. They own
the one-shot lifecycle flags (registered / initialized) and hand plain
data to caller-supplied render functions:

- create_form: explicit construction or reuse of a form instance
- FormBinding: installs callbacks and initial values once per form
- FieldController: registers one field and builds its render props
"""

import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from formstate.definitions import FormDefinition
from formstate.form import FormInstance
from formstate.registry import Registration
from formstate.rules import validate_rule
from formstate.types import Callbacks, FieldDescriptor, FieldEntity, FieldError, FieldValidator


def create_form(
    form: FormInstance | None = None,
    on_render: Callable[[], None] | None = None,
) -> FormInstance:
    """Return ``form`` if given, otherwise a new FormInstance.

    A given ``on_render`` replaces the render hook of an existing form.
    """
    if form is not None:
        if on_render is not None:
            form.on_render = on_render
        return form
    return FormInstance(on_render=on_render)


@dataclass
class FieldProps:
    """Data handed to a field render function.

    Attributes:
        id: Unique id of the field controller
        name: Field name
        value: Current store value
        on_value_change: Writes a new value through the form
        error: First recorded error message, if any
        required: Explicit required flag, or any rule marked required
    """

    id: str
    name: str | None
    value: Any
    on_value_change: Callable[[Any], None]
    error: str | None = None
    required: bool = False


RenderFn = Callable[[FieldProps], Any]


class FieldController:
    """Binds one field descriptor to a form.

    register() and deregister() are explicit and guarded by the
    ``registered`` flag, so repeated calls are no-ops.

    Example:
        controller = FieldController(form, FieldDescriptor(name="email"), render=draw)
        controller.register()
        controller.props().on_value_change("a@b.co")
    """

    def __init__(
        self,
        form: FormInstance,
        descriptor: FieldDescriptor,
        render: RenderFn | None = None,
        validator: FieldValidator = validate_rule,
        required: bool | None = None,
    ):
        self.form = form
        self.descriptor = descriptor
        self.render_fn = render
        self.validator = validator
        self.required = required
        self.id = uuid.uuid4().hex
        self.registered = False
        self._registration: Registration | None = None

    @property
    def name(self) -> str | None:
        return self.descriptor.name

    def register(self) -> None:
        if self.registered:
            return

        entity = FieldEntity(
            descriptor=self.descriptor,
            on_store_change=self._handle_store_change,
            validate=self._validate,
        )
        self._registration = self.form.sign_in_field(entity)
        self.registered = True

    def deregister(self) -> None:
        if not self.registered:
            return

        if self._registration is not None:
            self._registration.deregister()
        self._registration = None
        self.registered = False

    async def _validate(self) -> FieldError | None:
        if self.name is None or not self.descriptor.rules:
            return None

        return await self.validator(
            self.name,
            self.form.get_field_value(self.name),
            list(self.descriptor.rules),
            self.descriptor.validate_first,
        )

    def _handle_store_change(self, changed_name: str) -> None:
        if changed_name == self.name or self.descriptor.should_update:
            self.render()

    def set_value(self, value: Any) -> None:
        if self.name is None:
            return
        self.form.set_fields_value({self.name: value})

    def props(self) -> FieldProps:
        error = None
        value = None
        if self.name is not None:
            value = self.form.get_field_value(self.name)
            field_error = self.form.get_field_error(self.name)
            if field_error is not None:
                error = field_error.message

        required = self.required
        if required is None:
            required = any(rule.get("required") for rule in self.descriptor.rules)

        return FieldProps(
            id=self.id,
            name=self.name,
            value=value,
            on_value_change=self.set_value,
            error=error,
            required=bool(required),
        )

    def render(self) -> Any:
        """Call the render function with fresh props. Returns its result."""
        if self.render_fn is None:
            return None
        return self.render_fn(self.props())


class FormBinding:
    """Form-level adapter.

    mount() installs the callbacks and pushes the initial values exactly
    once; later calls only refresh the callbacks.
    """

    def __init__(
        self,
        form: FormInstance | None = None,
        initial_values: dict[str, Any] | None = None,
        callbacks: Callbacks | None = None,
        on_render: Callable[[], None] | None = None,
    ):
        self.form = create_form(form, on_render)
        self.initial_values = initial_values or {}
        self.callbacks = callbacks
        self.initialized = False
        self.fields: list[FieldController] = []

    @classmethod
    def from_definition(
        cls,
        definition: FormDefinition,
        form: FormInstance | None = None,
        callbacks: Callbacks | None = None,
        render: RenderFn | None = None,
    ) -> "FormBinding":
        """Build a binding with one controller per field of the definition."""
        binding = cls(form=form, initial_values=definition.initial_values, callbacks=callbacks)
        for descriptor in definition.fields:
            binding.field(descriptor, render=render)
        return binding

    def field(self, descriptor: FieldDescriptor, **kwargs: Any) -> FieldController:
        """Create a controller for ``descriptor`` and track it."""
        controller = FieldController(self.form, descriptor, **kwargs)
        self.fields.append(controller)
        return controller

    def mount(self) -> None:
        """Register tracked fields, then apply callbacks and initial values."""
        for controller in self.fields:
            controller.register()

        if self.callbacks is not None:
            self.form.set_callbacks(self.callbacks)

        self.form.set_initial_values(self.initial_values, self.initialized)
        self.initialized = True

    def unmount(self) -> None:
        for controller in self.fields:
            controller.deregister()

    async def submit(self, skip_validate: bool = False) -> bool:
        return await self.form.submit(skip_validate)
