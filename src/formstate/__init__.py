"""formstate: a form-state engine.

This package keeps the state of one form consistent while fields register,
deregister and change asynchronously:
- FieldRegistry: registered field entities (first registration of a name wins)
- ValueStore / ErrorStore: canonical values and last validation verdicts
- ValidationOrchestrator: concurrent fan-out to each field's validator
- FormInstance: the public contract, callbacks and the two-phase submit

Usage:
    from formstate import FieldController, FieldDescriptor, FormInstance

    form = FormInstance()
    email = FieldController(form, FieldDescriptor(name="email", rules=({"required": True},)))
    email.register()

    form.set_callbacks(on_finish=save)
    await form.submit()
"""

from formstate.adapters import (
    FieldController,
    FieldProps,
    FormBinding,
    create_form,
)
from formstate.config import FormConfig
from formstate.definitions import FormDefinition, load_form_definition
from formstate.exceptions import (
    FormDefinitionError,
    FormStateError,
    RuleDefinitionError,
    RuleViolation,
)
from formstate.form import FormInstance
from formstate.name_path import NamePath, PathKind, resolve
from formstate.orchestrator import ValidationOrchestrator
from formstate.registry import FieldRegistry, Registration
from formstate.rules import validate_rule
from formstate.stores import ErrorStore, ValueStore
from formstate.types import (
    Callbacks,
    Errors,
    FieldDescriptor,
    FieldEntity,
    FieldError,
    FieldValidator,
    RuleSpec,
    ValidationError,
)

__all__ = [
    # Types
    "Callbacks",
    "Errors",
    "FieldDescriptor",
    "FieldEntity",
    "FieldError",
    "FieldValidator",
    "RuleSpec",
    "ValidationError",
    # Engine
    "ErrorStore",
    "FieldRegistry",
    "FormInstance",
    "NamePath",
    "PathKind",
    "Registration",
    "ValidationOrchestrator",
    "ValueStore",
    "resolve",
    # Validation
    "validate_rule",
    # Adapters
    "FieldController",
    "FieldProps",
    "FormBinding",
    "create_form",
    # Configuration
    "FormConfig",
    "FormDefinition",
    "load_form_definition",
    # Errors
    "FormDefinitionError",
    "FormStateError",
    "RuleDefinitionError",
    "RuleViolation",
]
