"""Core types for the formstate engine.

This module defines the data shared by every layer of the engine:
- FieldDescriptor: declarative identity of a field (name, rules, flags)
- FieldEntity: the live registration record owned by the registry
- ValidationError / FieldError: the structured validation failure payload
- Callbacks: the form-level callback slots
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

# Rule descriptors are opaque to the engine and passed through to the validator.
RuleSpec = dict[str, Any]


@dataclass(frozen=True)
class ValidationError:
    """A single rule failure reported by the validator.

    Attributes:
        message: Human-readable message
        field: Field name the failure relates to (should echo the requested name)
        field_value: The value that failed validation
    """

    message: str
    field: str | None = None
    field_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "field": self.field,
            "fieldValue": self.field_value,
        }


@dataclass
class FieldError:
    """Structured validation failure for one field.

    Attributes:
        errors: Rule failures, in rule order
        rules: The rule descriptors the field was validated against
    """

    errors: list[ValidationError] = field(default_factory=list)
    rules: list[RuleSpec] = field(default_factory=list)

    @property
    def field_name(self) -> str | None:
        """Field name reported by the first error."""
        if not self.errors:
            return None
        return self.errors[0].field

    @property
    def message(self) -> str | None:
        if not self.errors:
            return None
        return self.errors[0].message

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": [e.to_dict() for e in self.errors],
            "rules": list(self.rules),
        }


Errors = dict[str, FieldError | None]


@dataclass(frozen=True)
class FieldDescriptor:
    """Declarative identity of a field, handed over at registration time.

    A changed descriptor requires re-registration.

    Attributes:
        name: Field name; unnamed fields are registered but never addressable
        rules: Rule descriptors passed through to the validator
        validate_first: Stop at the first failing rule
        should_update: Re-render when any other field's value changes
    """

    name: str | None = None
    rules: tuple[RuleSpec, ...] = ()
    validate_first: bool = False
    should_update: bool = False

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], validate_first: bool = False
    ) -> "FieldDescriptor":
        """Create FieldDescriptor from YAML/JSON dict."""
        rules = data.get("rules") or []
        if isinstance(rules, dict):
            rules = [rules]

        return cls(
            name=data.get("name"),
            rules=tuple(dict(rule) for rule in rules),
            validate_first=data.get("validateFirst", validate_first),
            should_update=data.get("shouldUpdate", False),
        )


class FieldValidator(Protocol):
    """Call shape of the external rule validator.

    Returns None on success, or a FieldError whose errors echo ``name``.
    """

    async def __call__(
        self,
        name: str,
        value: Any,
        rules: list[RuleSpec],
        validate_first: bool = False,
    ) -> FieldError | None:
        ...


StoreChangeFn = Callable[[str], None]
ValidateFn = Callable[[], Awaitable[FieldError | None]]


@dataclass
class FieldEntity:
    """Live registration record for a mounted field.

    Attributes:
        descriptor: The field's declarative identity
        on_store_change: Called with the changed field name to request a re-render
        validate: Runs the external validator against the field's current value
        touched: Whether the value has been written since registration
    """

    descriptor: FieldDescriptor
    on_store_change: StoreChangeFn
    validate: ValidateFn
    touched: bool = False

    @property
    def name(self) -> str | None:
        return self.descriptor.name


@dataclass
class Callbacks:
    """Form-level callback slots. Each slot holds at most one callable."""

    on_finish: Callable[[dict[str, Any]], None] | None = None
    on_finish_failed: Callable[[Errors], None] | None = None
    on_values_change: Callable[[dict[str, Any], dict[str, Any]], None] | None = None
