"""Load form definitions from YAML files.

A form definition lists field descriptors and optional initial values:

    form: signup
    fields:
      - name: email
        rules:
          - {required: true, message: Email is required}
          - {type: email}
      - name: password
        validateFirst: true
        rules:
          - {required: true}
          - {min: 8}
    initialValues:
      email: ""

Rule descriptors are passed through untouched.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from formstate.config import FormConfig
from formstate.exceptions import FormDefinitionError
from formstate.types import FieldDescriptor


@dataclass
class FormDefinition:
    """Declarative description of a form."""

    name: str
    fields: list[FieldDescriptor] = field(default_factory=list)
    initial_values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], config: FormConfig | None = None
    ) -> "FormDefinition":
        """Create FormDefinition from YAML/JSON dict."""
        config = config or FormConfig()

        if not isinstance(data, dict):
            raise FormDefinitionError("Form definition must be a mapping")

        raw_fields = data.get("fields", [])
        if not isinstance(raw_fields, list):
            raise FormDefinitionError("'fields' must be a list")

        fields = []
        seen: set[str] = set()
        for raw in raw_fields:
            if not isinstance(raw, dict):
                raise FormDefinitionError(f"Field entry must be a mapping, got {raw!r}")
            descriptor = FieldDescriptor.from_dict(raw, validate_first=config.validate_first)
            if descriptor.name is not None:
                if descriptor.name in seen:
                    raise FormDefinitionError(f"Duplicate field name '{descriptor.name}'")
                seen.add(descriptor.name)
            fields.append(descriptor)

        initial_values = data.get("initialValues") or {}
        if not isinstance(initial_values, dict):
            raise FormDefinitionError("'initialValues' must be a mapping")

        return cls(
            name=data.get("form", ""),
            fields=fields,
            initial_values=dict(initial_values),
        )

    def get_field(self, name: str) -> FieldDescriptor | None:
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None


def load_form_definition(path: Path, config: FormConfig | None = None) -> FormDefinition:
    """Load a form definition from a YAML file.

    Raises:
        FormDefinitionError: The file is empty or not a valid definition
    """
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise FormDefinitionError(f"Invalid YAML in {path}: {e}") from e

    if not data:
        raise FormDefinitionError(f"Form definition {path} is empty")

    return FormDefinition.from_dict(data, config)
