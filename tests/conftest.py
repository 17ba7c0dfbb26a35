"""Shared fixtures and helpers for formstate tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from formstate import FieldDescriptor, FieldEntity, FieldError, FormInstance, ValidationError


def make_entity(
    name: str | None,
    result: FieldError | None = None,
    rules: tuple = (),
    should_update: bool = False,
    validate_first: bool = False,
) -> FieldEntity:
    """Helper to create a FieldEntity with mocked view callbacks."""
    return FieldEntity(
        descriptor=FieldDescriptor(
            name=name,
            rules=rules,
            validate_first=validate_first,
            should_update=should_update,
        ),
        on_store_change=MagicMock(),
        validate=AsyncMock(return_value=result),
    )


def make_error(name: str, message: str = "invalid", value=None) -> FieldError:
    """Helper to create a one-error FieldError reported for ``name``."""
    return FieldError(
        errors=[ValidationError(message=message, field=name, field_value=value)],
        rules=[{"required": True, "message": message}],
    )


@pytest.fixture
def on_render():
    return MagicMock()


@pytest.fixture
def form(on_render):
    return FormInstance(on_render=on_render)


@pytest.fixture
def callbacks(form):
    """Install recording callbacks on the form and return them."""
    recorded = {
        "on_finish": MagicMock(),
        "on_finish_failed": MagicMock(),
        "on_values_change": MagicMock(),
    }
    form.set_callbacks(**recorded)
    return recorded
