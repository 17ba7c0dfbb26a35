"""Exceptions raised by formstate.

Structured validation failures are data (FieldError), not exceptions.
These classes cover the remaining cases.
"""


class FormStateError(Exception):
    """Base class for formstate errors."""
    pass


class RuleDefinitionError(FormStateError):
    """A rule descriptor is malformed (e.g., an unknown ``type``)."""
    pass


class RuleViolation(FormStateError):
    """Raised by a custom rule callable to report a validation failure.

    The default rule validator converts it into a ValidationError; it never
    escapes validate_rule().
    """

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class FormDefinitionError(FormStateError):
    """A YAML form definition could not be parsed into descriptors."""
    pass
