"""Default rule validator.

The engine only orchestrates validation; this module is the stock external
validator that field controllers use unless given another one. Each rule is
a plain dict and may combine several checks:

- required: value must be non-empty
- type: string, number, integer, float, boolean, array, object, email, url, enum
- min / max: numeric bounds, or length bounds for strings and arrays
- len: exact numeric value or exact length
- pattern: regex the string value must match
- enum: allowed values
- whitespace: string must contain something besides whitespace
- validator: custom callable (sync or async) taking the value
- message: replaces the default message of any failure of this rule

A rule produces at most one error. Empty values skip every check except
``required`` and ``validator``.
"""

import inspect
import re
from typing import Any

from formstate.exceptions import RuleDefinitionError, RuleViolation
from formstate.types import FieldError, RuleSpec, ValidationError


# =============================================================================
# Type Patterns
# =============================================================================

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

URL_PATTERN = re.compile(
    r"^https?://[^\s/$.?#].[^\s]*$",
    re.IGNORECASE
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": _is_number,
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "float": lambda v: isinstance(v, float),
    "boolean": lambda v: isinstance(v, bool),
    "array": lambda v: isinstance(v, (list, tuple)),
    "object": lambda v: isinstance(v, dict),
    "email": lambda v: isinstance(v, str) and EMAIL_PATTERN.match(v) is not None,
    "url": lambda v: isinstance(v, str) and URL_PATTERN.match(v) is not None,
}


def is_empty(value: Any) -> bool:
    """Check if a value is considered empty."""
    if value is None:
        return True
    if isinstance(value, str) and value == "":
        return True
    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        return True
    return False


# =============================================================================
# Rule Checks
# =============================================================================


def _check_type(name: str, value: Any, rule: RuleSpec) -> str | None:
    rule_type = rule.get("type")
    if rule_type is None:
        return None

    if rule_type == "enum":
        if value not in rule.get("enum", []):
            return f"{name} must be one of {', '.join(map(str, rule.get('enum', [])))}"
        return None

    check = _TYPE_CHECKS.get(rule_type)
    if check is None:
        raise RuleDefinitionError(f"Unknown rule type '{rule_type}' for field '{name}'")

    if not check(value):
        return f"{name} is not a valid {rule_type}"
    return None


def _check_range(name: str, value: Any, rule: RuleSpec) -> str | None:
    """Validate len/min/max against a number or a length."""
    if _is_number(value):
        measured, unit = value, ""
    elif isinstance(value, (str, list, tuple)):
        measured, unit = len(value), " characters" if isinstance(value, str) else " items"
    else:
        return None

    if "len" in rule and measured != rule["len"]:
        return f"{name} must be exactly {rule['len']}{unit}"
    if "min" in rule and measured < rule["min"]:
        return f"{name} must be at least {rule['min']}{unit}"
    if "max" in rule and measured > rule["max"]:
        return f"{name} must be at most {rule['max']}{unit}"
    return None


def _check_pattern(name: str, value: Any, rule: RuleSpec) -> str | None:
    pattern = rule.get("pattern")
    if pattern is None or not isinstance(value, str):
        return None

    try:
        matched = re.search(pattern, value)
    except re.error as e:
        raise RuleDefinitionError(f"Invalid pattern for field '{name}': {e}") from e

    if matched is None:
        return f"{name} format is invalid"
    return None


def _check_static(name: str, value: Any, rule: RuleSpec) -> str | None:
    """Run the declarative checks of one rule. Returns an error message or None."""
    if rule.get("required") and is_empty(value):
        return f"{name} is required"

    if is_empty(value):
        return None

    type_error = _check_type(name, value, rule)
    if type_error:
        return type_error

    range_error = _check_range(name, value, rule)
    if range_error:
        return range_error

    pattern_error = _check_pattern(name, value, rule)
    if pattern_error:
        return pattern_error

    if "enum" in rule and rule.get("type") != "enum" and value not in rule["enum"]:
        return f"{name} must be one of {', '.join(map(str, rule['enum']))}"

    if rule.get("whitespace") and isinstance(value, str) and value.strip() == "":
        return f"{name} cannot be empty"

    return None


async def _check_custom(name: str, value: Any, rule: RuleSpec) -> str | None:
    custom = rule.get("validator")
    if custom is None:
        return None

    try:
        result = custom(value)
        if inspect.isawaitable(result):
            result = await result
    except RuleViolation as e:
        return e.message or f"{name} is invalid"

    if result is None or result is True:
        return None
    if result is False:
        return f"{name} is invalid"
    return str(result)


# =============================================================================
# Validator Entry Point
# =============================================================================


async def validate_rule(
    name: str,
    value: Any,
    rules: list[RuleSpec] | tuple[RuleSpec, ...] | None = None,
    validate_first: bool = False,
) -> FieldError | None:
    """Validate one field value against its rules.

    Args:
        name: Field name, echoed in every error
        value: The value to validate
        rules: Rule descriptors, checked in order
        validate_first: Stop after the first failing rule

    Returns:
        None if every rule passed, otherwise a FieldError

    Raises:
        RuleDefinitionError: A rule is malformed
        Exception: Anything a custom validator raises other than RuleViolation
    """
    rules = list(rules or [])
    errors: list[ValidationError] = []

    for rule in rules:
        message = _check_static(name, value, rule)
        if message is None:
            message = await _check_custom(name, value, rule)
        if message is None:
            continue

        errors.append(ValidationError(
            message=rule.get("message") or message,
            field=name,
            field_value=value,
        ))
        if validate_first:
            break

    if not errors:
        return None
    return FieldError(errors=errors, rules=rules)
