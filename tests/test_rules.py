"""Tests for the default rule validator."""

import pytest

from formstate.exceptions import RuleDefinitionError, RuleViolation
from formstate.rules import EMAIL_PATTERN, URL_PATTERN, is_empty, validate_rule


# =============================================================================
# Pattern Tests
# =============================================================================


class TestPatterns:
    def test_email(self):
        assert EMAIL_PATTERN.match("user+tag@example.org")
        assert not EMAIL_PATTERN.match("user@")

    def test_url(self):
        assert URL_PATTERN.match("https://example.com/path")
        assert not URL_PATTERN.match("example.com")

    @pytest.mark.parametrize("value", [None, "", [], {}, ()])
    def test_empty_values(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", [0, False, " ", [0]])
    def test_non_empty_values(self, value):
        assert not is_empty(value)


# =============================================================================
# validate_rule
# =============================================================================


class TestValidateRule:
    @pytest.mark.asyncio
    async def test_success(self):
        result = await validate_rule(
            "name",
            "123",
            [{"required": True, "type": "string", "min": 1, "max": 10}],
        )

        assert result is None

    @pytest.mark.asyncio
    async def test_required_failure(self):
        result = await validate_rule(
            "name",
            None,
            [{"required": True, "message": "Please enter the correct password."}],
            validate_first=True,
        )

        assert result is not None
        assert result.message == "Please enter the correct password."
        assert result.field_name == "name"
        assert result.errors[0].field_value is None
        assert result.rules == [{"required": True, "message": "Please enter the correct password."}]

    @pytest.mark.asyncio
    async def test_empty_optional_value_skips_checks(self):
        assert await validate_rule("age", "", [{"type": "number", "min": 3}]) is None

    @pytest.mark.asyncio
    async def test_collects_one_error_per_rule(self):
        rules = [
            {"required": True, "message": "Please enter the field values"},
            {"type": "number", "message": "Please enter the number"},
            {"min": 5},
        ]

        result = await validate_rule("code", "abc", rules)

        assert [e.message for e in result.errors] == [
            "Please enter the number",
            "code must be at least 5 characters",
        ]

    @pytest.mark.asyncio
    async def test_validate_first_stops_early(self):
        rules = [{"type": "number"}, {"min": 5}]

        result = await validate_rule("code", "abc", rules, validate_first=True)

        assert len(result.errors) == 1
        assert result.message == "code is not a valid number"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "rule,value,valid",
        [
            ({"type": "integer"}, 3, True),
            ({"type": "integer"}, True, False),
            ({"type": "float"}, 1.5, True),
            ({"type": "boolean"}, False, True),
            ({"type": "array"}, [1], True),
            ({"type": "object"}, {"a": 1}, True),
            ({"type": "email"}, "a@b.co", True),
            ({"type": "email"}, "nope", False),
            ({"type": "url"}, "http://x.io", True),
            ({"type": "enum", "enum": ["a", "b"]}, "c", False),
            ({"enum": ["a", "b"]}, "a", True),
            ({"min": 2, "max": 4}, 5, False),
            ({"len": 3}, "abc", True),
            ({"len": 3}, [1, 2], False),
            ({"pattern": r"^\d+$"}, "123", True),
            ({"pattern": r"^\d+$"}, "12a", False),
            ({"whitespace": True}, "   ", False),
        ],
    )
    async def test_rule_checks(self, rule, value, valid):
        result = await validate_rule("field", value, [rule])

        assert (result is None) is valid

    @pytest.mark.asyncio
    async def test_unknown_type_raises(self):
        with pytest.raises(RuleDefinitionError):
            await validate_rule("field", "x", [{"type": "color"}])

    @pytest.mark.asyncio
    async def test_invalid_pattern_raises(self):
        with pytest.raises(RuleDefinitionError):
            await validate_rule("field", "x", [{"pattern": "("}])


class TestCustomValidators:
    @pytest.mark.asyncio
    async def test_sync_message(self):
        rule = {"validator": lambda v: None if v == "ok" else "must be ok"}

        assert await validate_rule("f", "ok", [rule]) is None
        assert (await validate_rule("f", "no", [rule])).message == "must be ok"

    @pytest.mark.asyncio
    async def test_async_false(self):
        async def never(value):
            return False

        result = await validate_rule("f", "x", [{"validator": never, "message": "taken"}])

        assert result.message == "taken"

    @pytest.mark.asyncio
    async def test_rule_violation_is_data(self):
        def check(value):
            raise RuleViolation("already in use")

        result = await validate_rule("username", "bob", [{"validator": check}])

        assert result.message == "already in use"
        assert result.field_name == "username"

    @pytest.mark.asyncio
    async def test_runs_on_empty_value(self):
        result = await validate_rule("f", None, [{"validator": lambda v: v is not None}])

        assert result.message == "f is invalid"

    @pytest.mark.asyncio
    async def test_other_exceptions_propagate(self):
        def broken(value):
            raise KeyError("lookup")

        with pytest.raises(KeyError):
            await validate_rule("f", "x", [{"validator": broken}])
