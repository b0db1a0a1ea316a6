# -*- coding: utf-8 -*-
"""
Tests for composed step schemas.

Tests cover:
- Single-field and cross-field rules
- Pure error merging and leak detection
- Composite and all-of schemas
"""

import inspect

import pytest

from services.exceptions import SchemaOwnershipError
from services.validation import (
    AllOfSchema, CallableSchema, CompositeStepSchema, RequiredFieldsSchema, StepSchema,
    ValidationResult, cross_field_rule, field_rule, merge_errors,
)

OWNED = frozenset({"start", "end"})


def _is_int(value):
    return str(value).isdigit()


class TestRules:
    """Test rule builders."""

    def test_field_rule_skips_blank_values(self):
        rule = field_rule("start", _is_int, "Whole number please")

        assert rule.check({}) == {}
        assert rule.check({"start": "x"}) == {"start": "Whole number please"}

    def test_field_rule_can_check_blank_values(self):
        rule = field_rule("start", lambda value: value is not None, "Needed", skip_blank=False)

        assert rule.check({}) == {"start": "Needed"}

    def test_cross_field_rule_reads_other_fields(self):
        rule = cross_field_rule(
            "end", lambda values: int(values["end"]) >= int(values["start"]), "End before start",
        )

        assert rule.fields == frozenset({"end"})
        assert rule.check({"start": "5", "end": "3"}) == {"end": "End before start"}
        assert rule.check({"start": "1", "end": "3"}) == {}


class TestMergeErrors:
    """Test the merge function."""

    def test_first_message_wins(self):
        merged = merge_errors([
            (frozenset({"start"}), {"start": "first"}),
            (frozenset({"start"}), {"start": "second"}),
            (frozenset({"end"}), {"end": "other"}),
        ])

        assert merged == {"start": "first", "end": "other"}

    def test_leaked_field_raises(self):
        with pytest.raises(SchemaOwnershipError) as exc_info:
            merge_errors([(frozenset({"start"}), {"end": "not declared"})], owner="dates")

        assert exc_info.value.step_id == "dates"
        assert exc_info.value.fields == ["end"]


class TestCompositeStepSchema:
    """Test composite schemas."""

    def test_runs_every_rule(self):
        schema = CompositeStepSchema([
            field_rule("start", _is_int, "Start must be a number"),
            field_rule("end", _is_int, "End must be a number"),
        ])

        result = schema.validate({"start": "a", "end": "b"}, OWNED)

        assert result.errors == {"start": "Start must be a number", "end": "End must be a number"}

    def test_rule_on_unowned_field_is_a_wiring_error(self):
        schema = CompositeStepSchema([field_rule("email", _is_int, "nope")], name="dates")

        with pytest.raises(SchemaOwnershipError):
            schema.validate({}, OWNED)

    def test_declared_fields(self):
        schema = CompositeStepSchema([
            field_rule("start", _is_int, "x"),
            cross_field_rule("end", lambda values: True, "y"),
        ])

        assert schema.declared_fields == OWNED


class TestAllOfSchema:
    """Test all-of schemas."""

    def test_combines_sync_results(self):
        schema = AllOfSchema(
            RequiredFieldsSchema(["start"]),
            CompositeStepSchema([field_rule("end", _is_int, "End must be a number")]),
        )

        result = schema.validate({"end": "x"}, OWNED)

        assert set(result.errors) == {"start", "end"}

    def test_first_schema_message_wins(self):
        schema = AllOfSchema(
            RequiredFieldsSchema(["start"], message="required"),
            CallableSchema(lambda values: {"start": "later message"}),
        )

        assert schema.validate({}, OWNED).errors == {"start": "required"}

    @pytest.mark.asyncio
    async def test_returns_awaitable_when_any_part_is_async(self):
        async def remote(values):
            return {"end": "Slot taken"}

        schema = AllOfSchema(RequiredFieldsSchema(["start"]), CallableSchema(remote))

        outcome = schema.validate({"start": "1"}, OWNED)
        result = await outcome

        assert result.errors == {"end": "Slot taken"}

    def test_failing_part_closes_earlier_async_outcomes(self):
        class Pending(StepSchema):
            def validate(self, values, owned_fields):
                self.outcome = self._check()
                return self.outcome

            async def _check(self):
                return ValidationResult()

        class Broken(StepSchema):
            def validate(self, values, owned_fields):
                raise RuntimeError("rule library unavailable")

        pending = Pending()
        schema = AllOfSchema(pending, Broken())

        with pytest.raises(RuntimeError, match="rule library unavailable"):
            schema.validate({}, OWNED)

        assert inspect.getcoroutinestate(pending.outcome) == inspect.CORO_CLOSED

    def test_async_callable_not_started_when_a_later_part_fails(self):
        started = []

        async def remote(values):
            started.append(values)
            return {}

        def broken(values):
            raise RuntimeError("boom")

        schema = AllOfSchema(CallableSchema(remote), CallableSchema(broken))

        with pytest.raises(RuntimeError):
            schema.validate({"start": "1"}, OWNED)

        assert started == []
