"""Tests for the hash-emission planner.

Validates:
1. Excluded fields are dropped, everything else keeps declaration order
2. Reordering declared fields reorders the plan identically
3. Empty records give an empty plan
4. Plans and plan hashes are repeatable
5. Batch compilation keeps records independent
"""

import pytest
from hash_with import (
    FieldSchema, RecordSchema, FieldPolicy, ContributionStep, EmissionPlan,
    GeneratorConfig, SchemaResolutionError,
    compile_schema, compile_schemas, compute_plan_hash, plan_contributions, resolve_schema
)


def _record(name, *fields):
    return RecordSchema(
        name=name,
        fields=[FieldSchema(name=n, raw_directives=d) for n, d in fields]
    )


def _steps(plan):
    return [(s.field_name, s.policy) for s in plan.steps]


# ============== TESTS ==============

class TestScenarios:
    """End-to-end schema -> plan scenarios."""

    def test_excluded_then_default(self):
        plan = compile_schema(_record("R", ("a", ("hash_without",)), ("b", ())))
        assert _steps(plan) == [("b", FieldPolicy.default())]

    def test_expression_then_default(self):
        plan = compile_schema(_record("R", ("x", ("hash_with(custom_bits(self.x))",)), ("y", ())))

        assert _steps(plan) == [
            ("x", FieldPolicy.expression("custom_bits(self.x)")),
            ("y", FieldPolicy.default()),
        ]

    def test_external_function(self):
        plan = compile_schema(_record("R", ("f", ('hash_with = "hash_f64_bits"',))))
        assert _steps(plan) == [("f", FieldPolicy.external_function("hash_f64_bits"))]

    def test_conflicting_field_fails(self):
        with pytest.raises(SchemaResolutionError) as exc_info:
            compile_schema(_record("R", ("z", ("hash_with(...)", "hash_without"))))

        assert exc_info.value.fields == ["z"]
        assert exc_info.value.errors[0].kinds == ["Expression", "Excluded"]

    def test_zero_fields(self):
        plan = compile_schema(_record("R"))

        assert plan.steps == ()
        assert plan.is_empty


class TestOrdering:
    """Plan order mirrors declaration order."""

    def test_no_excluded_steps_and_order_kept(self):
        record = _record(
            "R",
            ("e", ()),
            ("d", ("hash_without",)),
            ("c", ("hash_with(self.c)",)),
            ("b", ("hash_without",)),
            ("a", ()),
        )
        plan = compile_schema(record)

        assert plan.field_names == ("e", "c", "a")
        assert all(s.policy != FieldPolicy.excluded() for s in plan.steps)

    def test_reordered_declaration_reorders_plan(self):
        fields = [("x", ()), ("y", ('hash_with = "h"',)), ("z", ("hash_with(self.z)",))]
        forward = compile_schema(_record("R", *fields))
        backward = compile_schema(_record("R", *reversed(fields)))

        assert list(backward.steps) == list(reversed(forward.steps))
        assert compute_plan_hash(forward) != compute_plan_hash(backward)

    def test_duplicate_names_not_collapsed(self):
        plan = plan_contributions("R", resolve_schema(_record("R", ("a", ()), ("a", ()))))
        assert plan.field_names == ("a", "a")


class TestDeterminism:
    """Same schema, same plan."""

    def test_plan_is_repeatable(self):
        record = _record("R", ("a", ()), ("b", ("hash_with(self.b * 2)",)))

        assert compile_schema(record) == compile_schema(record)
        assert compute_plan_hash(compile_schema(record)) == compute_plan_hash(compile_schema(record))

    def test_plan_hash_is_sha256_hex(self):
        plan = EmissionPlan(record_name="R", steps=[
            ContributionStep(field_name="a", policy=FieldPolicy.default())
        ])
        assert len(compute_plan_hash(plan)) == 64

    def test_plan_hash_changes_with_policy(self):
        a = compile_schema(_record("R", ("a", ())))
        b = compile_schema(_record("R", ("a", ("hash_with(self.a)",))))

        assert compute_plan_hash(a) != compute_plan_hash(b)


class TestCompileSchemas:
    """Independent records compiled as a batch."""

    def test_results_keyed_in_input_order(self):
        records = [
            _record("First", ("a", ())),
            _record("Broken", ("z", ("hash_with()",))),
            _record("Last", ("b", ("hash_without",)), ("c", ())),
        ]
        results = compile_schemas(records, GeneratorConfig(max_workers=2))

        assert list(results) == ["First", "Broken", "Last"]
        assert results["First"].field_names == ("a",)
        assert isinstance(results["Broken"], SchemaResolutionError)
        assert results["Last"].field_names == ("c",)

    def test_empty_batch(self):
        assert compile_schemas([]) == {}
