"""Tests for generator configuration and schema file loading."""

import json

import pytest
from pydantic import ValidationError
from hash_with import (
    GeneratorConfig, PolicyKind, SchemaLoadError,
    compile_schema, config_from_env, load_config, load_record_schema, load_record_schemas
)


class TestGeneratorConfig:

    def test_defaults(self):
        config = GeneratorConfig()

        assert config.method_name == "__hash_into__"
        assert config.state_name == "state"
        assert config.collect_all_errors is True
        assert config.max_workers is None

    def test_from_env(self):
        config = config_from_env({
            "HASH_WITH_METHOD_NAME": "hash_into",
            "HASH_WITH_COLLECT_ALL_ERRORS": "false",
            "HASH_WITH_MAX_WORKERS": "4",
            "HASH_WITH_STATE_NAME": "",
        })

        assert config.method_name == "hash_into"
        assert config.collect_all_errors is False
        assert config.max_workers == 4
        assert config.state_name == "state"

    @pytest.mark.parametrize("bad", [
        {"method_name": "not-valid"},
        {"method_name": "def"},
        {"state_name": "lambda"},
        {"state_name": "self"},
        {"max_workers": 0},
    ])
    def test_invalid_values(self, bad):
        with pytest.raises(ValidationError):
            GeneratorConfig(**bad)

    def test_load_config(self, tmp_path):
        path = tmp_path / "generator.json"
        path.write_text(json.dumps({"state_name": "h"}))

        assert load_config(path).state_name == "h"

    def test_load_config_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")


class TestLoadRecordSchema:

    def test_single_record(self, tmp_path):
        path = tmp_path / "brightness.json"
        path.write_text(json.dumps({
            "name": "Brightness",
            "fields": [{"name": "inner", "type": "float", "directives": ["hash_with(self.inner.hex())"]}]
        }))

        schema = load_record_schema(path)
        plan = compile_schema(schema)

        assert schema.fields[0].declared_type == "float"
        assert plan.steps[0].policy.kind == PolicyKind.EXPRESSION
        assert plan.steps[0].policy.payload == "self.inner.hex()"

    def test_directive_may_be_a_string(self, tmp_path):
        path = tmp_path / "user.json"
        path.write_text(json.dumps({"name": "User", "fields": [{"name": "token", "directives": "hash_without"}]}))

        assert load_record_schema(path).fields[0].raw_directives == ("hash_without",)

    def test_type_defaults_to_any(self, tmp_path):
        path = tmp_path / "r.json"
        path.write_text(json.dumps({"name": "R", "fields": [{"name": "x"}]}))

        assert load_record_schema(path).fields[0].declared_type == "Any"

    def test_records_list(self, tmp_path):
        path = tmp_path / "many.json"
        path.write_text(json.dumps({"records": [{"name": "A"}, {"name": "B", "fields": []}]}))

        assert [r.name for r in load_record_schemas(path)] == ["A", "B"]

    def test_single_record_via_list_loader(self, tmp_path):
        path = tmp_path / "one.json"
        path.write_text(json.dumps({"name": "A"}))

        assert [r.name for r in load_record_schemas(path)] == ["A"]

    @pytest.mark.parametrize("content,reason", [
        ("{not json", "invalid JSON"),
        (json.dumps({"fields": []}), "record name is required"),
        (json.dumps({"name": "R", "fields": {}}), "fields must be a list"),
        (json.dumps({"name": "R", "fields": [{"name": "not valid"}]}), "record 'R'"),
        (json.dumps([1, 2]), "record must be a JSON object"),
        (json.dumps({"name": "R", "fields": [{"name": "class"}]}), "record 'R'"),
    ])
    def test_bad_files(self, tmp_path, content, reason):
        path = tmp_path / "bad.json"
        path.write_text(content)

        with pytest.raises(SchemaLoadError) as exc_info:
            load_record_schema(path)

        assert reason in str(exc_info.value)
        assert exc_info.value.error_code == "SCHEMA_LOAD_FAILED"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaLoadError) as exc_info:
            load_record_schema(tmp_path / "missing.json")

        assert "not found" in str(exc_info.value)
