"""
Tests for core data models — identity, config values, summaries, results.
"""

import pytest
from pydantic import ValidationError

from stackauto.core.models import (
    ConfigValue,
    OutputValue,
    StackIdentity,
    UpdateSummary,
    UpResult,
    fully_qualified_stack_name,
)


class TestStackIdentity:
    def test_fully_qualified_name(self):
        assert fully_qualified_stack_name("o", "p", "s") == "o/p/s"

    def test_fully_qualified_name_keeps_parts_verbatim(self):
        assert fully_qualified_stack_name("acme", "web-app", "prod") == "acme/web-app/prod"

    def test_qualified_name_property(self):
        ident = StackIdentity(organization="acme", project="web", stack="dev")
        assert ident.qualified_name == "acme/web/dev"
        assert str(ident) == "acme/web/dev"

    def test_parse(self):
        ident = StackIdentity.parse("acme/web/dev")
        assert ident.organization == "acme"
        assert ident.project == "web"
        assert ident.stack == "dev"

    @pytest.mark.parametrize("bad", ["dev", "acme/dev", "a/b/c/d", "acme//dev", ""])
    def test_parse_rejects_malformed(self, bad):
        with pytest.raises(ValueError):
            StackIdentity.parse(bad)

    def test_frozen(self):
        ident = StackIdentity(organization="acme", project="web", stack="dev")
        with pytest.raises(ValidationError):
            ident.stack = "prod"


class TestConfigValue:
    def test_defaults_to_plain(self):
        assert ConfigValue(value="x").secret is False

    def test_from_engine_json(self):
        val = ConfigValue.model_validate({"value": "s3cr3t", "secret": True})
        assert val.value == "s3cr3t"
        assert val.secret is True


class TestUpdateSummary:
    def test_parses_camel_case(self):
        summary = UpdateSummary.model_validate({
            "kind": "update",
            "startTime": 100,
            "endTime": 200,
            "message": "deploy",
            "result": "succeeded",
            "version": 7,
            "resourceChanges": {"create": 2, "same": 5},
            "config": {"aws:region": {"value": "us-west-2", "secret": False}},
        })
        assert summary.start_time == 100
        assert summary.end_time == 200
        assert summary.version == 7
        assert summary.succeeded
        assert summary.config["aws:region"].value == "us-west-2"

    def test_accepts_snake_case(self):
        summary = UpdateSummary(kind="destroy", start_time=1, end_time=2)
        assert summary.start_time == 1

    def test_defaults(self):
        summary = UpdateSummary(kind="preview")
        assert summary.result == "not-started"
        assert summary.message == ""
        assert summary.resource_changes is None
        assert summary.deployment is None
        assert not summary.succeeded

    def test_change_count(self):
        summary = UpdateSummary(kind="update", resource_changes={"create": 2, "delete": 1})
        assert summary.change_count("create") == 2
        assert summary.change_count("delete") == 1
        assert summary.change_count("replace") == 0

    def test_change_count_without_changes(self):
        assert UpdateSummary(kind="update").change_count("create") == 0

    def test_change_count_for_unlisted_kind(self):
        summary = UpdateSummary.model_validate(
            {"kind": "update", "resourceChanges": {"discard": 3, "create": 1}}
        )
        assert summary.change_count("discard") == 3
        assert summary.change_count("create") == 1

    def test_unknown_fields_ignored(self):
        summary = UpdateSummary.model_validate({"kind": "update", "somethingNew": True})
        assert summary.kind == "update"

    def test_rejects_unknown_kind(self):
        with pytest.raises(ValidationError):
            UpdateSummary.model_validate({"kind": "teleport"})

    def test_frozen(self):
        summary = UpdateSummary(kind="update")
        with pytest.raises(ValidationError):
            summary.version = 3

    def test_serializes_with_aliases(self):
        data = UpdateSummary(kind="update", start_time=5).model_dump(by_alias=True)
        assert data["startTime"] == 5
        assert "resourceChanges" in data


class TestResults:
    def test_up_result_defaults(self):
        result = UpResult()
        assert result.stdout == ""
        assert result.summary is None
        assert result.outputs == {}

    def test_output_value(self):
        out = OutputValue(value={"nested": [1, 2]}, secret=True)
        assert out.value == {"nested": [1, 2]}
        assert out.secret
