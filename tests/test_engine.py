"""
Tests for the pure engine helpers — flag building, output reconciliation,
history parsing.
"""

import pytest

from stackauto.core.engine.flags import (
    EXEC_KIND,
    build_destroy_args,
    build_preview_args,
    build_refresh_args,
    build_up_args,
)
from stackauto.core.engine.history import current_summary, parse_history
from stackauto.core.engine.outputs import (
    SECRET_SENTINEL,
    parse_output_view,
    reconcile_outputs,
)
from stackauto.core.errors import CommandOutputError
from stackauto.core.models.options import (
    DestroyOptions,
    PreviewOptions,
    RefreshOptions,
    UpOptions,
)

from tests.conftest import HISTORY_JSON


# ── Flags ────────────────────────────────────────────────────────────


class TestUpArgs:
    def test_defaults(self):
        assert build_up_args() == [
            "up", "--yes", "--skip-preview", "--exec-kind", "auto.local",
        ]

    def test_empty_options_contribute_nothing(self):
        assert build_up_args(UpOptions()) == build_up_args()

    def test_targets_only(self):
        args = build_up_args(UpOptions(target=["urn:a", "urn:b"]))
        assert args == [
            "up", "--yes", "--skip-preview",
            "--target", "urn:a", "--target", "urn:b",
            "--exec-kind", "auto.local",
        ]

    def test_parallel_zero_is_omitted(self):
        assert "--parallel" not in build_up_args(UpOptions(parallel=0))

    def test_parallel(self):
        args = build_up_args(UpOptions(parallel=10))
        i = args.index("--parallel")
        assert args[i + 1] == "10"

    def test_empty_message_is_omitted(self):
        assert "--message" not in build_up_args(UpOptions(message=""))

    def test_exec_kind_always_last(self):
        args = build_up_args(UpOptions(message="m", parallel=2))
        assert args[-2:] == ["--exec-kind", EXEC_KIND]
        preview = build_preview_args(PreviewOptions(target=["t"]))
        assert preview[-2:] == ["--exec-kind", "auto.local"]

    def test_fixed_order(self):
        args = build_up_args(UpOptions(
            parallel=3,
            target_dependents=True,
            target=["t1"],
            replace=["r1"],
            expect_no_changes=True,
            message="m",
        ))
        flags = [a for a in args if a.startswith("--")]
        assert flags == [
            "--yes", "--skip-preview",
            "--message", "--expect-no-changes", "--replace", "--target",
            "--target-dependents", "--parallel", "--exec-kind",
        ]

    def test_repeated_flags_keep_input_order(self):
        args = build_up_args(UpOptions(replace=["z", "a", "m"]))
        values = [args[i + 1] for i, a in enumerate(args) if a == "--replace"]
        assert values == ["z", "a", "m"]


class TestPreviewArgs:
    def test_defaults(self):
        assert build_preview_args() == ["preview", "--exec-kind", "auto.local"]

    def test_no_yes_or_skip_preview(self):
        args = build_preview_args(PreviewOptions(message="x"))
        assert "--yes" not in args
        assert "--skip-preview" not in args

    def test_all_fields(self):
        args = build_preview_args(PreviewOptions(
            message="m", expect_no_changes=True, replace=["r"], target=["t"],
            target_dependents=True, parallel=2,
        ))
        assert args == [
            "preview",
            "--message", "m",
            "--expect-no-changes",
            "--replace", "r",
            "--target", "t",
            "--target-dependents",
            "--parallel", "2",
            "--exec-kind", "auto.local",
        ]


class TestRefreshArgs:
    def test_defaults(self):
        assert build_refresh_args() == ["refresh", "--yes", "--skip-preview"]

    def test_no_exec_kind(self):
        args = build_refresh_args(RefreshOptions(target=["t"], parallel=1))
        assert "--exec-kind" not in args
        assert "--target-dependents" not in args
        assert "--replace" not in args


class TestDestroyArgs:
    def test_defaults(self):
        assert build_destroy_args() == ["destroy", "--yes", "--skip-preview"]

    def test_fields(self):
        args = build_destroy_args(DestroyOptions(
            message="bye", target=["t"], target_dependents=True, parallel=0,
        ))
        assert args == [
            "destroy", "--yes", "--skip-preview",
            "--message", "bye",
            "--target", "t",
            "--target-dependents",
        ]
        assert "--exec-kind" not in args


# ── Outputs ──────────────────────────────────────────────────────────


class TestReconcileOutputs:
    def test_secret_marked_from_masked_view(self):
        outputs = reconcile_outputs(
            {"a": "x", "b": SECRET_SENTINEL},
            {"a": "x", "b": "hunter2"},
        )
        assert outputs["a"].value == "x"
        assert outputs["a"].secret is False
        assert outputs["b"].value == "hunter2"
        assert outputs["b"].secret is True

    def test_plaintext_defines_key_set(self):
        outputs = reconcile_outputs({"only_masked": "v"}, {"plain": 1})
        assert set(outputs) == {"plain"}
        assert outputs["plain"].secret is False

    def test_complex_values(self):
        outputs = reconcile_outputs(
            {"obj": {"k": [1, 2]}},
            {"obj": {"k": [1, 2]}},
        )
        assert outputs["obj"].value == {"k": [1, 2]}

    def test_literal_secret_string_in_plaintext_is_kept(self):
        outputs = reconcile_outputs({"s": SECRET_SENTINEL}, {"s": SECRET_SENTINEL})
        assert outputs["s"].value == SECRET_SENTINEL
        assert outputs["s"].secret is True

    def test_empty(self):
        assert reconcile_outputs({}, {}) == {}


class TestParseOutputView:
    def test_object(self):
        assert parse_output_view('{"a": 1}', "outputs") == {"a": 1}

    def test_invalid_json(self):
        with pytest.raises(CommandOutputError, match="Unable to parse outputs") as exc_info:
            parse_output_view("nope", "outputs")
        assert exc_info.value.raw == "nope"

    def test_not_an_object(self):
        with pytest.raises(CommandOutputError, match="expected an object"):
            parse_output_view("[1, 2]", "outputs")


# ── History ──────────────────────────────────────────────────────────


class TestParseHistory:
    def test_keeps_order(self):
        history = parse_history(HISTORY_JSON)
        assert [h.version for h in history] == [2, 1]
        assert history[0].change_count("same") == 3
        assert history[1].result == "failed"

    @pytest.mark.parametrize("raw", ["[]", "null"])
    def test_empty(self, raw):
        assert parse_history(raw) == []

    def test_invalid_json(self):
        with pytest.raises(CommandOutputError, match="history"):
            parse_history("[{")

    def test_not_an_array(self):
        with pytest.raises(CommandOutputError, match="expected an array"):
            parse_history('{"kind": "update"}')

    def test_invalid_entry(self):
        with pytest.raises(CommandOutputError):
            parse_history('[{"kind": "update", "version": "seven"}]')

    def test_unlisted_change_kinds(self):
        history = parse_history(
            '[{"kind": "import", "result": "succeeded", "version": 3,'
            ' "resourceChanges": {"import": 2, "same": 1, "read": 4, "discard": 1}}]'
        )
        assert history[0].kind == "import"
        assert history[0].change_count("import") == 2
        assert history[0].change_count("read") == 4
        assert history[0].change_count("same") == 1


class TestCurrentSummary:
    def test_first_entry(self):
        history = parse_history(HISTORY_JSON)
        assert current_summary(history) is history[0]

    def test_empty(self):
        assert current_summary([]) is None
