"""
Option → flag translation.

Pure functions from an options object to the engine argument list.
Flags are emitted in a fixed order:

    --message, --expect-no-changes, --replace*, --target*,
    --target-dependents, --parallel, (--exec-kind)

Options left at their defaults contribute nothing. List options emit
one repeated flag per element, in input order.
"""

from __future__ import annotations

from typing import Sequence

from stackauto.core.models.options import (
    DestroyOptions,
    PreviewOptions,
    RefreshOptions,
    UpOptions,
)

UP_BASE_ARGS = ("up", "--yes", "--skip-preview")
PREVIEW_BASE_ARGS = ("preview",)
REFRESH_BASE_ARGS = ("refresh", "--yes", "--skip-preview")
DESTROY_BASE_ARGS = ("destroy", "--yes", "--skip-preview")


# inline programs are rejected before arguments are built
EXEC_KIND = "auto.local"


def _option_flags(
    *,
    message: str | None = None,
    expect_no_changes: bool = False,
    replace: Sequence[str] = (),
    target: Sequence[str] = (),
    target_dependents: bool = False,
    parallel: int | None = None,
) -> list[str]:
    args: list[str] = []
    if message:
        args += ["--message", message]
    if expect_no_changes:
        args.append("--expect-no-changes")
    for urn in replace:
        args += ["--replace", urn]
    for urn in target:
        args += ["--target", urn]
    if target_dependents:
        args.append("--target-dependents")
    # 0 means "engine default", same as leaving it unset
    if parallel:
        args += ["--parallel", str(parallel)]
    return args


def build_up_args(opts: UpOptions | None = None) -> list[str]:
    opts = opts or UpOptions()
    return [
        *UP_BASE_ARGS,
        *_option_flags(
            message=opts.message,
            expect_no_changes=opts.expect_no_changes,
            replace=opts.replace,
            target=opts.target,
            target_dependents=opts.target_dependents,
            parallel=opts.parallel,
        ),
        "--exec-kind",
        EXEC_KIND,
    ]


def build_preview_args(opts: PreviewOptions | None = None) -> list[str]:
    opts = opts or PreviewOptions()
    return [
        *PREVIEW_BASE_ARGS,
        *_option_flags(
            message=opts.message,
            expect_no_changes=opts.expect_no_changes,
            replace=opts.replace,
            target=opts.target,
            target_dependents=opts.target_dependents,
            parallel=opts.parallel,
        ),
        "--exec-kind",
        EXEC_KIND,
    ]


def build_refresh_args(opts: RefreshOptions | None = None) -> list[str]:
    opts = opts or RefreshOptions()
    return [
        *REFRESH_BASE_ARGS,
        *_option_flags(
            message=opts.message,
            expect_no_changes=opts.expect_no_changes,
            target=opts.target,
            parallel=opts.parallel,
        ),
    ]


def build_destroy_args(opts: DestroyOptions | None = None) -> list[str]:
    opts = opts or DestroyOptions()
    return [
        *DESTROY_BASE_ARGS,
        *_option_flags(
            message=opts.message,
            target=opts.target,
            target_dependents=opts.target_dependents,
            parallel=opts.parallel,
        ),
    ]
