from __future__ import annotations

from typing import Any

from ..core.context import RunContext
from ..core.process import CommandResult
from ._base import DEFAULT_TIMEOUT_SECONDS, CliAdapter

_adapter = CliAdapter("kubectl", lambda ctx: ctx.kubectl_bin)


def run(
    ctx: RunContext,
    *args: str,
    input_text: str | None = None,
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
) -> CommandResult:
    return _adapter.run(
        ctx, *ctx.kubectl_namespace_args(), *args, input_text=input_text, timeout_seconds=timeout_seconds
    )


def check(ctx: RunContext, *args: str, input_text: str | None = None, what: str = "") -> CommandResult:
    return _adapter.check(ctx, *ctx.kubectl_namespace_args(), *args, input_text=input_text, what=what)


def get_json(ctx: RunContext, *args: str, what: str = "") -> Any:
    return _adapter.json(ctx, *ctx.kubectl_namespace_args(), "get", *args, "-o", "json", what=what)


def jsonpath(
    ctx: RunContext, kind: str, name: str, path: str, timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
) -> CommandResult:
    return run(ctx, "get", kind, name, "-o", f"jsonpath={path}", timeout_seconds=timeout_seconds)


def global_run(ctx: RunContext, *args: str) -> CommandResult:
    return _adapter.run(ctx, *args)
