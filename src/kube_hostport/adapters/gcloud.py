from __future__ import annotations

from typing import Any

from ..core.context import RunContext
from ..core.process import CommandResult
from ._base import CliAdapter

_adapter = CliAdapter("gcloud", lambda ctx: ctx.gcloud_bin)


def run(ctx: RunContext, *args: str) -> CommandResult:
    return _adapter.run(ctx, *args)


def check(ctx: RunContext, *args: str, what: str = "") -> CommandResult:
    return _adapter.check(ctx, *args, what=what)


def list_json(ctx: RunContext, *args: str, what: str = "") -> list[dict[str, Any]]:
    payload = _adapter.json(ctx, *args, "--format=json", what=what)
    return payload if isinstance(payload, list) else []
