from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable

from ..core.context import RunContext
from ..core.process import CommandResult, run_command
from ..errors import ScriptError

DEFAULT_TIMEOUT_SECONDS = 300


@dataclass(frozen=True)
class CliAdapter:
    tool: str
    resolve_bin: Callable[[RunContext], str]

    def argv(self, ctx: RunContext, *args: str) -> list[str]:
        return [self.resolve_bin(ctx), *[str(a) for a in args]]

    def run(
        self,
        ctx: RunContext,
        *args: str,
        input_text: str | None = None,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> CommandResult:
        return run_command(self.argv(ctx, *args), input_text=input_text, timeout_seconds=timeout_seconds, ctx=ctx)

    def check(self, ctx: RunContext, *args: str, input_text: str | None = None, what: str = "") -> CommandResult:
        result = self.run(ctx, *args, input_text=input_text)
        if not result.ok:
            raise ScriptError(describe_failure(self.tool, what or " ".join(args), result))
        return result

    def json(self, ctx: RunContext, *args: str, what: str = "") -> Any:
        result = self.check(ctx, *args, what=what)
        try:
            return json.loads(result.stdout or "null")
        except json.JSONDecodeError as exc:
            raise ScriptError(f"{self.tool} returned invalid JSON for {what or ' '.join(args)}: {exc}") from exc


def describe_failure(tool: str, what: str, result: CommandResult) -> str:
    detail = result.combined_output or f"exit code {result.code}"
    return f"{tool} failed: {what}: {detail}"
