from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .logging import log_event

if TYPE_CHECKING:
    from .context import RunContext


@dataclass(frozen=True)
class CommandResult:
    code: int
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def ok(self) -> bool:
        return self.code == 0

    @property
    def combined_output(self) -> str:
        return (self.stdout + self.stderr).strip()


def run_command(
    cmd: list[str],
    input_text: str | None = None,
    timeout_seconds: int = 0,
    ctx: RunContext | None = None,
) -> CommandResult:
    started = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            input=input_text,
            text=True,
            capture_output=True,
            check=False,
            timeout=(timeout_seconds if timeout_seconds > 0 else None),
        )
        result = CommandResult(
            code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except subprocess.TimeoutExpired as exc:
        result = CommandResult(
            code=124,
            stdout=(exc.stdout or "") if isinstance(exc.stdout, str) else "",
            stderr=f"command timed out after {timeout_seconds}s",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except FileNotFoundError:
        result = CommandResult(
            code=127,
            stdout="",
            stderr=f"command not found: {cmd[0]}",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    if ctx is not None:
        log_event(
            ctx,
            "debug" if result.code == 0 else "info",
            "process",
            "run-command",
            command=" ".join(cmd),
            code=result.code,
            duration_ms=result.duration_ms,
        )
    return result
