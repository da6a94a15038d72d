"""Result helpers for workflow execution.

User-facing failures are still `ScriptError`; workflow steps wrap them in
`Err` so a multi-step workflow can stop at the first failure without
unwinding through the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


Result = Ok[T] | Err[E]
