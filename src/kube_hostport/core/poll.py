"""Bounded polling for externally driven state changes."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PollPolicy:
    interval_seconds: float = 1.0
    ceiling_seconds: float = 120.0
    backoff: float = 1.0
    max_interval_seconds: float | None = None


DEFAULT_POLICY = PollPolicy()


def poll_until(
    probe: Callable[[], T | None],
    policy: PollPolicy = DEFAULT_POLICY,
    sleep: Callable[[float], None] = time.sleep,
    on_attempt: Callable[[int, float], None] | None = None,
) -> T | None:
    """Call `probe` until it returns a truthy value or the ceiling is spent.

    The probe runs once up front and again after every sleep. Elapsed time is
    the sum of the sleeps, so the wait never exceeds `ceiling_seconds`.
    Returns the probe's value, or None on timeout.
    """
    elapsed = 0.0
    delay = policy.interval_seconds
    attempt = 0
    while True:
        attempt += 1
        value = probe()
        if on_attempt is not None:
            on_attempt(attempt, elapsed)
        if value:
            return value
        remaining = policy.ceiling_seconds - elapsed
        if remaining <= 0:
            return None
        wait = min(delay, remaining)
        sleep(wait)
        elapsed += wait
        delay = delay * policy.backoff
        if policy.max_interval_seconds is not None:
            delay = min(delay, policy.max_interval_seconds)
