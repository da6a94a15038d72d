"""Scripted walkthrough: deploy a sample app, then bind (or unbind) it."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, TextIO

from . import workflows
from .adapters import kubectl
from .core.context import RunContext
from .core.env import getenv
from .workflows import Options

SAMPLE_DEPLOYMENT = "hello"
SAMPLE_SERVICE = "hello-service"
SAMPLE_IMAGE = "gcr.io/google-samples/hello-app:1.0"
SAMPLE_PORT = 80
SAMPLE_TARGET_PORT = 8080

DEFAULT_COLOR = "\033[1;36m"
DEFAULT_RESET = "\033[0m"


@dataclass(frozen=True)
class Palette:
    command: str
    reset: str

    @classmethod
    def from_env(cls) -> "Palette":
        if getenv("NO_COLOR") is not None:
            return cls("", "")
        return cls(
            getenv("KUBE_HOSTPORT_DEMO_COLOR", DEFAULT_COLOR) or "",
            getenv("KUBE_HOSTPORT_DEMO_RESET", DEFAULT_RESET) or "",
        )


@dataclass(frozen=True)
class DemoCommand:
    display: str
    run: Callable[[], object]


def _kubectl(ctx: RunContext, *args: str) -> DemoCommand:
    return DemoCommand(
        display=" ".join([ctx.kubectl_bin, *args]),
        run=lambda: kubectl.check(ctx, *args),
    )


def _self(display: str, fn: Callable[[], object]) -> DemoCommand:
    return DemoCommand(display=f"kube-hostport {display}", run=fn)


def demo_commands(ctx: RunContext) -> list[DemoCommand]:
    return [
        _kubectl(ctx, "create", "deployment", SAMPLE_DEPLOYMENT, f"--image={SAMPLE_IMAGE}"),
        _kubectl(
            ctx,
            "expose",
            "deployment",
            SAMPLE_DEPLOYMENT,
            f"--name={SAMPLE_SERVICE}",
            f"--port={SAMPLE_PORT}",
            f"--target-port={SAMPLE_TARGET_PORT}",
        ),
        _kubectl(ctx, "rollout", "status", f"deployment/{SAMPLE_DEPLOYMENT}", "--timeout=120s"),
        _self(f"bind {SAMPLE_SERVICE}", lambda: workflows.unwrap(workflows.bind(ctx, SAMPLE_SERVICE, Options()))),
    ]


def demo_cleanup_commands(ctx: RunContext) -> list[DemoCommand]:
    return [
        _self(f"unbind {SAMPLE_SERVICE}", lambda: workflows.unwrap(workflows.unbind(ctx, SAMPLE_SERVICE, Options()))),
        _kubectl(ctx, "delete", "service", SAMPLE_SERVICE),
        _kubectl(ctx, "delete", "deployment", SAMPLE_DEPLOYMENT),
    ]


def run_script(commands: list[DemoCommand], palette: Palette | None = None, out: TextIO | None = None) -> None:
    palette = palette or Palette.from_env()
    stream = out or sys.stdout
    for command in commands:
        stream.write(f"{palette.command}$ {command.display}{palette.reset}\n")
        stream.flush()
        command.run()


def run_demo(ctx: RunContext) -> None:
    run_script(demo_commands(ctx))


def run_demo_cleanup(ctx: RunContext) -> None:
    run_script(demo_cleanup_commands(ctx))
