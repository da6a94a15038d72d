from __future__ import annotations

from .adapters import kubectl
from .core.context import RunContext
from .core.logging import log_event
from .core.poll import DEFAULT_POLICY, PollPolicy, poll_until
from .errors import ScriptError

PROBE_TIMEOUT_SECONDS = 10


def _available_replicas(ctx: RunContext, deployment: str) -> int:
    result = kubectl.jsonpath(
        ctx, "deployment", deployment, "{.status.availableReplicas}", timeout_seconds=PROBE_TIMEOUT_SECONDS
    )
    if not result.ok:
        return 0
    try:
        return int(result.stdout.strip() or 0)
    except ValueError:
        return 0


def _ingress_ip(ctx: RunContext, service: str) -> str:
    result = kubectl.jsonpath(
        ctx, "service", service, "{.status.loadBalancer.ingress[0].ip}", timeout_seconds=PROBE_TIMEOUT_SECONDS
    )
    return result.stdout.strip() if result.ok else ""


def _progress(ctx: RunContext, what: str, name: str):  # noqa: ANN202
    def _log(attempt: int, elapsed: float) -> None:
        log_event(ctx, "debug", "waiters", what, name=name, attempt=attempt, elapsed_s=elapsed)

    return _log


def await_deployment_available(ctx: RunContext, deployment: str, policy: PollPolicy = DEFAULT_POLICY) -> int:
    log_event(ctx, "info", "waiters", "await-deployment", deployment=deployment)
    replicas = poll_until(
        lambda: _available_replicas(ctx, deployment) or None,
        policy,
        sleep=ctx.sleep,
        on_attempt=_progress(ctx, "await-deployment", deployment),
    )
    if not replicas:
        raise ScriptError(
            f"deployment {deployment} did not become available within {policy.ceiling_seconds:g}s; "
            "another pod may already hold the host port on every schedulable node"
        )
    return replicas


def await_load_balancer_ip(ctx: RunContext, service: str, policy: PollPolicy = DEFAULT_POLICY) -> str:
    log_event(ctx, "info", "waiters", "await-load-balancer", service=service)
    ip = poll_until(
        lambda: _ingress_ip(ctx, service) or None,
        policy,
        sleep=ctx.sleep,
        on_attempt=_progress(ctx, "await-load-balancer", service),
    )
    if not ip:
        raise ScriptError(f"service {service} was not assigned a load-balancer IP within {policy.ceiling_seconds:g}s")
    return ip
