"""Multi-step workflows behind the service commands.

Every workflow is an ordered list of steps. Each step result lands in a
shared state mapping under the step's name; the first failing step ends the
workflow and later steps never run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, cast

from . import cluster, exposure, firewall, nodes, validators, waiters
from .core.context import RunContext
from .core.logging import log_event
from .core.output import say
from .core.result import Err, Ok, Result
from .errors import ScriptError

SETTLE_SECONDS = 2.0

State = dict[str, object]


@dataclass(frozen=True)
class Step:
    name: str
    action: Callable[[State], object]


@dataclass(frozen=True)
class Options:
    skip_firewall: bool = False
    firewall_node_only: bool = False


def run_steps(ctx: RunContext, workflow: str, steps: list[Step]) -> Result[State, ScriptError]:
    state: State = {}
    for step in steps:
        log_event(ctx, "debug", "workflow", "step", workflow=workflow, step=step.name)
        try:
            state[step.name] = step.action(state)
        except ScriptError as exc:
            log_event(ctx, "error", "workflow", "abort", workflow=workflow, step=step.name, code=exc.code)
            return Err(exc)
    log_event(ctx, "info", "workflow", "done", workflow=workflow)
    return Ok(state)


def unwrap(result: Result[State, ScriptError]) -> State:
    if isinstance(result, Err):
        raise result.error
    return result.value


def _service(state: State) -> cluster.Service:
    return cast(cluster.Service, state["service"])


def _service_for_cleanup(ctx: RunContext, name: str) -> cluster.Service:
    try:
        return cluster.get_service(ctx, name)
    except ScriptError as exc:
        namespace = cluster.current_namespace(ctx)
        log_event(
            ctx, "warning", "workflow", "service-missing", service=name, namespace=namespace, error=exc.message
        )
        return cluster.Service(name=name, namespace=namespace, type=cluster.CLUSTER_IP, ports=())


def bind(ctx: RunContext, name: str, opts: Options = Options()) -> Result[State, ScriptError]:
    steps = [
        Step("service", lambda s: validators.require_bindable(validators.require_service(ctx, name))),
        Step("deployment", lambda s: exposure.expose(ctx, _service(s))),
        Step("settle", lambda s: ctx.sleep(SETTLE_SECONDS)),
        Step("available", lambda s: waiters.await_deployment_available(ctx, str(s["deployment"]))),
    ]
    if not opts.skip_firewall:
        steps.append(
            Step("firewall", lambda s: firewall.manage_firewall(ctx, "create", _service(s), opts.firewall_node_only))
        )
    steps += [
        Step("ip", lambda s: nodes.service_ip(ctx, name)),
        Step("report", lambda s: say(ctx, f"Service exposed on {s['ip']}", service=name, ip=s["ip"])),
    ]
    return run_steps(ctx, "bind", steps)


def unbind(ctx: RunContext, name: str, opts: Options = Options()) -> Result[State, ScriptError]:
    steps: list[Step] = []
    if not opts.skip_firewall:
        steps += [
            Step("service", lambda s: _service_for_cleanup(ctx, name)),
            Step("firewall", lambda s: firewall.manage_firewall(ctx, "delete", _service(s), opts.firewall_node_only)),
        ]
    steps.append(Step("deployment", lambda s: exposure.unexpose(ctx, name)))
    return run_steps(ctx, "unbind", steps)


def getip(ctx: RunContext, name: str) -> Result[State, ScriptError]:
    return run_steps(
        ctx,
        "getip",
        [
            Step("ip", lambda s: nodes.service_ip(ctx, name)),
            Step("report", lambda s: say(ctx, str(s["ip"]), service=name, ip=s["ip"])),
        ],
    )


def manage_firewall(ctx: RunContext, action: firewall.Action, name: str, opts: Options = Options()) -> Result[State, ScriptError]:
    return run_steps(
        ctx,
        f"{action}-firewall",
        [
            Step("service", lambda s: validators.require_service(ctx, name)),
            Step("rule", lambda s: firewall.manage_firewall(ctx, action, _service(s), opts.firewall_node_only)),
        ],
    )


def upgrade(ctx: RunContext, name: str, opts: Options = Options()) -> Result[State, ScriptError]:
    unbind_opts = Options(skip_firewall=False, firewall_node_only=opts.firewall_node_only)
    return run_steps(
        ctx,
        "upgrade",
        [
            Step("service", lambda s: validators.require_upgradable(validators.require_service(ctx, name))),
            Step("bound", lambda s: nodes.require_proxy(ctx, name)),
            Step("patch", lambda s: cluster.patch_service_type_load_balancer(ctx, name)),
            Step("ip", lambda s: waiters.await_load_balancer_ip(ctx, name)),
            Step("report", lambda s: say(ctx, f"Service available on {s['ip']}", service=name, ip=s["ip"])),
            Step("unbind", lambda s: unwrap(unbind(ctx, name, unbind_opts))),
        ],
    )


def downgrade(ctx: RunContext, name: str, opts: Options = Options()) -> Result[State, ScriptError]:
    return run_steps(
        ctx,
        "downgrade",
        [
            Step("service", lambda s: validators.require_downgradable(validators.require_service(ctx, name))),
            Step("patch", lambda s: cluster.patch_service_type_cluster_ip(ctx, _service(s))),
            Step("bind", lambda s: unwrap(bind(ctx, name, opts))),
        ],
    )
