from __future__ import annotations

from .adapters import kubectl
from .core.context import RunContext
from .errors import ScriptError
from .naming import deployment_name, proxy_selector


def require_proxy(ctx: RunContext, service: str) -> str:
    deployment = deployment_name(service)
    result = kubectl.run(ctx, "get", "deployment", deployment, "-o", "name")
    if not result.ok:
        raise ScriptError(
            f"service {service} is not bound: deployment {deployment} not found "
            f"({result.combined_output or f'exit code {result.code}'})"
        )
    return deployment


def deployment_node(ctx: RunContext, service: str) -> str:
    deployment = require_proxy(ctx, service)
    payload = kubectl.get_json(ctx, "pods", "-l", proxy_selector(service), what=f"list pods of {deployment}")
    # terminating pods keep their nodeName until they are gone
    items = [
        item
        for item in (payload or {}).get("items") or []
        if not (item.get("metadata") or {}).get("deletionTimestamp")
    ]
    if not items:
        raise ScriptError(f"no pod found for deployment {deployment}; is the service bound?")
    node = ((items[0].get("spec") or {}).get("nodeName") or "").strip()
    if not node:
        pod = (items[0].get("metadata") or {}).get("name", "?")
        raise ScriptError(
            f"pod {pod} of deployment {deployment} is not scheduled on a node; "
            "use --skip-firewall to unbind without touching the firewall"
        )
    return node


def node_external_ip(ctx: RunContext, node: str) -> str:
    result = kubectl.jsonpath(ctx, "node", node, '{.status.addresses[?(@.type=="ExternalIP")].address}')
    if not result.ok:
        raise ScriptError(f"could not read addresses of node {node}: {result.combined_output}")
    addresses = result.stdout.split()
    if not addresses:
        raise ScriptError(f"node {node} has no external IP address")
    return addresses[0]


def service_ip(ctx: RunContext, service: str) -> str:
    return node_external_ip(ctx, deployment_node(ctx, service))
