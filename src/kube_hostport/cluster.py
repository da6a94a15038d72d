from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .adapters import kubectl
from .core.context import RunContext
from .errors import ScriptError

CLUSTER_IP = "ClusterIP"
NODE_PORT = "NodePort"
LOAD_BALANCER = "LoadBalancer"


@dataclass(frozen=True)
class ServicePort:
    protocol: str
    port: int
    node_port: int | None = None

    @property
    def allow_spec(self) -> str:
        return f"{self.protocol.lower()}:{self.port}"


@dataclass(frozen=True)
class Service:
    name: str
    namespace: str
    type: str
    ports: tuple[ServicePort, ...]

    @property
    def first_port(self) -> ServicePort:
        if not self.ports:
            raise ScriptError(f"service {self.name} has no ports")
        return self.ports[0]

    @classmethod
    def from_manifest(cls, payload: dict[str, Any]) -> "Service":
        metadata = payload.get("metadata") or {}
        spec = payload.get("spec") or {}
        ports = tuple(
            ServicePort(
                protocol=str(p.get("protocol") or "TCP"),
                port=int(p["port"]),
                node_port=int(p["nodePort"]) if p.get("nodePort") else None,
            )
            for p in spec.get("ports") or []
            if "port" in p
        )
        return cls(
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace") or "default"),
            type=str(spec.get("type") or CLUSTER_IP),
            ports=ports,
        )


def get_service(ctx: RunContext, name: str) -> Service:
    result = kubectl.run(ctx, "get", "service", name, "-o", "json")
    if not result.ok:
        raise ScriptError(f"service {name} not found: {result.combined_output or f'exit code {result.code}'}")
    try:
        payload = json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        raise ScriptError(f"could not parse service {name}: {exc}") from exc
    return Service.from_manifest(payload)


def current_namespace(ctx: RunContext) -> str:
    if ctx.namespace:
        return ctx.namespace
    result = kubectl.global_run(ctx, "config", "view", "--minify", "-o", "jsonpath={..namespace}")
    return (result.stdout.strip() if result.ok else "") or "default"


def patch_service_type_load_balancer(ctx: RunContext, name: str) -> None:
    body = json.dumps({"spec": {"type": LOAD_BALANCER}})
    kubectl.check(ctx, "patch", "service", name, "-p", body, what=f"patch service {name} to {LOAD_BALANCER}")


def patch_service_type_cluster_ip(ctx: RunContext, service: Service) -> None:
    name = service.name
    ops: list[dict[str, Any]] = [{"op": "replace", "path": "/spec/type", "value": CLUSTER_IP}]
    if service.ports and service.ports[0].node_port is not None:
        ops.append({"op": "remove", "path": "/spec/ports/0/nodePort"})
    kubectl.check(
        ctx,
        "patch",
        "service",
        name,
        "--type=json",
        "-p",
        json.dumps(ops),
        what=f"patch service {name} to {CLUSTER_IP}",
    )


def create_from_manifest(ctx: RunContext, manifest_yaml: str, what: str) -> None:
    kubectl.check(ctx, "create", "-f", "-", input_text=manifest_yaml, what=what)


def delete_deployment(ctx: RunContext, name: str) -> None:
    kubectl.check(ctx, "delete", "deployment", name, what=f"delete deployment {name}")
