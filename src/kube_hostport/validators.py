from __future__ import annotations

from .cluster import CLUSTER_IP, LOAD_BALANCER, NODE_PORT, Service, get_service
from .core.context import RunContext
from .errors import ScriptError


def require_service(ctx: RunContext, name: str) -> Service:
    return get_service(ctx, name)


def _require_port(service: Service) -> None:
    if not service.ports:
        raise ScriptError(f"service {service.name} has no ports to expose")


def require_bindable(service: Service) -> Service:
    if service.type == LOAD_BALANCER:
        raise ScriptError(f"service {service.name} is already of type {LOAD_BALANCER}; nothing to bind")
    if service.type == NODE_PORT:
        raise ScriptError(
            f"service {service.name} is of type {NODE_PORT}, which is not supported; "
            f"use a {CLUSTER_IP} service instead"
        )
    _require_port(service)
    return service


def require_upgradable(service: Service) -> Service:
    if service.type != CLUSTER_IP:
        raise ScriptError(f"service {service.name} must be of type {CLUSTER_IP} to upgrade (found {service.type})")
    _require_port(service)
    return service


def require_downgradable(service: Service) -> Service:
    if service.type != LOAD_BALANCER:
        raise ScriptError(
            f"service {service.name} must be of type {LOAD_BALANCER} to downgrade (found {service.type})"
        )
    return service
