"""Cloud firewall rules for exposed host ports.

A rule allows the service's single protocol:port pair and targets either
the tag every cluster node already carries, or a per-service tag that is
attached only to the node running the proxy deployment.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from .adapters import gcloud
from .cluster import Service
from .core.context import RunContext
from .core.logging import log_event
from .errors import ScriptError
from .naming import node_tag, rule_name
from .nodes import deployment_node

Action = Literal["create", "delete"]

_CLUSTER_TAG = re.compile(r"^gke-.+-node$")


@dataclass(frozen=True)
class Instance:
    name: str
    zone: str
    tags: tuple[str, ...]


def find_instance(ctx: RunContext, node: str) -> Instance | None:
    rows = gcloud.list_json(
        ctx, "compute", "instances", "list", f"--filter=name=({node})", what=f"look up instance {node}"
    )
    for row in rows:
        if row.get("name") != node:
            continue
        zone = str(row.get("zone") or "").rsplit("/", 1)[-1]
        tags = tuple((row.get("tags") or {}).get("items") or [])
        return Instance(name=node, zone=zone, tags=tags)
    return None


def cluster_tag(instance: Instance) -> str:
    for tag in instance.tags:
        if _CLUSTER_TAG.match(tag):
            return tag
    if instance.tags:
        return instance.tags[0]
    raise ScriptError(f"instance {instance.name} carries no network tags to target")


def rule_exists(ctx: RunContext, name: str) -> bool:
    rows = gcloud.list_json(
        ctx, "compute", "firewall-rules", "list", f"--filter=name=({name})", what=f"look up firewall rule {name}"
    )
    return any(row.get("name") == name for row in rows)


def _resolve_instance(ctx: RunContext, service: Service) -> Instance:
    node = deployment_node(ctx, service.name)
    instance = find_instance(ctx, node)
    if instance is None:
        raise ScriptError(
            f"node {node} is not visible to gcloud; check that the active gcloud project and account "
            "match the cluster (gcloud config list)"
        )
    return instance


def _tag_instance(ctx: RunContext, instance: Instance, tag: str, verb: str) -> None:
    gcloud.check(
        ctx,
        "compute",
        "instances",
        verb,
        instance.name,
        f"--tags={tag}",
        f"--zone={instance.zone}",
        what=f"{verb} {tag} on {instance.name}",
    )


def _untag_after_failure(ctx: RunContext, instance: Instance, tag: str) -> None:
    try:
        _tag_instance(ctx, instance, tag, "remove-tags")
    except ScriptError as exc:
        log_event(ctx, "warning", "firewall", "untag", instance=instance.name, tag=tag, error=exc.message)


def create_rule(ctx: RunContext, service: Service, node_only: bool = False) -> str:
    instance = _resolve_instance(ctx, service)
    name = rule_name(service.namespace, service.name)
    tag = node_tag(service.namespace, service.name) if node_only else cluster_tag(instance)
    if rule_exists(ctx, name):
        log_event(ctx, "warning", "firewall", "create", rule=name, status="exists")
        return name
    if node_only:
        _tag_instance(ctx, instance, tag, "add-tags")
    allow = service.first_port.allow_spec
    try:
        gcloud.check(
            ctx,
            "compute",
            "firewall-rules",
            "create",
            name,
            f"--allow={allow}",
            f"--target-tags={tag}",
            f"--description=kube-hostport rule for service {service.namespace}/{service.name}",
            what=f"create firewall rule {name}",
        )
    except ScriptError:
        if node_only:
            _untag_after_failure(ctx, instance, tag)
        raise
    log_event(ctx, "info", "firewall", "create", rule=name, allow=allow, target_tag=tag)
    return name


def delete_rule(ctx: RunContext, service: Service, node_only: bool = False) -> str:
    instance = _resolve_instance(ctx, service)
    name = rule_name(service.namespace, service.name)
    if node_only:
        _tag_instance(ctx, instance, node_tag(service.namespace, service.name), "remove-tags")
    if not rule_exists(ctx, name):
        log_event(ctx, "info", "firewall", "delete", rule=name, status="absent")
        return name
    gcloud.check(ctx, "compute", "firewall-rules", "delete", name, "--quiet", what=f"delete firewall rule {name}")
    log_event(ctx, "info", "firewall", "delete", rule=name)
    return name


def manage_firewall(ctx: RunContext, action: Action, service: Service, node_only: bool = False) -> str:
    if action == "create":
        return create_rule(ctx, service, node_only)
    if action == "delete":
        return delete_rule(ctx, service, node_only)
    raise ValueError(f"unknown firewall action: {action}")
