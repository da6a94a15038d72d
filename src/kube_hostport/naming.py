"""Deterministic names for the resources this tool manages.

Nothing is persisted: a bound service is recognised by the existence of its
proxy deployment, and the firewall rule and node tag are derived the same way.
"""

from __future__ import annotations

DEPLOYMENT_SUFFIX = "-hostport"
RULE_SUFFIX = "-rule"
PROXY_LABEL = "run"


def deployment_name(service: str) -> str:
    return service + DEPLOYMENT_SUFFIX


def rule_name(namespace: str, service: str) -> str:
    return namespace + "-" + service + RULE_SUFFIX


def node_tag(namespace: str, service: str) -> str:
    return namespace + "-" + service


def proxy_selector(service: str) -> str:
    return f"{PROXY_LABEL}={deployment_name(service)}"
