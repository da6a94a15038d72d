from __future__ import annotations

from typing import Any

import yaml

from . import cluster
from .cluster import Service
from .core.context import RunContext
from .core.logging import log_event
from .naming import PROXY_LABEL, deployment_name


def build_proxy_manifest(service: Service, image: str) -> dict[str, Any]:
    port = service.first_port
    name = deployment_name(service.name)
    labels = {PROXY_LABEL: name}
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": name, "namespace": service.namespace, "labels": dict(labels)},
        "spec": {
            "replicas": 1,
            "selector": {"matchLabels": dict(labels)},
            "template": {
                "metadata": {"labels": dict(labels)},
                "spec": {
                    "containers": [
                        {
                            "name": "proxy",
                            "image": image,
                            "args": [port.protocol.lower(), str(port.port), service.name],
                            "ports": [
                                {
                                    "name": "proxy",
                                    "protocol": port.protocol,
                                    "containerPort": port.port,
                                    "hostPort": port.port,
                                }
                            ],
                        }
                    ]
                },
            },
        },
    }


def expose(ctx: RunContext, service: Service) -> str:
    manifest = build_proxy_manifest(service, ctx.proxy_image)
    name = manifest["metadata"]["name"]
    cluster.create_from_manifest(ctx, yaml.safe_dump(manifest, sort_keys=False), what=f"create deployment {name}")
    log_event(ctx, "info", "exposure", "expose", service=service.name, deployment=name, port=service.first_port.port)
    return name


def unexpose(ctx: RunContext, service_name: str) -> str:
    name = deployment_name(service_name)
    cluster.delete_deployment(ctx, name)
    log_event(ctx, "info", "exposure", "unexpose", service=service_name, deployment=name)
    return name
