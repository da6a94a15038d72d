from __future__ import annotations

from .adapters import gcloud, kubectl
from .core.context import RunContext


def collect(ctx: RunContext) -> dict[str, object]:
    kube_version = kubectl.global_run(ctx, "version", "--client", "-o", "json")
    kube_context = kubectl.global_run(ctx, "config", "current-context")
    gcloud_version = gcloud.run(ctx, "version", "--format=json")
    gcloud_project = gcloud.run(ctx, "config", "get-value", "project")
    checks = {
        "kubectl": kube_version.ok,
        "gcloud": gcloud_version.ok,
    }
    return {
        "checks": checks,
        "kubectl_bin": ctx.kubectl_bin,
        "gcloud_bin": ctx.gcloud_bin,
        "kubectl_context": kube_context.stdout.strip() if kube_context.ok else None,
        "gcloud_project": gcloud_project.stdout.strip() if gcloud_project.ok else None,
        "namespace": ctx.namespace,
        "status": "ok" if all(checks.values()) else "fail",
    }
