from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from ..config import Settings

DEFAULT_KUBECTL = "kubectl"
DEFAULT_GCLOUD = "gcloud"
DEFAULT_PROXY_IMAGE = "gcr.io/google_containers/proxy-to-service:v2"


@dataclass(frozen=True)
class RunContext:
    run_id: str
    namespace: str | None
    kubectl_bin: str
    gcloud_bin: str
    proxy_image: str
    log_json: bool
    verbose: bool
    quiet: bool
    output_json: bool = False
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def kubectl_namespace_args(self) -> list[str]:
        return ["--namespace", self.namespace] if self.namespace else []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        run_id: str | None = None,
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool | None = None,
        output_json: bool = False,
        namespace: str | None = None,
    ) -> "RunContext":
        default_run = f"hostport-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"
        return cls(
            run_id=run_id or default_run,
            namespace=namespace or settings.namespace,
            kubectl_bin=settings.kubectl or DEFAULT_KUBECTL,
            gcloud_bin=settings.gcloud or DEFAULT_GCLOUD,
            proxy_image=settings.proxy_image or DEFAULT_PROXY_IMAGE,
            log_json=settings.log_json if log_json is None else log_json,
            verbose=verbose,
            quiet=quiet,
            output_json=output_json,
        )
