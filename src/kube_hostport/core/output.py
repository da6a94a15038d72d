from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import RunContext

TOOL = "kube-hostport"


def base_payload(status: str = "ok", **fields: object) -> dict[str, object]:
    return {"schema_version": 1, "tool": TOOL, "status": status, **fields}


def say(ctx: RunContext, message: str, **fields: object) -> None:
    if ctx.output_json:
        print(json.dumps(base_payload(message=message, **fields), sort_keys=True), flush=True)
    else:
        print(message, flush=True)
