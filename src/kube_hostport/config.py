"""Configuration file loading with environment overrides.

Precedence, highest first: command-line flags (applied by the caller),
``KUBE_HOSTPORT_*`` environment variables, the YAML config file, defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .core.env import getenv, getenv_bool
from .errors import ScriptError
from .exit_codes import ERR_CONFIG

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "config.schema.json"
DEFAULT_CONFIG_PATH = Path("~/.config/kube-hostport/config.yaml")

ENV_CONFIG = "KUBE_HOSTPORT_CONFIG"
ENV_OVERRIDES = {
    "namespace": "KUBE_HOSTPORT_NAMESPACE",
    "kubectl": "KUBE_HOSTPORT_KUBECTL",
    "gcloud": "KUBE_HOSTPORT_GCLOUD",
    "proxy_image": "KUBE_HOSTPORT_PROXY_IMAGE",
}
ENV_LOG_JSON = "KUBE_HOSTPORT_LOG_JSON"


@dataclass(frozen=True)
class Settings:
    namespace: str | None = None
    kubectl: str | None = None
    gcloud: str | None = None
    proxy_image: str | None = None
    log_json: bool = False


def load_yaml(path: Path) -> Any:
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def validate_config(payload: dict[str, object]) -> None:
    import jsonschema

    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    jsonschema.validate(payload, schema)


def _resolve_path(explicit: str | None) -> tuple[Path, bool]:
    raw = explicit or getenv(ENV_CONFIG)
    if raw:
        return Path(raw).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def read_config_file(path: Path) -> dict[str, object]:
    import jsonschema
    import yaml

    try:
        data = load_yaml(path)
    except OSError as exc:
        raise ScriptError(f"cannot read config file {path}: {exc}", ERR_CONFIG) from exc
    except yaml.YAMLError as exc:
        raise ScriptError(f"invalid YAML in config file {path}: {exc}", ERR_CONFIG) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ScriptError(f"{path}: root must be mapping", ERR_CONFIG)
    try:
        validate_config(data)
    except jsonschema.ValidationError as exc:
        raise ScriptError(f"{path}: {exc.message}", ERR_CONFIG) from exc
    return data


def load_settings(config_path: str | None = None) -> Settings:
    path, required = _resolve_path(config_path)
    data: dict[str, object] = {}
    if path.is_file():
        data = read_config_file(path)
    elif required:
        raise ScriptError(f"config file not found: {path}", ERR_CONFIG)
    settings = Settings(**data)  # type: ignore[arg-type]
    overrides: dict[str, Any] = {}
    for key, env_name in ENV_OVERRIDES.items():
        value = getenv(env_name)
        if value:
            overrides[key] = value
    if getenv(ENV_LOG_JSON) is not None:
        overrides["log_json"] = getenv_bool(ENV_LOG_JSON)
    return replace(settings, **overrides)
