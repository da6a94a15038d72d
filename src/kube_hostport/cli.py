from __future__ import annotations

import argparse
import json
import sys

from . import __version__, demo, doctor, workflows
from .config import load_settings
from .core.context import RunContext
from .core.logging import log_event
from .core.output import base_payload
from .core.result import Err, Result
from .errors import ScriptError
from .exit_codes import ERR_INTERNAL, ERR_OPERATION, ERR_USAGE, OK
from .workflows import Options

SERVICE_COMMANDS = {
    "bind": "expose a ClusterIP service on its node host port",
    "unbind": "remove the host-port proxy (and firewall rule) of a service",
    "getip": "print the node IP the service is exposed on",
    "create-firewall": "create the firewall rule for an exposed service",
    "delete-firewall": "delete the firewall rule for an exposed service",
    "upgrade": "promote a bound ClusterIP service to LoadBalancer",
    "downgrade": "demote a LoadBalancer service to ClusterIP and bind it",
}
SKIP_FIREWALL_COMMANDS = {"bind", "unbind", "downgrade"}
NODE_ONLY_COMMANDS = {"bind", "unbind", "create-firewall", "delete-firewall", "upgrade", "downgrade"}


def _version_string() -> str:
    return f"kube-hostport {__version__}"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="kube-hostport",
        description="Expose cluster services on node host ports, and promote them to load balancers.",
    )
    p.add_argument("--version", action="version", version=_version_string())
    p.add_argument("-n", "--namespace", help="namespace of the service (default: current kubectl context)")
    p.add_argument("--config", help="config file path (default: ~/.config/kube-hostport/config.yaml)")
    p.add_argument("--json", action="store_true", help="emit JSON output")
    p.add_argument("--log-json", action="store_true", default=None, help="emit JSON log lines on stderr")
    p.add_argument("--run-id", help="run identifier used in log lines")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable debug logging")
    vg.add_argument("--quiet", action="store_true", help="only log warnings and errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    for name, help_text in SERVICE_COMMANDS.items():
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("service", help="service name")
        if name in SKIP_FIREWALL_COMMANDS:
            sp.add_argument("-s", "--skip-firewall", action="store_true", help="do not create or delete firewall rules")
        if name in NODE_ONLY_COMMANDS:
            sp.add_argument(
                "--firewall-node-only",
                action="store_true",
                help="target only the node running the proxy instead of all cluster nodes",
            )

    sub.add_parser("demo", help="deploy a sample service and bind it")
    sub.add_parser("demo_cleanup", help="unbind and remove the sample service")
    sub.add_parser("version", help="print the tool version")
    sub.add_parser("doctor", help="check that kubectl and gcloud are usable")
    return p


def _options(ns: argparse.Namespace) -> Options:
    return Options(
        skip_firewall=bool(getattr(ns, "skip_firewall", False)),
        firewall_node_only=bool(getattr(ns, "firewall_node_only", False)),
    )


def dispatch(ctx: RunContext, ns: argparse.Namespace) -> Result[object, ScriptError] | None:
    opts = _options(ns)
    if ns.cmd == "bind":
        return workflows.bind(ctx, ns.service, opts)
    if ns.cmd == "unbind":
        return workflows.unbind(ctx, ns.service, opts)
    if ns.cmd == "getip":
        return workflows.getip(ctx, ns.service)
    if ns.cmd == "create-firewall":
        return workflows.manage_firewall(ctx, "create", ns.service, opts)
    if ns.cmd == "delete-firewall":
        return workflows.manage_firewall(ctx, "delete", ns.service, opts)
    if ns.cmd == "upgrade":
        return workflows.upgrade(ctx, ns.service, opts)
    if ns.cmd == "downgrade":
        return workflows.downgrade(ctx, ns.service, opts)
    if ns.cmd == "demo":
        demo.run_demo(ctx)
        return None
    if ns.cmd == "demo_cleanup":
        demo.run_demo_cleanup(ctx)
        return None
    raise ScriptError(f"unknown command: {ns.cmd}", ERR_USAGE)


def _report_error(as_json: bool, message: str, code: int) -> None:
    if as_json:
        print(json.dumps(base_payload("fail", error={"message": message, "code": code}), sort_keys=True), file=sys.stderr)
    else:
        print(message, file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    as_json = bool(ns.json)
    try:
        if ns.cmd == "version":
            if as_json:
                print(json.dumps(base_payload(version=__version__), sort_keys=True))
            else:
                print(_version_string())
            return OK
        settings = load_settings(ns.config)
        ctx = RunContext.from_settings(
            settings,
            run_id=ns.run_id,
            verbose=ns.verbose,
            quiet=ns.quiet,
            log_json=ns.log_json,
            output_json=as_json,
            namespace=ns.namespace,
        )
        log_event(ctx, "debug", "cli", "start", cmd=ns.cmd, namespace=ctx.namespace or "")
        if ns.cmd == "doctor":
            payload = doctor.collect(ctx)
            if as_json:
                print(json.dumps(base_payload(**payload), sort_keys=True))
            else:
                print(json.dumps(payload, indent=2, sort_keys=True))
            return OK if payload["status"] == "ok" else ERR_OPERATION
        result = dispatch(ctx, ns)
        if isinstance(result, Err):
            raise result.error
        return OK
    except ScriptError as exc:
        _report_error(as_json, str(exc), exc.code)
        return exc.code
    except Exception as exc:  # pragma: no cover
        _report_error(as_json, f"internal error: {exc}", ERR_INTERNAL)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
