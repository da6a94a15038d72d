from __future__ import annotations

import json
import subprocess
from dataclasses import dataclass
from types import SimpleNamespace


@dataclass
class Reply:
    stdout: str = ""
    stderr: str = ""
    code: int = 0
    hang: bool = False


class FakeTools:
    """Stands in for subprocess.run; answers kubectl/gcloud calls by token match.

    A rule matches when all of its tokens appear in the argv; the rule with the
    most tokens wins. Replies queued on a rule are consumed in order and the
    last one repeats.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.inputs: list[str | None] = []
        self.timeouts: list[float | None] = []
        self._rules: list[tuple[tuple[str, ...], list[Reply]]] = []

    def on(
        self, *tokens: str, stdout: str = "", stderr: str = "", code: int = 0, hang: bool = False
    ) -> "FakeTools":
        reply = Reply(stdout, stderr, code, hang)
        for rule_tokens, replies in self._rules:
            if rule_tokens == tokens:
                replies.append(reply)
                return self
        self._rules.append((tokens, [reply]))
        return self

    def clear(self, *tokens: str) -> "FakeTools":
        self._rules = [rule for rule in self._rules if rule[0] != tokens]
        return self

    def __call__(self, cmd, input=None, timeout=None, **_kwargs):  # noqa: A002, ANN001, ANN204
        argv = [str(c) for c in cmd]
        self.calls.append(argv)
        self.inputs.append(input)
        self.timeouts.append(timeout)
        best: list[Reply] | None = None
        best_len = -1
        for tokens, replies in self._rules:
            if all(t in argv for t in tokens) and len(tokens) > best_len:
                best, best_len = replies, len(tokens)
        if best is None:
            return SimpleNamespace(returncode=1, stdout="", stderr=f"unexpected command: {' '.join(argv)}")
        reply = best.pop(0) if len(best) > 1 else best[0]
        if reply.hang:
            raise subprocess.TimeoutExpired(argv, timeout)
        return SimpleNamespace(returncode=reply.code, stdout=reply.stdout, stderr=reply.stderr)

    def called(self, *tokens: str) -> list[list[str]]:
        return [c for c in self.calls if all(t in c for t in tokens)]

    def tool_calls(self, tool: str) -> list[list[str]]:
        return [c for c in self.calls if c and c[0] == tool]


def service_json(
    name: str = "hello-service",
    type_: str = "ClusterIP",
    port: int = 80,
    protocol: str = "TCP",
    namespace: str = "default",
    node_port: int | None = None,
) -> str:
    ports: list[dict[str, object]] = [{"protocol": protocol, "port": port, "targetPort": 8080}] if port else []
    if ports and node_port:
        ports[0]["nodePort"] = node_port
    return json.dumps(
        {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": {"name": name, "namespace": namespace},
            "spec": {"type": type_, "ports": ports},
        }
    )


def pods_json(
    node: str | None = "node-1", deployment: str = "hello-service-hostport", terminating: bool = False
) -> str:
    if node is None:
        return json.dumps({"items": []})
    metadata: dict[str, str] = {"name": f"{deployment}-abc12"}
    if terminating:
        metadata["deletionTimestamp"] = "2026-10-19T10:00:00Z"
    spec = {"nodeName": node} if node else {}
    return json.dumps({"items": [{"metadata": metadata, "spec": spec}]})


def instances_json(node: str = "node-1", tags: list[str] | None = None, zone: str = "us-central1-a") -> str:
    tags = ["gke-demo-cluster-1a2b3c4d-node"] if tags is None else tags
    return json.dumps(
        [
            {
                "name": node,
                "zone": f"https://www.googleapis.com/compute/v1/projects/demo/zones/{zone}",
                "tags": {"items": tags},
            }
        ]
    )


def script_bound_service(
    fake: FakeTools, type_: str = "ClusterIP", rule_exists: bool = False, instances: str | None = None
) -> FakeTools:
    """Script a healthy cluster where hello-service can be bound on node-1."""
    fake.on("get", "service", "hello-service", "json", stdout=service_json(type_=type_))
    fake.on("create", "-f", "-", stdout="deployment.apps/hello-service-hostport created\n")
    fake.on("get", "deployment", "hello-service-hostport", stdout="1")
    fake.on("get", "pods", "-l", "run=hello-service-hostport", stdout=pods_json())
    fake.on("get", "node", "node-1", stdout="203.0.113.10")
    fake.on("compute", "instances", "list", stdout=instances_json() if instances is None else instances)
    fake.on("compute", "instances", "add-tags")
    fake.on("compute", "instances", "remove-tags")
    rules = [{"name": "default-hello-service-rule"}] if rule_exists else []
    fake.on("compute", "firewall-rules", "list", stdout=json.dumps(rules))
    fake.on("compute", "firewall-rules", "create")
    fake.on("compute", "firewall-rules", "delete")
    fake.on("delete", "deployment", "hello-service-hostport")
    return fake
