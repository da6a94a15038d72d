from __future__ import annotations

import io

from helpers import script_bound_service
from kube_hostport import demo
from kube_hostport.demo import Palette, demo_cleanup_commands, demo_commands, run_script


def test_palette_honours_overrides_and_no_color(monkeypatch) -> None:
    assert Palette.from_env() == Palette(demo.DEFAULT_COLOR, demo.DEFAULT_RESET)
    monkeypatch.setenv("KUBE_HOSTPORT_DEMO_COLOR", "<c>")
    monkeypatch.setenv("KUBE_HOSTPORT_DEMO_RESET", "</c>")
    assert Palette.from_env() == Palette("<c>", "</c>")
    monkeypatch.setenv("NO_COLOR", "1")
    assert Palette.from_env() == Palette("", "")


def test_demo_prints_each_command_before_running_it(ctx, fake_tools) -> None:
    script_bound_service(fake_tools)
    fake_tools.on("create", "deployment", "hello")
    fake_tools.on("expose", "deployment", "hello")
    fake_tools.on("rollout", "status")
    out = io.StringIO()
    run_script(demo_commands(ctx), Palette("", ""), out)
    lines = out.getvalue().splitlines()
    assert lines == [
        f"$ kubectl create deployment hello --image={demo.SAMPLE_IMAGE}",
        "$ kubectl expose deployment hello --name=hello-service --port=80 --target-port=8080",
        "$ kubectl rollout status deployment/hello --timeout=120s",
        "$ kube-hostport bind hello-service",
    ]
    assert fake_tools.calls[0][:3] == ["kubectl", "create", "deployment"]
    assert fake_tools.called("firewall-rules", "create")


def test_demo_cleanup_unbinds_then_removes_sample(ctx, fake_tools) -> None:
    script_bound_service(fake_tools, rule_exists=True)
    fake_tools.on("delete", "service", "hello-service")
    fake_tools.on("delete", "deployment", "hello")
    out = io.StringIO()
    run_script(demo_cleanup_commands(ctx), Palette("[", "]"), out)
    assert out.getvalue().splitlines() == [
        "[$ kube-hostport unbind hello-service]",
        "[$ kubectl delete service hello-service]",
        "[$ kubectl delete deployment hello]",
    ]
    deletes = [c for c in fake_tools.calls if c[:2] == ["kubectl", "delete"]]
    assert deletes == [
        ["kubectl", "delete", "deployment", "hello-service-hostport"],
        ["kubectl", "delete", "service", "hello-service"],
        ["kubectl", "delete", "deployment", "hello"],
    ]
