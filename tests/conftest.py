from __future__ import annotations

import socket
from pathlib import Path

import pytest

from helpers import FakeTools
from kube_hostport.core.context import DEFAULT_PROXY_IMAGE, RunContext

_ALLOWED_MARKERS = {"unit", "integration"}


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture(autouse=True)
def isolated_env(request: pytest.FixtureRequest, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in (
        "KUBE_HOSTPORT_CONFIG",
        "KUBE_HOSTPORT_NAMESPACE",
        "KUBE_HOSTPORT_KUBECTL",
        "KUBE_HOSTPORT_GCLOUD",
        "KUBE_HOSTPORT_PROXY_IMAGE",
        "KUBE_HOSTPORT_LOG_JSON",
        "KUBE_HOSTPORT_DEMO_COLOR",
        "KUBE_HOSTPORT_DEMO_RESET",
        "NO_COLOR",
    ):
        monkeypatch.delenv(name, raising=False)
    if request.node.get_closest_marker("integration"):
        return

    def _blocked(*_args: object, **_kwargs: object) -> socket.socket:
        raise RuntimeError("network disabled in unit tests")

    def _blocked_connect(*_args: object, **_kwargs: object) -> None:
        raise RuntimeError("network disabled in unit tests")

    monkeypatch.setattr(socket, "create_connection", _blocked)
    monkeypatch.setattr(socket.socket, "connect", _blocked_connect)


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def ctx(sleeps: list[float]) -> RunContext:
    return RunContext(
        run_id="test-run",
        namespace=None,
        kubectl_bin="kubectl",
        gcloud_bin="gcloud",
        proxy_image=DEFAULT_PROXY_IMAGE,
        log_json=False,
        verbose=False,
        quiet=True,
        sleep=sleeps.append,
    )


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    fake = FakeTools()
    monkeypatch.setattr("kube_hostport.core.process.subprocess.run", fake)
    return fake
