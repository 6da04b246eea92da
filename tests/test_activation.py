"""COM apartment handling around activation. Runs only where comtypes is installed (Windows)."""

import pytest

comtypes = pytest.importorskip("comtypes")

from librarylink.local.supervisor import activation
from librarylink.local.supervisor.models import LaunchError


class FakeManager:
    def __init__(self, pid=None, error=None):
        self.pid = pid
        self.error = error
        self.calls = []

    def ActivateApplication(self, app_id, arguments, options):  # noqa: N802
        self.calls.append((app_id, arguments, options))
        if self.error is not None:
            raise self.error
        return self.pid


@pytest.fixture
def com_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(activation.comtypes, "CoInitializeEx", lambda flags=None: calls.append("init"))
    monkeypatch.setattr(activation.comtypes, "CoUninitialize", lambda: calls.append("uninit"))
    return calls


def test_activation_returns_pid_and_releases_apartment(monkeypatch, com_calls):
    manager = FakeManager(pid=4321)
    monkeypatch.setattr(activation.comtypes, "CoCreateInstance", lambda *args, **kwargs: manager)

    assert activation.activate_application("Foo_123!App") == 4321
    assert manager.calls == [("Foo_123!App", None, activation.AO_NONE)]
    assert com_calls == ["init", "uninit"]

def test_rejected_activation_releases_apartment(monkeypatch, com_calls):
    manager = FakeManager(error=comtypes.COMError(-2147024894, "not found", None))
    monkeypatch.setattr(activation.comtypes, "CoCreateInstance", lambda *args, **kwargs: manager)

    with pytest.raises(LaunchError, match="Failed to activate application"):
        activation.activate_application("Foo_123!App")
    assert com_calls == ["init", "uninit"]

def test_manager_creation_failure_releases_apartment(monkeypatch, com_calls):
    def create(*args, **kwargs):
        raise OSError("class not registered")

    monkeypatch.setattr(activation.comtypes, "CoCreateInstance", create)

    with pytest.raises(LaunchError, match="ApplicationActivationManager"):
        activation.activate_application("Foo_123!App")
    assert com_calls == ["init", "uninit"]
