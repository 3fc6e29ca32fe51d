# coding: utf-8

import importlib.util
import logging
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "run_registry_api.py"


@pytest.fixture
def launcher():
    spec = importlib.util.spec_from_file_location("run_registry_api", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_parse_args_overrides(launcher):
    args = launcher.parse_args(["--host", "0.0.0.0", "--port", "9001", "--log-level", "debug"])
    assert args.host == "0.0.0.0"
    assert args.port == 9001
    assert args.log_level == "debug"
    assert args.reload is False


def test_configure_logging_quiets_aws_sdk(launcher):
    launcher.configure_logging("trace")
    assert logging.getLogger("uvicorn.access").level == logging.DEBUG
    assert logging.getLogger("botocore").level == logging.WARNING


def test_main_passes_settings_to_uvicorn(launcher, monkeypatch):
    calls = []
    monkeypatch.setattr(launcher.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    launcher.main(["--port", "9100", "--log-level", "info"])

    app, kwargs = calls[0]
    assert app == "registry_api.app:app"
    assert kwargs["port"] == 9100
    assert kwargs["log_level"] == "info"
