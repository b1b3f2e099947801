"""
Tests for the Uvicorn launcher's use of the environment settings.
"""

import uvicorn

from core import config
from scripts import run


def test_launcher_uses_configured_server_settings(monkeypatch):
    calls = []
    monkeypatch.setattr(config, "APP_HOST", "0.0.0.0")
    monkeypatch.setattr(config, "APP_PORT", 9100)
    monkeypatch.setattr(config, "APP_RELOAD", True)
    monkeypatch.setattr(config, "LOG_LEVEL", "DEBUG")
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    run.main()

    app, kwargs = calls[0]
    assert app == "main:app"
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 9100
    assert kwargs["reload"] is True
    assert kwargs["log_level"] == "debug"
    assert kwargs["app_dir"] == run.PROJECT_ROOT
