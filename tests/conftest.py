import pytest

import config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Isolate every test from CLIPCHAT_* variables and the cached Config."""
    for field_name in ("SERVER_HOST", "SERVER_PORT", "REQUEST_TIMEOUT", "TEMPERATURE", "N_PREDICT"):
        monkeypatch.delenv(f"CLIPCHAT_{field_name}", raising=False)
    config.reset_config()
    yield
    config.reset_config()
