from __future__ import annotations

import pytest

from poolsnap.shared.config import get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "INDEXING_API_URL",
        "GATEWAY_API_BASE",
        "DEX_API_BASE",
        "HTTP_TIMEOUT_SECONDS",
        "SNAPSHOT_SOURCE",
        "OFFLINE_QUOTER",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.indexing_api_url.endswith("/graphql")
    assert settings.dex_api_base == "https://dex-backend-prod1.defi.gala.com"
    assert settings.http_timeout_seconds == 30.0
    assert settings.snapshot_source == "indexing"
    assert settings.offline_quoter == ""


def test_overrides(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SNAPSHOT_SOURCE", " Gateway ")
    monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "7.5")
    monkeypatch.setenv("OFFLINE_QUOTER", "my_quoter.module:quote")

    settings = get_settings()

    assert settings.snapshot_source == "gateway"
    assert settings.http_timeout_seconds == 7.5
    assert settings.offline_quoter == "my_quoter.module:quote"


def test_unknown_snapshot_source_is_rejected(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SNAPSHOT_SOURCE", "rpc")

    with pytest.raises(ValueError):
        get_settings()
