from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for flat imports like 'handler'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


@pytest.fixture
def stub():
    from tests.stubs import StubUpstream

    return StubUpstream()


@pytest.fixture
def upstream_config():
    from config import UpstreamConfig

    return UpstreamConfig(token="pat-test", base_id="appTEST", table_name="Leads")


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("AIRTABLE_TOKEN", "AIRTABLE_BASE_ID", "AIRTABLE_TABLE_NAME", "PORT", "HOST", "STATIC_DIR", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
