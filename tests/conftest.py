from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from capture_server.app import app  # noqa: E402


@pytest.fixture
def client():
    app.config.update(TESTING=True)

    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def payload_logging(monkeypatch):
    monkeypatch.setitem(app.config, "CAPTURE_SERVER_LOG_PAYLOADS", True)
