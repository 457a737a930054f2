"""
API tests using FastAPI's TestClient
"""
import json

import pytest
from fastapi.testclient import TestClient

from api import state
from api.main import app

client = TestClient(app)

CSV = (
    "timestamp,ip,method,url,status\n"
    "2024-01-01 10:00:00,10.0.0.1,GET,/items?id=1 UNION SELECT password FROM users,200\n"
    "2024-01-01 10:01:00,10.0.0.2,GET,/index.html,200\n"
    "2024-01-01 10:02:00,10.0.0.3,POST,/comment?text=<script>alert(1)</script>,403\n"
)


@pytest.fixture(autouse=True)
def clean_state():
    state.live_feed.stop()
    state.ingestion.reset()
    state.history.clear()
    yield
    state.live_feed.stop()
    state.ingestion.reset()
    state.history.clear()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["records"] == 0
    assert body["live_feed"] is False


def test_upload_csv():
    response = client.post("/api/ingest", files={"file": ("access.csv", CSV, "text/csv")})
    assert response.status_code == 200
    body = response.json()
    assert body["strategy"] == "tabular"
    assert body["record_count"] == 3
    assert body["analysis"]["score"] == 73
    assert body["analysis"]["risk"] == "Critical"
    assert body["analysis"]["stats"] == {"breaches": 1, "attempts": 1}
    assert [r["attackType"] for r in body["records"]] == ["SQLi", "None", "XSS"]
    assert len(state.history) == 3

    status = client.get("/api/ingest/status").json()
    assert status["state"] == "complete"
    assert status["analysis"]["score"] == 73


def test_upload_json():
    doc = {"logs": [{"sourceIp": "1.2.3.4", "url": "/ok", "statusCode": 200}]}
    response = client.post("/api/ingest", files={"file": ("events.json", json.dumps(doc), "application/json")})
    assert response.status_code == 200
    body = response.json()
    assert body["strategy"] == "structured"
    assert body["analysis"]["risk"] == "Safe"
    assert body["records"][0]["sourceIp"] == "1.2.3.4"


def test_blank_upload_is_rejected():
    response = client.post("/api/ingest", files={"file": ("empty.log", "\n \n", "text/plain")})
    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "Parsing failed. Check format."
    assert len(state.history) == 0

    status = client.get("/api/ingest/status").json()
    assert status["state"] == "error"

    assert client.post("/api/ingest/reset").json()["state"] == "idle"


def test_dashboard_endpoints():
    client.post("/api/ingest", files={"file": ("access.csv", CSV, "text/csv")})

    stats = client.get("/api/dashboard/stats").json()
    assert stats["totalRequests"] == 3
    assert stats["threatsBlocked"] == 1
    assert stats["criticalBreaches"] == 1

    vectors = client.get("/api/dashboard/vectors").json()
    assert vectors == [{"name": "SQLi", "value": 1}, {"name": "XSS", "value": 1}]

    traffic = client.get("/api/dashboard/traffic").json()
    assert len(traffic) == 12

    logs = client.get("/api/dashboard/logs", params={"breach_only": True}).json()
    assert logs["total"] == 1
    assert logs["records"][0]["impact"] == "Breach"

    logs = client.get("/api/dashboard/logs", params={"search": "index"}).json()
    assert logs["total"] == 1
    assert logs["records"][0]["url"] == "/index.html"


def test_clear_history():
    client.post("/api/ingest", files={"file": ("access.csv", CSV, "text/csv")})
    assert client.delete("/api/dashboard/history").json() == {"cleared": True}
    assert client.get("/api/dashboard/stats").json()["totalRequests"] == 0
    assert client.get("/api/dashboard/vectors").json() == []


def test_live_toggle():
    assert client.get("/api/dashboard/live").json() == {"live": False}
    assert client.post("/api/dashboard/live", json={"enabled": True}).json() == {"live": True}
    assert client.post("/api/dashboard/live", json={"enabled": False}).json() == {"live": False}
