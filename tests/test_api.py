import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient as FastAPITestClient
from litestar.testing import TestClient as LitestarTestClient

from pyrecurmail.api import create_app
from pyrecurmail.client import Client
from pyrecurmail.integrations.fastapi import add_pyrecurmail_to_fastapi, create_fastapi_app


@pytest.fixture(params=["litestar", "fastapi"])
def http(request, scheduler):
    if request.param == "litestar":
        app = create_app(Client(scheduler))
        with LitestarTestClient(app=app) as test_client:
            yield test_client
    else:
        app = create_fastapi_app(scheduler)
        with FastAPITestClient(app) as test_client:
            yield test_client


def test_start_email(http, dispatcher):
    response = http.post(
        "/api/start-email",
        json={"recipient": "a@x.com", "subject": "Hi", "content": "body", "intervalMinutes": 1},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["outcome"] == "created"
    assert body["message"] == "Email schedule started. Sending every 1 minute(s) to a@x.com"
    assert dispatcher.calls == [("a@x.com", "Hi", "body")]


def test_start_email_missing_fields(http, dispatcher):
    response = http.post("/api/start-email", json={"recipient": "a@x.com", "subject": "Hi"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing required fields"}
    assert dispatcher.calls == []


def test_start_email_first_send_failure(http, dispatcher):
    dispatcher.fail = True
    response = http.post(
        "/api/start-email",
        json={"recipient": "a@x.com", "subject": "Hi", "content": "body"},
    )
    assert response.status_code == 502
    assert response.json()["outcome"] == "created"

    jobs = http.get("/api/active-jobs").json()
    assert jobs["count"] == 1
    assert jobs["jobs"][0]["lastOutcome"] == "failed"


def test_replace_then_list(http, dispatcher):
    http.post(
        "/api/start-email",
        json={"recipient": "a@x.com", "subject": "Hi", "content": "body"},
    )
    response = http.post(
        "/api/start-email",
        json={"recipient": "a@x.com", "subject": "New", "content": "new", "intervalMinutes": 5},
    )
    assert response.json()["outcome"] == "replaced"

    jobs = http.get("/api/active-jobs").json()
    assert jobs["success"] is True
    assert jobs["count"] == 1
    assert jobs["jobs"][0]["subject"] == "New"
    assert jobs["jobs"][0]["intervalMinutes"] == 5


def test_stop_email(http):
    http.post(
        "/api/start-email",
        json={"recipient": "a@x.com", "subject": "Hi", "content": "body"},
    )
    response = http.post("/api/stop-email", json={"recipient": "a@x.com"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Email schedule to a@x.com stopped"}
    assert http.get("/api/active-jobs").json()["count"] == 0


def test_stop_email_not_found(http):
    response = http.post("/api/stop-email", json={"recipient": "b@x.com"})
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_stop_email_requires_recipient(http):
    response = http.post("/api/stop-email", json={})
    assert response.status_code == 400
    assert response.json()["message"] == "Recipient email is required"


def test_active_jobs_after_stopping_one(http):
    for recipient in ("a", "b"):
        http.post(
            "/api/start-email",
            json={"recipient": recipient, "subject": "Hi", "content": "body"},
        )
    http.post("/api/stop-email", json={"recipient": "a"})

    body = http.get("/api/active-jobs").json()
    assert body["count"] == 1
    assert [job["key"] for job in body["jobs"]] == ["b"]


def test_health(http):
    body = http.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["activeJobCount"] == 0
    assert "timestamp" in body
    assert "uptime" in body


def test_shutdown_clears_jobs(scheduler, registry):
    app = create_app(Client(scheduler))
    with LitestarTestClient(app=app) as test_client:
        test_client.post(
            "/api/start-email",
            json={"recipient": "a@x.com", "subject": "Hi", "content": "body"},
        )
        assert registry.count() == 1
    assert registry.count() == 0


def test_fastapi_plugin_on_existing_app(scheduler):
    app = FastAPI()
    plugin = add_pyrecurmail_to_fastapi(app, scheduler)
    assert app.state.pyrecurmail_client is plugin.get_client()

    with FastAPITestClient(app) as test_client:
        response = test_client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_fastapi_non_finite_interval_is_client_error(scheduler, registry, dispatcher):
    app = create_fastapi_app(scheduler)
    with FastAPITestClient(app) as test_client:
        response = test_client.post(
            "/api/start-email",
            content='{"recipient": "a@x.com", "subject": "Hi", "content": "body", "intervalMinutes": NaN}',
            headers={"content-type": "application/json"},
        )
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert registry.count() == 0
    assert dispatcher.calls == []
