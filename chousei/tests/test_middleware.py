import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient

from chousei.middleware import HTTPLogMiddleware


def _app(**kwargs):
    app = FastAPI()
    app.add_middleware(HTTPLogMiddleware, **kwargs)

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    return app


def test_echoes_request_id():
    client = TestClient(_app())
    res = client.get("/ping", headers={"X-Request-ID": "abc123"})
    assert res.status_code == 200
    assert res.headers["X-Request-ID"] == "abc123"


def test_generates_request_id():
    res = TestClient(_app()).get("/ping")
    assert len(res.headers["X-Request-ID"]) == 12


def test_slow_requests_logged_as_warning(caplog):
    client = TestClient(_app(slow_ms=0))
    with caplog.at_level(logging.DEBUG, logger="chousei.http"):
        client.get("/ping")
    ends = [r for r in caplog.records if "http.request end" in r.getMessage()]
    assert ends and ends[0].levelno == logging.WARNING
