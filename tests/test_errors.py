import sentry_sdk
from prometheus_client import REGISTRY

from hotel_api import telemetry
from hotel_api.api import server


def test_unhandled_error_is_reported_and_rendered(make_client, booking, monkeypatch):
    reported = []
    monkeypatch.setattr(server, "report_exception", reported.append)

    def explode(*a, **kw):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(server, "submit_booking", explode)
    client = make_client(raise_server_exceptions=False)

    r = client.post("/api/book", json=booking)
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "kaboom"}
    assert len(reported) == 1
    assert isinstance(reported[0], RuntimeError)


def test_client_errors_are_not_reported(make_client, monkeypatch):
    reported = []
    monkeypatch.setattr(server, "report_exception", reported.append)
    client = make_client(ready=False)

    assert client.get("/api/book").status_code == 503
    assert client.post("/api/book", json={}).status_code == 503
    assert reported == []


def test_reporting_failure_never_raises(monkeypatch):
    def broken(exc):
        raise ConnectionError("sentry down")

    monkeypatch.setattr(telemetry, "_reporting_on", True)
    monkeypatch.setattr(sentry_sdk, "capture_exception", broken)
    telemetry.report_exception(RuntimeError("boom"))


def test_reporting_disabled_without_dsn():
    assert telemetry.init_error_reporting(None) is False


def test_metrics_endpoint(make_client):
    client = make_client(obs_on=True)
    r = client.get("/metrics/")
    assert r.status_code == 200
    assert "bookings_created_total" in r.text


def test_unhandled_error_keeps_cors_headers(make_client, booking, monkeypatch):
    monkeypatch.setattr(server, "report_exception", lambda exc: None)

    def explode(*a, **kw):
        raise RuntimeError("kaboom")

    monkeypatch.setattr(server, "submit_booking", explode)
    client = make_client(cors_origins=["https://hoteldevang.com"])

    r = client.post(
        "/api/book", json=booking, headers={"Origin": "https://hoteldevang.com"}
    )
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "kaboom"}
    assert r.headers.get("access-control-allow-origin") == "https://hoteldevang.com"


def _created():
    return REGISTRY.get_sample_value("bookings_created_total") or 0.0


def test_counters_skipped_when_metrics_off(make_client, booking):
    before = _created()
    make_client(obs_on=False).post("/api/book", json=booking)
    assert _created() == before


def test_counters_updated_when_metrics_on(make_client, booking):
    before = _created()
    make_client(obs_on=True).post("/api/book", json=booking)
    assert _created() == before + 1
