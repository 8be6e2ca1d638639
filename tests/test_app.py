from fastapi.testclient import TestClient

from visit_tracker.main import create_app


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"

    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "database": "ok"}


def test_request_id_header_is_returned(client):
    res = client.get("/health")
    assert res.headers.get("X-Request-ID")


def test_unexpected_errors_are_reported_without_details(settings, blob_store):
    app = create_app(settings, blob_store=blob_store)

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret backend detail")

    with TestClient(app, raise_server_exceptions=False) as client:
        res = client.get("/boom")

    assert res.status_code == 500
    assert "secret" not in res.text
    assert "error" in res.json()


def test_unknown_route_uses_error_shape(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert "error" in res.json()


def test_restart_keeps_data(settings, blob_store):
    with TestClient(create_app(settings, blob_store=blob_store)) as client:
        res = client.post("/auth/register", json={"name": "A", "email": "a@x.com", "password": "pw"})
        assert res.status_code == 201

    with TestClient(create_app(settings, blob_store=blob_store)) as client:
        res = client.post("/auth/login", json={"email": "a@x.com", "password": "pw"})
        assert res.status_code == 200
