import pytest
from fastapi.testclient import TestClient

from conftest import FakeProvider, docuseal_router, fail
from app.dependencies import get_provider
from app.main import create_app
from common.settings import Settings


def _app(provider, **overrides):
    settings = Settings(api_key="test-key", **overrides)
    app = create_app(settings)
    app.dependency_overrides[get_provider] = lambda: provider
    return app


@pytest.fixture
def provider():
    return FakeProvider(docuseal_router([{"id": 1}, {"id": 2}], deletes={"2": fail(404, {"error": "Not found"})}))


@pytest.fixture
def client(provider):
    return TestClient(_app(provider))


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["service"] == "DocuSeal Signature API"
    assert r.headers["X-Content-Type-Options"] == "nosniff"


def test_missing_api_key_is_500_before_any_call(provider):
    app = create_app(Settings(api_key=None))
    app.dependency_overrides[get_provider] = lambda: provider
    r = TestClient(app).get("/api/docuseal/submissions", params={"name": "x"})

    assert r.status_code == 500
    assert r.json()["error"] == "DocuSeal API key not configured"
    assert provider.calls == []


def test_search_requires_name(client):
    r = client.get("/api/docuseal/submissions")
    assert r.status_code == 400
    assert r.json()["error"] == "The 'name' query parameter is required."


def test_search_returns_matches(client):
    r = client.get("/api/docuseal/submissions", params={"name": "contract-42"})
    assert r.status_code == 200
    assert r.json() == [{"id": 1}, {"id": 2}]


def test_search_not_found():
    c = TestClient(_app(FakeProvider(docuseal_router([]))))
    r = c.get("/api/docuseal/submissions", params={"name": "nothing"})
    assert r.status_code == 404
    assert r.json()["error"] == "No matching submissions found"


def test_get_by_name_returns_full_record(client, provider):
    r = client.get("/api/docuseal/submissions/contract-42")
    assert r.status_code == 200
    assert r.json() == {"id": 1, "status": "pending"}
    assert provider.calls[-1][:2] == ("GET", "/submissions/1")


def test_get_by_name_provider_error_uses_upstream_status():
    c = TestClient(_app(FakeProvider(docuseal_router([], lookup=fail(401, {"error": "Unauthorized"})))))
    r = c.get("/api/docuseal/submissions/contract-42")
    assert r.status_code == 401
    assert r.json() == {"error": {"error": "Unauthorized"}, "message": "Failed to fetch submissions by name."}


def test_purge_is_200_with_partial_failures(client):
    r = client.delete("/api/docuseal/submissions", params={"name": "contract-42"})
    assert r.status_code == 200
    deleted = r.json()["deleted"]
    assert [(d["id"], d["status"]) for d in deleted] == [(1, "fulfilled"), (2, "rejected")]
    assert deleted[1]["reason"]["status"] == 404


def test_submit_agreement(client, provider, submit_request):
    r = client.post("/api/docuseal/submit-agreement-with-signatures", json=submit_request)
    assert r.status_code == 200
    body = r.json()
    assert body["submission"]["id"] == 99
    assert [d["status"] for d in body["deleted"]] == ["fulfilled", "rejected"]
    assert provider.calls[0][3]["q"] == "contract-42"


def test_submit_agreement_create_failure(submit_request):
    provider = FakeProvider(docuseal_router([{"id": 1}], create=fail(422, {"error": "bad pdf"})))
    r = TestClient(_app(provider)).post("/api/docuseal/submit-agreement-with-signatures", json=submit_request)
    assert r.status_code == 422
    body = r.json()
    assert body["message"] == "Failed to create new submission."
    assert body["error"] == {"error": "bad pdf"}
    assert body["deleted"][0]["id"] == 1


def test_submit_agreement_lookup_failure(submit_request):
    provider = FakeProvider(docuseal_router([], lookup=fail(500)))
    r = TestClient(_app(provider)).post("/api/docuseal/submit-agreement-with-signatures", json=submit_request)
    assert r.status_code == 500
    assert r.json()["message"] == "Failed to fetch submissions for deletion."
    assert "deleted" not in r.json()


def test_submit_agreement_rejects_missing_id(client, provider, submit_request):
    del submit_request["id"]
    r = client.post("/api/docuseal/submit-agreement-with-signatures", json=submit_request)
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request"
    assert provider.calls == []


def test_unexpected_error_is_generic_500(submit_request):
    def boom(method, endpoint, body, params):
        raise KeyError("internal detail")

    app = _app(FakeProvider(boom))
    r = TestClient(app, raise_server_exceptions=False).get("/api/docuseal/submissions/abc")
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error", "message": "An unexpected error occurred."}


def test_rate_limit_returns_429(provider):
    app = _app(provider, rate_limit_window_ms=61_000, rate_limit_max_requests=2)
    c = TestClient(app)
    from rate_limit.limiter import get_limiter
    get_limiter("api", window_ms=61_000, max_requests=2).reset()

    assert c.get("/api/docuseal/submissions", params={"name": "a"}).status_code == 200
    assert c.get("/api/docuseal/submissions", params={"name": "a"}).status_code == 200
    r = c.get("/api/docuseal/submissions", params={"name": "a"})
    assert r.status_code == 429
    assert "Too many requests" in r.json()["error"]
    assert int(r.headers["Retry-After"]) > 0
    assert c.get("/health").status_code == 200


def test_oversized_body_is_413(provider):
    c = TestClient(_app(provider, max_body_bytes=10))
    r = c.post("/api/docuseal/submit-agreement-with-signatures", content=b"x" * 100,
               headers={"Content-Type": "application/json"})
    assert r.status_code == 413


@pytest.mark.parametrize("blank", ["", "   "])
def test_submit_agreement_rejects_blank_id(provider, submit_request, blank):
    submit_request["id"] = blank
    r = TestClient(_app(provider)).post("/api/docuseal/submit-agreement-with-signatures", json=submit_request)
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request"
    assert provider.calls_for("DELETE") == []
    assert provider.calls == []
