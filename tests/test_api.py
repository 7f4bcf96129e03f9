# tests/test_api.py

from review_proxy.application.auth_service import hash_password
from review_proxy.errors import UpstreamFetchError, UpstreamSubmitError
from review_proxy.infrastructure.persistence import AdminCredential


def test_product_reviews_endpoint(client):
    resp = client.get("/api/product-reviews", params={"handle": "version-h1"})
    assert resp.status_code == 200, "/api/product-reviews failed"

    result = resp.json()
    assert [r["id"] for r in result["reviews"]] == [1, 2, 3]
    assert result["stats"]["average"] == "4.0"
    assert result["stats"]["count"] == 3
    assert result["stats"]["distribution"] == {"1": 0, "2": 0, "3": 1, "4": 1, "5": 1}

    maria = result["reviews"][1]
    assert maria["author"] == "Maria Lopez"
    assert "facialHairProbability=0" in maria["profile_pic"]


def test_product_reviews_requires_handle(client):
    resp = client.get("/api/product-reviews")

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing handle"}


def test_product_reviews_upstream_failure(client, judgeme):
    judgeme.fetch_error = UpstreamFetchError("Invalid api token", detail={"message": "Invalid api token"})

    resp = client.get("/api/product-reviews", params={"handle": "version-h1"})

    assert resp.status_code == 502
    assert resp.json()["details"] == {"message": "Invalid api token"}


def test_toggle_pin_twice(client, pin_store):
    client.post("/api/toggle-pin", json={"id": 42, "action": "pin"})
    resp = client.post("/api/toggle-pin", json={"id": 42, "action": "pin"})

    assert resp.status_code == 200
    assert resp.json() == {"status": "success", "pinned_ids": [42]}
    assert pin_store.ids == {42}


def test_pinned_review_is_flagged(client):
    client.post("/api/toggle-pin", json={"id": 2, "action": "pin"})

    reviews = client.get("/api/product-reviews", params={"handle": "version-h1"}).json()["reviews"]

    assert [r["is_pinned"] for r in reviews] == [False, True, False]


def test_toggle_pin_missing_fields(client):
    resp = client.post("/api/toggle-pin", json={"action": "pin"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing id or action"}


def test_login_wrong_password(client, credential_store):
    credential_store.admin = AdminCredential(username="admin", password=hash_password("s3cret"))

    resp = client.post("/api/login", json={"username": "admin", "password": "wrong"})

    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_login_missing_fields(client):
    resp = client.post("/api/login", json={"username": "admin"})

    assert resp.status_code == 400


def test_login_and_verify_token(client):
    token = client.post("/api/login", json={"username": "admin", "password": "admin123"}).json()["token"]

    resp = client.get("/api/verify-token", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.json() == {"valid": True, "username": "admin"}


def test_verify_token_missing(client):
    resp = client.get("/api/verify-token")

    assert resp.status_code == 401
    assert resp.json() == {"error": "Access token required"}


def test_verify_token_invalid(client):
    resp = client.get("/api/verify-token", headers={"Authorization": "Bearer not.a.token"})

    assert resp.status_code == 403
    assert resp.json() == {"error": "Invalid or expired token"}


def test_submit_review(client, judgeme):
    body = {
        "name": "Ana Ruiz",
        "email": "ana@example.com",
        "rating": 5,
        "title": "Love it",
        "body": "Great fit",
        "product_handle": "version-h1",
        "pictures": ["https://cdn.example.com/a.jpg", {"url": "https://cdn.example.com/b.jpg"}],
    }

    resp = client.post("/api/submit-review", json=body, headers={"X-Forwarded-For": "::ffff:198.51.100.4, 10.0.0.1"})

    assert resp.status_code == 200
    result = resp.json()
    assert result["status"] == "success"
    assert len(result["uploaded_images"]) == 2
    assert result["is_processing"] is True

    payload = judgeme.submitted[0]
    assert payload["ip_addr"] == "198.51.100.4"
    assert payload["id"] == 9972195066142
    assert payload["rating"] == 5


def test_submit_review_accepts_handle_alias(client, judgeme):
    body = {"name": "Ana", "email": "ana@example.com", "rating": "4", "handle": "unknown-product"}

    resp = client.post("/api/submit-review", json=body)

    assert resp.status_code == 200
    assert judgeme.submitted[0]["id"] is None


def test_submit_review_missing_fields(client, judgeme):
    resp = client.post("/api/submit-review", json={"name": "Ana", "rating": 5, "handle": "version-h1"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required fields"}
    assert judgeme.submitted == []


def test_submit_review_upstream_rejection(client, judgeme):
    judgeme.submit_error = UpstreamSubmitError("Judge.me API rejected images or review", detail={"error": "bad"})
    body = {
        "name": "Ana",
        "email": "ana@example.com",
        "rating": 5,
        "handle": "version-h1",
        "pictures": ["https://cdn.example.com/a.jpg"],
    }

    resp = client.post("/api/submit-review", json=body)

    assert resp.status_code == 502
    result = resp.json()
    assert result["error"] == "Judge.me API rejected images or review"
    assert result["details"] == {"error": "bad"}
    assert result["debug_urls"] == ["https://res.cloudinary.com/demo/0.jpg"]


def test_invalid_body_is_a_client_error(client):
    resp = client.post("/api/submit-review", json={"pictures": "not-a-list"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request body"


def test_login_page_missing(client):
    assert client.get("/").status_code == 404


def test_login_page_served(client, settings):
    settings.storage.public_dir.mkdir(parents=True)
    (settings.storage.public_dir / "login.html").write_text("<html>login</html>")

    resp = client.get("/")

    assert resp.status_code == 200
    assert "login" in resp.text
