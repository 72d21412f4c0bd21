import json

import httpx
import pytest

import geolocation
import image_hosting
import marketplace


def _patch_client(monkeypatch, module, handler, **client_kwargs):
    def build(timeout_seconds):
        return httpx.Client(transport=httpx.MockTransport(handler), timeout=timeout_seconds, **client_kwargs)

    monkeypatch.setattr(module, "_build_client", build)


def test_geolocation_lookup(monkeypatch):
    monkeypatch.setenv("GEOLOCATION_URL", "https://geo.test")
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json={"ip": "8.8.8.8", "country_name": "United States", "city": "Mountain View"})

    _patch_client(monkeypatch, geolocation, handler)

    assert geolocation.lookup_visitor("8.8.8.8") == {
        "ip": "8.8.8.8",
        "country": "United States",
        "city": "Mountain View",
    }
    assert seen == ["https://geo.test/8.8.8.8/json/"]


def test_geolocation_skips_private_addresses_and_failures(monkeypatch):
    monkeypatch.setenv("GEOLOCATION_URL", "https://geo.test")

    def handler(request):
        raise httpx.ConnectError("down", request=request)

    _patch_client(monkeypatch, geolocation, handler)

    assert geolocation.lookup_visitor("10.0.0.1") == {}
    assert geolocation.lookup_visitor("testclient") == {}
    assert geolocation.lookup_visitor("8.8.8.8") == {}


@pytest.fixture
def github_env(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
    monkeypatch.setenv("GITHUB_OWNER", "acme")
    monkeypatch.setenv("GITHUB_REPO", "assets")
    monkeypatch.setenv("GITHUB_PATH", "images")
    monkeypatch.setenv("GITHUB_BRANCH", "main")


def test_image_upload(monkeypatch, github_env):
    captured = {}

    def handler(request):
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={"content": {}})

    _patch_client(monkeypatch, image_hosting, handler, base_url="https://api.github.test")

    result = image_hosting.upload_image(b"\x89PNG", "profile_u1_1.png")

    assert result.success is True
    assert result.url == "https://raw.githubusercontent.com/acme/assets/main/images/profile_u1_1.png"
    assert captured["method"] == "PUT"
    assert captured["path"] == "/repos/acme/assets/contents/images/profile_u1_1.png"
    assert captured["body"]["content"] == "iVBORw=="


@pytest.mark.parametrize(
    "status, message",
    [
        (401, "Invalid GitHub token. Check GITHUB_TOKEN."),
        (403, 'GitHub token lacks required permissions. It needs the "repo" scope.'),
        (422, "sha wasn't supplied"),
    ],
)
def test_image_upload_errors(monkeypatch, github_env, status, message):
    _patch_client(
        monkeypatch,
        image_hosting,
        lambda request: httpx.Response(status, json={"message": "sha wasn't supplied"}),
        base_url="https://api.github.test",
    )

    result = image_hosting.upload_image(b"data", "x.png")

    assert result.success is False
    assert result.error == message


def test_image_upload_without_token(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "")

    result = image_hosting.upload_image(b"data", "x.png")

    assert result.success is False
    assert "not configured" in result.error


def test_image_delete_fetches_sha_first(monkeypatch, github_env):
    calls = []

    def handler(request):
        calls.append(request.method)
        if request.method == "GET":
            return httpx.Response(200, json={"sha": "abc123"})
        assert json.loads(request.content)["sha"] == "abc123"
        return httpx.Response(200, json={})

    _patch_client(monkeypatch, image_hosting, handler, base_url="https://api.github.test")

    assert image_hosting.delete_image("profile_u1_1.png") is True
    assert calls == ["GET", "DELETE"]


def test_image_validation_and_naming():
    with pytest.raises(ValueError):
        image_hosting.validate_image("application/pdf", 10)
    with pytest.raises(ValueError):
        image_hosting.validate_image("image/png", image_hosting.MAX_IMAGE_BYTES + 1)
    image_hosting.validate_image("image/jpeg", 1024)

    assert image_hosting.generate_unique_filename("Me.JPG", "u1", now_ms=42) == "profile_u1_42.jpg"


def test_image_routes(client, monkeypatch, owner_headers):
    monkeypatch.setattr(
        "api.image.service.upload_image",
        lambda content, filename: image_hosting.UploadResult(success=True, url=f"https://raw.test/{filename}"),
    )

    resp = client.post(
        "/api/images",
        files={"file": ("me.png", b"\x89PNG", "image/png")},
        headers=owner_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["filename"].startswith("profile_owner-1_")

    bad = client.post("/api/images", files={"file": ("cv.pdf", b"%PDF", "application/pdf")}, headers=owner_headers)
    assert bad.status_code == 400

    assert client.delete("/api/images/profile_owner-2_1.png", headers=owner_headers).status_code == 403


@pytest.fixture
def functions_env(monkeypatch):
    monkeypatch.setenv("MARKETPLACE_FUNCTIONS_URL", "https://functions.test")


def test_marketplace_status(monkeypatch, functions_env):
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"result": {"hasMarketplaceSubscription": True, "plan": "pro", "status": "active"}},
        )

    _patch_client(monkeypatch, marketplace, handler)

    status = marketplace.get_marketplace_status("token-1")

    assert status.is_pro is True
    assert status.has_active_subscription is True
    assert seen == {"auth": "Bearer token-1", "path": "/getMarketplaceStatus", "body": {"data": {}}}


def test_marketplace_error_body(monkeypatch, functions_env):
    _patch_client(
        monkeypatch,
        marketplace,
        lambda request: httpx.Response(400, json={"error": {"message": "No purchase found"}}),
    )

    with pytest.raises(marketplace.MarketplaceError, match="No purchase found"):
        marketplace.get_marketplace_status("token-1")


def test_marketplace_link_refreshes_status(monkeypatch, functions_env):
    calls = []

    def handler(request):
        calls.append(request.url.path)
        if request.url.path == "/linkGitHubMarketplace":
            assert json.loads(request.content) == {"data": {"githubLogin": "octocat"}}
            return httpx.Response(200, json={"result": {"success": True}})
        return httpx.Response(200, json={"result": {"plan": "free"}})

    _patch_client(monkeypatch, marketplace, handler)

    result, status = marketplace.link_github_account("token-1", " octocat ")

    assert result == {"success": True}
    assert status.is_pro is False
    assert calls == ["/linkGitHubMarketplace", "/getMarketplaceStatus"]


def test_marketplace_routes(client, monkeypatch, functions_env):
    _patch_client(
        monkeypatch,
        marketplace,
        lambda request: httpx.Response(200, json={"result": {"plan": "pro"}}),
    )

    assert client.get("/api/marketplace/status").status_code == 401

    resp = client.get("/api/marketplace/status", headers={"Authorization": "Bearer t"})
    assert resp.status_code == 200
    assert resp.json()["is_pro"] is True

    resp = client.post("/api/marketplace/link", json={"github_login": "  "}, headers={"Authorization": "Bearer t"})
    assert resp.status_code == 400


def test_marketplace_unconfigured(monkeypatch):
    monkeypatch.setenv("MARKETPLACE_FUNCTIONS_URL", "")

    with pytest.raises(marketplace.MarketplaceError):
        marketplace.call_function("getMarketplaceStatus", "t")
