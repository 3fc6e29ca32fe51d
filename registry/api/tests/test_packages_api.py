# coding: utf-8

import hashlib
import json

from fastapi.testclient import TestClient

from conftest import auth_headers
from registry_api.impl.packages_api import get_packages_service
from registry_api.repo import get_version_record


def _create(client: TestClient, name: str = "left-pad", owner: str = "user-1", **fields):
    payload = {"name": name, **fields}
    return client.request("POST", "/packages", headers=auth_headers(owner), json=payload)


def _upload(client: TestClient, name: str, version: str, content: bytes, owner: str = "user-1", **fields):
    data = {"version": version, **fields}
    return client.request(
        "POST",
        f"/packages/{name}/versions",
        headers=auth_headers(owner),
        data=data,
        files={"file": (f"{name}.pkg", content, "application/octet-stream")},
    )


def _drain(client: TestClient) -> None:
    client.portal.call(get_packages_service().drain)


def test_create_package(client: TestClient):
    """Test case for create_package

    Create a package
    """
    response = _create(client, description="pads strings", keywords=["pad"], homepage="https://example.com")

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "left-pad"
    assert body["owner_id"] == "user-1"
    assert body["keywords"] == ["pad"]

    duplicate = _create(client, owner="user-2")
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "conflict"


def test_create_package_requires_token(client: TestClient):
    response = client.request("POST", "/packages", json={"name": "left-pad"})
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"

    response = client.request(
        "POST",
        "/packages",
        headers={"Authorization": "Bearer not-a-jwt"},
        json={"name": "left-pad"},
    )
    assert response.status_code == 401


def test_create_package_validation(client: TestClient):
    response = _create(client, name="")
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"

    response = _create(client, homepage="ftp://example.com")
    assert response.status_code == 400

    response = _create(client, description="x" * 501)
    assert response.status_code == 400

    response = _create(client, name="stats")
    assert response.status_code == 400
    assert client.get("/packages/stats").json()["total_packages"] == 0


def test_get_package(client: TestClient):
    """Test case for get_package

    Get package detail
    """
    _create(client)
    _upload(client, "left-pad", "1.0.0", b"abc")

    response = client.request("GET", "/packages/left-pad")

    assert response.status_code == 200
    body = response.json()
    assert [item["version"] for item in body["versions"]] == ["1.0.0"]

    assert client.request("GET", "/packages/missing").status_code == 404


def test_update_package(client: TestClient):
    """Test case for update_package

    Update package metadata
    """
    _create(client, description="old", license="MIT")

    response = client.request(
        "PUT",
        "/packages/left-pad",
        headers=auth_headers("user-1"),
        json={"description": "new", "license": None},
    )
    assert response.status_code == 200
    assert response.json()["description"] == "new"
    assert response.json()["license"] == "MIT"

    forbidden = client.request(
        "PUT",
        "/packages/left-pad",
        headers=auth_headers("user-2"),
        json={"description": "mine now"},
    )
    assert forbidden.status_code == 403


def test_left_pad_download(client: TestClient):
    """Test case for download_package_version

    Download a package version
    """
    _create(client)
    upload = _upload(client, "left-pad", "1.0.0", b"abc", dependencies=json.dumps({"dep": "1.x"}))
    assert upload.status_code == 201
    assert upload.json()["dependencies"] == {"dep": "1.x"}

    response = client.request(
        "GET",
        "/packages/left-pad/1.0.0/download",
        headers={"User-Agent": "registry-tests"},
    )

    assert response.status_code == 200
    assert response.content == b"abc"
    assert response.headers["X-Package-Hash"] == hashlib.sha256(b"abc").hexdigest()
    assert response.headers["X-Package-Name"] == "left-pad"
    assert response.headers["X-Package-Version"] == "1.0.0"
    assert response.headers["Content-Length"] == "3"
    assert response.headers["Content-Disposition"] == "attachment; filename=left-pad-1.0.0.pkg"

    _drain(client)
    assert get_version_record("left-pad", "1.0.0")["download_count"] == 1


def test_upload_package_version_errors(client: TestClient):
    """Test case for upload_package_version

    Publish a package version
    """
    _create(client)
    assert _upload(client, "left-pad", "1.0.0", b"abc").status_code == 201

    assert _upload(client, "left-pad", "1.0.0", b"xyz").status_code == 409
    assert _upload(client, "left-pad", "2.0.0", b"abc", owner="user-2").status_code == 403
    assert _upload(client, "missing", "1.0.0", b"abc").status_code == 404
    assert _upload(client, "left-pad", "", b"abc").status_code == 400
    assert _upload(client, "left-pad", "3.0.0", b"").status_code == 201
    assert _upload(client, "left-pad", "4.0.0", b"abc", dependencies="[1]").status_code == 400

    anonymous = client.request(
        "POST",
        "/packages/left-pad/versions",
        data={"version": "5.0.0"},
        files={"file": ("left-pad.pkg", b"abc", "application/octet-stream")},
    )
    assert anonymous.status_code == 401


def test_list_package_versions(client: TestClient):
    """Test case for list_package_versions

    List package versions
    """
    _create(client)
    for label in ("1.0.0", "1.1.0", "2.0.0"):
        _upload(client, "left-pad", label, b"abc")

    response = client.request(
        "GET",
        "/packages/left-pad/versions",
        params=[("page", 1), ("page_size", 2)],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["total_pages"] == 2
    assert [item["version"] for item in body["versions"]] == ["2.0.0", "1.1.0"]

    assert client.request("GET", "/packages/left-pad/versions", params=[("page", 0)]).status_code == 400


def test_private_package_download(client: TestClient):
    _create(client, is_private=True)
    _upload(client, "left-pad", "1.0.0", b"abc")

    assert client.request("GET", "/packages/left-pad/1.0.0/download").status_code == 403
    assert client.request(
        "GET",
        "/packages/left-pad/1.0.0/download",
        headers=auth_headers("user-2"),
    ).status_code == 403

    owner = client.request(
        "GET",
        "/packages/left-pad/1.0.0/download",
        headers=auth_headers("user-1"),
    )
    assert owner.status_code == 200
    assert owner.content == b"abc"


def test_get_download_url(client: TestClient):
    """Test case for get_download_url

    Get a presigned download URL
    """
    _create(client)
    _upload(client, "left-pad", "1.0.0", b"abc")

    response = client.request("GET", "/packages/left-pad/1.0.0/download-url")

    assert response.status_code == 200
    body = response.json()
    assert body["expires_in"] == 3600
    assert "left-pad-1.0.0.pkg" in body["download_url"]
    assert client.request("GET", "/packages/left-pad/9.9.9/download-url").status_code == 404


def test_delete_package_version(client: TestClient):
    """Test case for delete_package_version

    Delete a package version
    """
    _create(client)
    _upload(client, "left-pad", "1.0.0", b"abc")

    forbidden = client.request("DELETE", "/packages/left-pad/1.0.0", headers=auth_headers("user-2"))
    assert forbidden.status_code == 403

    response = client.request("DELETE", "/packages/left-pad/1.0.0", headers=auth_headers("user-1"))
    assert response.status_code == 200
    assert response.json()["message"]
    _drain(client)

    assert client.request("GET", "/packages/left-pad/1.0.0/download").status_code == 404


def test_delete_package(client: TestClient):
    """Test case for delete_package

    Delete a package and all of its versions
    """
    _create(client)
    _upload(client, "left-pad", "1.0.0", b"abc")

    assert client.request("DELETE", "/packages/left-pad").status_code == 401
    response = client.request("DELETE", "/packages/left-pad", headers=auth_headers("user-1"))
    assert response.status_code == 200
    _drain(client)

    assert client.request("GET", "/packages/left-pad").status_code == 404
    assert client.request("GET", "/packages/left-pad/1.0.0/download").status_code == 404
    assert _create(client, owner="user-2").status_code == 201


def test_search_packages(client: TestClient):
    """Test case for search_packages

    Search packages
    """
    for index in range(15):
        _create(client, name=f"pkg-{index:02d}", description="matching")

    response = client.request(
        "GET",
        "/packages",
        params=[("query", "matching"), ("page", 2), ("page_size", 10)],
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body["packages"]) == 5
    assert body["total"] == 15
    assert body["total_pages"] == 2

    too_large = client.request("GET", "/packages", params=[("page_size", 101)])
    assert too_large.status_code == 400


def test_get_package_stats(client: TestClient):
    """Test case for get_package_stats

    Registry statistics
    """
    _create(client)
    _upload(client, "left-pad", "1.0.0", b"abc")
    client.request("GET", "/packages/left-pad/1.0.0/download")
    _drain(client)

    response = client.request("GET", "/packages/stats")

    assert response.status_code == 200
    body = response.json()
    assert body["total_packages"] == 1
    assert body["total_versions"] == 1
    assert body["total_downloads"] == 1
    assert body["popular_packages"][0]["name"] == "left-pad"
