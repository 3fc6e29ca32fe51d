# coding: utf-8

from datetime import datetime, timedelta, timezone

import pytest

from registry_api.errors import ConflictError, NotFoundError
from registry_api.repo import (
    count_download_records,
    create_package_record,
    create_version_record,
    delete_package_record,
    delete_version_record,
    get_package_record,
    get_version_record,
    list_download_records,
    list_version_records,
    load_registry_stats,
    package_exists,
    record_download,
    search_package_records,
    update_package_record,
    version_exists,
)


def _package(name: str, **overrides) -> dict:
    fields = {
        "name": name,
        "description": f"{name} description",
        "author": "Ada",
        "homepage": None,
        "repository": None,
        "license": "MIT",
        "keywords": ["util"],
        "is_private": False,
        "owner_id": "user-1",
        "owner_name": "ada",
    }
    fields.update(overrides)
    return create_package_record(**fields)


def _version(package: dict, version: str, **overrides) -> dict:
    fields = {
        "package_id": package["id"],
        "version": version,
        "description": None,
        "changelog": None,
        "dependencies": {"dep": "^1.0"},
        "file_size": 3,
        "file_hash": "a" * 64,
        "storage_key": f"packages/{package['name']}/{version}/{package['name']}-{version}.pkg",
        "is_prerelease": False,
        "uploader_id": package["owner_id"],
        "uploader_name": package["owner_name"],
    }
    fields.update(overrides)
    return create_version_record(**fields)


def test_create_and_get_package():
    created = _package("left-pad")
    assert created["id"]
    assert created["owner_id"] == "user-1"

    fetched = get_package_record("left-pad", include_versions=True)
    assert fetched["name"] == "left-pad"
    assert fetched["keywords"] == ["util"]
    assert fetched["versions"] == []
    assert package_exists("left-pad")
    assert not package_exists("right-pad")


def test_duplicate_package_name_conflicts():
    _package("left-pad")
    with pytest.raises(ConflictError):
        _package("left-pad", owner_id="user-2")


def test_soft_deleted_name_can_be_reused():
    package = _package("left-pad")
    _version(package, "1.0.0")

    keys = delete_package_record(package["id"])

    assert keys == ["packages/left-pad/1.0.0/left-pad-1.0.0.pkg"]
    assert get_package_record("left-pad") is None
    assert get_version_record("left-pad", "1.0.0") is None
    assert delete_package_record(package["id"]) is None

    again = _package("left-pad", owner_id="user-2")
    assert again["id"] != package["id"]


def test_update_is_scoped_to_owner():
    _package("left-pad")
    assert update_package_record("left-pad", "user-2", {"description": "stolen"}) is None

    updated = update_package_record(
        "left-pad",
        "user-1",
        {"description": "", "keywords": [], "is_private": True, "name": "renamed"},
    )
    assert updated["name"] == "left-pad"
    assert updated["description"] == ""
    assert updated["keywords"] == []
    assert updated["is_private"] is True


def test_duplicate_version_conflicts():
    package = _package("left-pad")
    _version(package, "1.0.0")
    assert version_exists(package["id"], "1.0.0")
    with pytest.raises(ConflictError):
        _version(package, "1.0.0", file_hash="b" * 64)
    stored = get_version_record("left-pad", "1.0.0")
    assert stored["file_hash"] == "a" * 64


def test_list_versions_newest_first():
    package = _package("left-pad")
    for label in ("1.0.0", "1.1.0", "2.0.0"):
        _version(package, label)

    records, total = list_version_records(package["id"], page=1, page_size=2)
    assert total == 3
    assert [record["version"] for record in records] == ["2.0.0", "1.1.0"]


def test_record_download_increments_counter():
    package = _package("left-pad")
    version = _version(package, "1.0.0")

    record_download(version["id"], None, "10.0.0.1", "curl/8.0")
    record_download(version["id"], "user-2", "::1", "x" * 900)

    assert get_version_record("left-pad", "1.0.0")["download_count"] == 2
    assert count_download_records(version["id"]) == 2
    rows = list_download_records(version["id"])
    assert {row["user_id"] for row in rows} == {None, "user-2"}
    assert max(len(row["user_agent"]) for row in rows) == 500


def test_record_download_for_missing_version():
    with pytest.raises(NotFoundError):
        record_download(9999, None, None, None)


def test_delete_version_removes_downloads():
    package = _package("left-pad")
    version = _version(package, "1.0.0")
    record_download(version["id"], None, None, None)

    key = delete_version_record(version["id"])

    assert key == version["storage_key"]
    assert get_version_record("left-pad", "1.0.0") is None
    assert count_download_records(version["id"]) == 0
    assert delete_version_record(version["id"]) is None


def test_search_filters_and_pagination():
    _package("left-pad", keywords=["string", "pad"])
    _package("right-pad", author="Grace", license="Apache-2.0")
    _package("secret", is_private=True, description="100% private")

    records, total = search_package_records(query="PAD")
    assert total == 2
    assert [record["name"] for record in records] == ["right-pad", "left-pad"]

    _, total = search_package_records(author="grace")
    assert total == 1
    _, total = search_package_records(keywords="string")
    assert total == 1
    _, total = search_package_records(license="MIT")
    assert total == 2
    _, total = search_package_records(is_private=True)
    assert total == 1
    records, total = search_package_records(query="100%")
    assert total == 1 and records[0]["name"] == "secret"
    _, total = search_package_records(query="%")
    assert total == 1

    records, total = search_package_records(page=2, page_size=2)
    assert total == 3
    assert len(records) == 1


def test_search_matches_each_keyword_on_its_own():
    _package("umlaut", keywords=["Über"])
    _package("letters", keywords=["alpha", "beta"])

    records, total = search_package_records(keywords="über")
    assert total == 1 and records[0]["name"] == "umlaut"
    _, total = search_package_records(query="ÜBER")
    assert total == 1
    _, total = search_package_records(keywords='"')
    assert total == 0
    _, total = search_package_records(keywords='alpha","beta')
    assert total == 0
    _, total = search_package_records(keywords="ha,be")
    assert total == 0
    _, total = search_package_records(keywords="BET")
    assert total == 1


def test_keyword_index_follows_updates_and_deletes():
    package = _package("left-pad", keywords=["string"])
    update_package_record("left-pad", "user-1", {"keywords": ["padding"]})

    _, total = search_package_records(keywords="string")
    assert total == 0
    _, total = search_package_records(keywords="padding")
    assert total == 1

    delete_package_record(package["id"])
    _package("left-pad", keywords=["other"])
    _, total = search_package_records(keywords="padding")
    assert total == 0


def test_search_escapes_underscore():
    _package("a_b")
    _package("axb")
    records, total = search_package_records(query="a_b")
    assert total == 1
    assert records[0]["name"] == "a_b"


def test_registry_stats():
    popular = _package("popular")
    quiet = _package("quiet")
    hot = _version(popular, "1.0.0")
    _version(quiet, "0.1.0")
    for _ in range(3):
        record_download(hot["id"], None, None, None)
    gone = _package("gone")
    gone_version = _version(gone, "1.0.0")
    record_download(gone_version["id"], None, None, None)
    delete_package_record(gone["id"])

    stats = load_registry_stats(10, datetime.now(timezone.utc) - timedelta(days=30))

    assert stats["total_packages"] == 2
    assert stats["total_versions"] == 2
    assert stats["total_downloads"] == 3
    assert stats["recent_downloads"] == 3
    assert stats["popular_packages"][0]["name"] == "popular"
    assert stats["popular_packages"][0]["total_downloads"] == 3
    assert [item["name"] for item in stats["recent_packages"]] == ["quiet", "popular"]
    assert {item["package_name"] for item in stats["recent_versions"]} == {"popular", "quiet"}

    later = load_registry_stats(1, datetime.now(timezone.utc) + timedelta(days=1))
    assert later["recent_downloads"] == 0
    assert len(later["popular_packages"]) == 1
