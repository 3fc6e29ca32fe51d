# coding: utf-8

import hashlib
import io
from datetime import timedelta

import pytest

from registry_api.storage import (
    HashingReader,
    ObjectNotFoundError,
    ObjectStore,
    package_object_key,
    parse_object_key,
)


def test_package_object_key_layout():
    assert package_object_key("left-pad", "1.0.0") == "packages/left-pad/1.0.0/left-pad-1.0.0.pkg"


def test_package_object_key_replaces_separators():
    key = package_object_key("scope/name", "1.0/beta")
    assert key == "packages/scope_name/1.0_beta/scope_name-1.0_beta.pkg"


def test_package_object_key_keeps_backslashes():
    key = package_object_key("a\\b", "1.0\\x")
    assert key == "packages/a\\b/1.0\\x/a\\b-1.0\\x.pkg"


def test_parse_object_key():
    assert parse_object_key("packages/left-pad/1.0.0/left-pad-1.0.0.pkg") == ("left-pad", "1.0.0")
    assert parse_object_key("packages/left-pad/1.0.0") is None
    assert parse_object_key("other/left-pad/1.0.0/left-pad-1.0.0.pkg") is None


def test_hashing_reader_hashes_streamed_bytes():
    reader = HashingReader(io.BytesIO(b"hello world"))
    chunks = []
    while True:
        chunk = reader.read(4)
        if not chunk:
            break
        chunks.append(chunk)
    assert b"".join(chunks) == b"hello world"
    assert reader.bytes_read == 11
    assert reader.hexdigest() == hashlib.sha256(b"hello world").hexdigest()
    assert reader.seekable() is False


def test_put_get_round_trip(object_store: ObjectStore):
    key = package_object_key("left-pad", "1.0.0")
    info = object_store.put(key, io.BytesIO(b"abc"), size=3, metadata={"uploader-id": "user-1"})

    assert info.size == 3
    assert info.sha256 == hashlib.sha256(b"abc").hexdigest()
    assert info.etag
    assert info.metadata["package-name"] == "left-pad"
    assert info.metadata["package-version"] == "1.0.0"
    assert info.metadata["uploader-id"] == "user-1"

    body, stat = object_store.get(key)
    try:
        assert body.read() == b"abc"
    finally:
        body.close()
    assert stat.size == 3


def test_bucket_created_lazily(object_store: ObjectStore):
    client = object_store._client
    buckets = [bucket["Name"] for bucket in client.list_buckets().get("Buckets", [])]
    assert object_store.bucket not in buckets

    assert object_store.exists("packages/missing/1/missing-1.pkg") is False

    buckets = [bucket["Name"] for bucket in client.list_buckets().get("Buckets", [])]
    assert object_store.bucket in buckets


def test_missing_object_raises(object_store: ObjectStore):
    with pytest.raises(ObjectNotFoundError):
        object_store.get("packages/none/0/none-0.pkg")
    with pytest.raises(ObjectNotFoundError):
        object_store.stat("packages/none/0/none-0.pkg")


def test_delete_removes_object(object_store: ObjectStore):
    key = package_object_key("gone", "1")
    object_store.put(key, io.BytesIO(b"x"))
    assert object_store.exists(key)
    object_store.delete(key)
    assert not object_store.exists(key)


def test_listing_groups_by_package(object_store: ObjectStore):
    for name, version in [("alpha", "1.0"), ("alpha", "2.0"), ("beta", "0.1")]:
        object_store.put(package_object_key(name, version), io.BytesIO(b"data"))

    versions = sorted(entry.version for entry in object_store.list_package_versions("alpha"))
    assert versions == ["1.0", "2.0"]

    grouped = object_store.list_all_packages()
    assert sorted(grouped) == ["alpha", "beta"]
    assert grouped["beta"][0].size == 4


def test_presigned_url_targets_key(object_store: ObjectStore):
    key = package_object_key("left-pad", "1.0.0")
    object_store.put(key, io.BytesIO(b"abc"))
    url = object_store.presigned_url(key, timedelta(minutes=5))
    assert "left-pad-1.0.0.pkg" in url
    assert "Expires=300" in url or "X-Amz-Expires=300" in url
