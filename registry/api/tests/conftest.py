# coding: utf-8

import os
import tempfile
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="registry-tests-"))

os.environ["REGISTRY_DATABASE_URL"] = f"sqlite:///{(_TEST_DIR / 'registry.db').as_posix()}"
os.environ["REGISTRY_S3_BUCKET"] = "registry-test-packages"
os.environ["REGISTRY_S3_REGION"] = "us-east-1"
os.environ["REGISTRY_JWT_SECRET"] = "registry-test-secret"
os.environ.pop("REGISTRY_S3_ENDPOINT_URL", None)
os.environ.pop("REGISTRY_S3_ACCESS_KEY", None)
os.environ.pop("REGISTRY_S3_SECRET_KEY", None)
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

import jwt  # noqa: E402
import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from moto import mock_aws  # noqa: E402

from registry_api.db import Base, engine  # noqa: E402
from registry_api.main import app as application  # noqa: E402
from registry_api.services.packages_service import PackagesService  # noqa: E402
from registry_api.storage import ObjectStore, get_object_store  # noqa: E402

JWT_SECRET = "registry-test-secret"


def make_token(sub: str, username: str | None = None) -> str:
    return jwt.encode({"sub": sub, "username": username or sub}, JWT_SECRET, algorithm="HS256")


def auth_headers(sub: str = "user-1", username: str | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, username)}"}


@pytest.fixture(autouse=True)
def _reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    engine.dispose()


@pytest.fixture(autouse=True)
def object_store() -> ObjectStore:
    with mock_aws():
        get_object_store.cache_clear()
        yield get_object_store()
        get_object_store.cache_clear()


@pytest.fixture
def service(object_store: ObjectStore) -> PackagesService:
    return PackagesService(store=object_store)


@pytest.fixture
def app() -> FastAPI:
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client
