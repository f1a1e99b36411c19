import os

os.environ.setdefault("SETTINGS_MODE", "test")

from datetime import date

import pytest
from botocore.exceptions import ClientError, NoCredentialsError
from fastapi.testclient import TestClient
from sqlmodel import Session, create_engine, SQLModel
from sqlmodel.pool import StaticPool

from core.db import enable_sqlite_foreign_keys
from core.deps import get_blob_store, get_db
from core.errors import StorageError
from core.storage import LocalBlobStore
from main import app
from api.authors.services import authors
from api.books.services import books
from api.categories.services import categories
from api.shelves.services import shelves
from api.users.services import users


class MockS3Paginator:
    """Mock S3 paginator for list_objects_v2"""

    def __init__(self, client):
        self.client = client

    def paginate(self, Bucket: str, Prefix: str = "", Delimiter: str = ""):
        """Return a single page with the keys under Prefix"""
        self.client.check_error("ListObjectsV2")

        contents = []
        folders = set()
        for key in sorted(self.client.objects.get(Bucket, {})):
            if not key.startswith(Prefix):
                continue
            rest = key[len(Prefix):]
            if Delimiter and Delimiter in rest:
                folders.add(Prefix + rest.split(Delimiter, 1)[0] + Delimiter)
                continue
            contents.append({"Key": key, "Size": len(self.client.objects[Bucket][key])})

        page = {}
        if folders:
            page["CommonPrefixes"] = [{"Prefix": folder} for folder in sorted(folders)]
        if contents:
            page["Contents"] = contents
        yield page


class MockS3Client:
    """Mock S3 client for testing"""

    def __init__(self):
        self.objects = {}  # {bucket: {key: bytes}}
        self.error_mode = None  # For simulating errors

    def simulate_error(self, error_type: str | None):
        """
        Configure client to raise specific errors

        Args:
            error_type: One of "NoSuchBucket", "AccessDenied", "NoCredentialsError"
                        or None to stop failing
        """
        self.error_mode = error_type

    def check_error(self, operation: str):
        if self.error_mode is None:
            return
        if self.error_mode == "NoCredentialsError":
            raise NoCredentialsError()
        messages = {
            "NoSuchBucket": "The specified bucket does not exist",
            "AccessDenied": "Access Denied",
        }
        raise ClientError(
            {"Error": {"Code": self.error_mode, "Message": messages[self.error_mode]}},
            operation,
        )

    def put_object(self, Bucket: str, Key: str, Body: bytes):
        self.check_error("PutObject")
        self.objects.setdefault(Bucket, {})[Key] = Body
        return {}

    def delete_object(self, Bucket: str, Key: str):
        self.check_error("DeleteObject")
        self.objects.get(Bucket, {}).pop(Key, None)
        return {}

    def head_object(self, Bucket: str, Key: str):
        self.check_error("HeadObject")
        if Key not in self.objects.get(Bucket, {}):
            raise ClientError(
                {"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject"
            )
        return {"ContentLength": len(self.objects[Bucket][Key])}

    def get_paginator(self, operation: str):
        """Return a mock paginator"""
        if operation == "list_objects_v2":
            return MockS3Paginator(self)
        raise NotImplementedError(f"Paginator for {operation} not implemented")


class FailingBlobStore(LocalBlobStore):
    """Local blob store whose deletes can be made to fail"""

    def __init__(self, root, public_url: str = "/storage", fail_deletes: bool = False):
        super().__init__(root, public_url)
        self.fail_deletes = fail_deletes

    def delete(self, name: str) -> None:
        if self.fail_deletes:
            raise StorageError(f"Could not delete {name}: simulated failure")
        super().delete(name)


@pytest.fixture(name="session")
def session_fixture():
    engine = enable_sqlite_foreign_keys(create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    ))
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="blobs")
def blobs_fixture(tmp_path):
    """Blob store in a per-test directory"""
    return FailingBlobStore(tmp_path / "blobs", public_url="/test-blobs")


@pytest.fixture(name="mock_s3_client")
def mock_s3_client_fixture():
    """Provide a mock S3 client for testing"""
    return MockS3Client()


@pytest.fixture(name="client")
def client_fixture(session: Session, blobs: LocalBlobStore):
    def get_db_override():
        return session

    def get_blob_store_override():
        return blobs

    app.dependency_overrides[get_db] = get_db_override
    app.dependency_overrides[get_blob_store] = get_blob_store_override

    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="author")
def author_fixture(session: Session):
    return authors.create(session, {"name": "Ursula K. Le Guin"})


@pytest.fixture(name="category")
def category_fixture(session: Session):
    return categories.create(session, {"name": "Fantasy"})


@pytest.fixture(name="shelf")
def shelf_fixture(session: Session):
    return shelves.create(session, {"name": "A1", "location": "Ground floor"})


@pytest.fixture(name="book")
def book_fixture(session: Session, author, category, shelf):
    return books.create(session, {
        "title": "A Wizard of Earthsea",
        "isbn": "9780547773742",
        "publisher": "Parnassus Press",
        "date_published": "1968-11-01",
        "author_id": author.id,
        "category_id": category.id,
        "shelf_id": shelf.id,
    })


@pytest.fixture(name="member")
def member_fixture(session: Session):
    return users.create(session, {"name": "Ged Sparrowhawk", "email": "ged@earthsea.org"})


@pytest.fixture(name="book_fields")
def book_fields_fixture(author, category):
    """Valid create payload for a book"""
    return {
        "title": "The Tombs of Atuan",
        "isbn": "9780689845369",
        "author_id": author.id,
        "category_id": category.id,
        "date_published": date(1971, 1, 1).isoformat(),
    }
