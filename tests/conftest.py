"""
Shared pytest fixtures.

Uses a SQLite database file so no Postgres is required for tests, and a
fabricated type descriptor registry so tests don't depend on the bundled
descriptor file.
"""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from library_api.db.base import Base, get_db
from library_api.descriptors.models import (
    FieldDataType,
    FieldDefinition,
    IndexingDefinition,
    TypeDescriptor,
    UiHints,
)
from library_api.descriptors.registry import TypeDescriptorRegistry
from library_api.main import app
from library_api.routers.resources import get_registry
import library_api.models  # noqa: F401

SQLITE_URL = "sqlite:///./test_library.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


BOOK = TypeDescriptor(
    type_key="book",
    display_name="Book",
    schema_version=1,
    fields=[
        FieldDefinition(name="title", data_type=FieldDataType.string, is_required=True, max_length=100),
        FieldDefinition(name="author", data_type=FieldDataType.string),
        FieldDefinition(name="isbn", data_type=FieldDataType.string, pattern=r"^[0-9-]+$"),
        FieldDefinition(name="pages", data_type=FieldDataType.int),
        FieldDefinition(name="publishedAt", data_type=FieldDataType.datetime),
        FieldDefinition(name="price", data_type=FieldDataType.decimal),
        FieldDefinition(name="available", data_type=FieldDataType.bool),
    ],
    indexing=IndexingDefinition(full_text_fields=["title", "author"]),
    ui_hints=UiHints(title_field="title", list_fields=["title", "author"]),
)

ARTICLE = TypeDescriptor(
    type_key="Article",
    display_name="Article",
    fields=[
        FieldDefinition(name="headline", data_type=FieldDataType.string, is_required=True),
        FieldDefinition(name="summary", data_type=FieldDataType.string),
    ],
    indexing=IndexingDefinition(full_text_fields=["headline", "summary"]),
)


def make_registry(*descriptors: TypeDescriptor) -> TypeDescriptorRegistry:
    return TypeDescriptorRegistry(descriptors or (BOOK, ARTICLE))


TEST_REGISTRY = make_registry()


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def registry():
    return TEST_REGISTRY


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def owner():
    """A fresh owner id, so list tests only see their own rows."""
    return f"owner-{uuid.uuid4()}"


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_registry] = lambda: TEST_REGISTRY
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
