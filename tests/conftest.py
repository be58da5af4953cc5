"""Pytest fixtures: an in-memory Mongo database and an app bound to it."""

import mongomock
import pytest
from fastapi.testclient import TestClient

from imagecatalog.catalog.store import DocumentStore
from imagecatalog.config import Settings
from imagecatalog.main import create_app


@pytest.fixture
def database():
    return mongomock.MongoClient().get_database("data")


@pytest.fixture
def store(database):
    return DocumentStore(database)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def client(settings, store):
    return TestClient(create_app(settings=settings, store=store))


@pytest.fixture
def sample_items(database):
    """Three catalogue items inserted out of title order."""
    docs = [
        {
            "imageUrl": "https://cdn.example/zeta.jpg",
            "title": "Zeta Tower",
            "description": "Offices",
            "locateUsUrl": "https://maps.example/zeta",
            "applyNowUrl": "https://apply.example/zeta",
            "applyNowButtonName": "Apply",
            "__v": 0,
        },
        {"imageUrl": "https://cdn.example/blue.jpg", "title": "Blue House"},
        {"title": "Mid Court", "description": "Flats"},
    ]
    result = database["details"].insert_many(docs)
    return [str(i) for i in result.inserted_ids]
