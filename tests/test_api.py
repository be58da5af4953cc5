import asyncio
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from imagecatalog.catalog.store import DocumentStore, StoreUnavailable
from imagecatalog.config import Settings
from imagecatalog.main import create_app

ITEM_KEYS = {"_id", "imageUrl", "title", "description", "locateUsUrl", "applyNowUrl", "applyNowButtonName"}


# =====================================================
# IMAGES
# =====================================================

def test_list_images_empty_is_404(client):
    response = client.get("/api/images")
    assert response.status_code == 404
    assert response.json() == {"error": "No images found"}


def test_list_images(client, sample_items):
    response = client.get("/api/images")
    assert response.status_code == 200
    body = response.json()
    assert [i["_id"] for i in body] == sample_items
    assert all(set(i) == ITEM_KEYS for i in body)
    # Missing fields are present as null
    assert body[2]["imageUrl"] is None
    assert body[2]["description"] == "Flats"


def test_get_image(client, sample_items):
    response = client.get(f"/api/images/{sample_items[0]}")
    assert response.status_code == 200
    body = response.json()
    assert body["_id"] == sample_items[0]
    assert body["title"] == "Zeta Tower"
    assert "__v" not in body


def test_get_image_unknown_id(client, sample_items):
    response = client.get(f"/api/images/{ObjectId()}")
    assert response.status_code == 404
    assert response.json() == {"error": "Image not found"}


@pytest.mark.parametrize("bad_id", ["not-an-id", "12345", "z" * 24])
def test_get_image_malformed_id_is_client_error(client, bad_id):
    response = client.get(f"/api/images/{bad_id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Image not found"}


# =====================================================
# SEARCH
# =====================================================

@pytest.mark.parametrize("q", ["blue", "BLUE", "House"])
def test_search_case_insensitive(client, sample_items, q):
    response = client.get("/api/search", params={"q": q})
    assert response.status_code == 200
    assert [i["title"] for i in response.json()] == ["Blue House"]


def test_search_sorted_by_title_partial_match(client, database):
    database["details"].insert_many([{"title": "Zeta"}, {"title": "Alpha"}, {"title": "Mid"}])
    response = client.get("/api/search", params={"q": "a"})
    assert [i["title"] for i in response.json()] == ["Alpha", "Zeta"]


def test_search_sorted_by_title_full_superset(client, database):
    database["details"].insert_many(
        [{"title": "Zeta Park"}, {"title": "Alpha Park"}, {"title": "Mid Park"}]
    )
    response = client.get("/api/search?q=PARK")
    assert response.status_code == 200
    assert [i["title"] for i in response.json()] == ["Alpha Park", "Mid Park", "Zeta Park"]


def test_search_without_query(client):
    response = client.get("/api/search")
    assert response.status_code == 400
    assert response.json() == {"error": "Query is required"}


def test_search_with_empty_query(client, sample_items):
    response = client.get("/api/search?q=")
    assert response.status_code == 400
    assert response.json() == {"error": "Query is required"}


def test_search_without_matches_is_empty_list(client, sample_items):
    response = client.get("/api/search", params={"q": "castle"})
    assert response.status_code == 200
    assert response.json() == []


def test_search_regex_is_literal(client, database):
    database["details"].insert_many([{"title": "abc"}, {"title": "a.c"}])
    response = client.get("/api/search", params={"q": "."})
    assert [i["title"] for i in response.json()] == ["a.c"]


# =====================================================
# BANNERS
# =====================================================

def test_list_banners_empty_is_404(client):
    response = client.get("/api/banners")
    assert response.status_code == 404
    assert response.json() == {"error": "No banners found"}


def test_list_banners(client, database):
    ids = database["banners"].insert_many(
        [{"imageUrl": "https://cdn.example/b1.jpg"}, {"imageUrl": "https://cdn.example/b2.jpg", "__v": 0}]
    ).inserted_ids
    response = client.get("/api/banners")
    assert response.status_code == 200
    assert response.json() == [
        {"_id": str(ids[0]), "imageUrl": "https://cdn.example/b1.jpg"},
        {"_id": str(ids[1]), "imageUrl": "https://cdn.example/b2.jpg"},
    ]


# =====================================================
# FAULTS
# =====================================================

@pytest.fixture
def broken_client(settings):
    store = MagicMock(spec=DocumentStore)
    failure = StoreUnavailable("timed out talking to mongo-primary.internal")
    store.fetch_all.side_effect = failure
    store.fetch_by_id.side_effect = failure
    store.search_by_title.side_effect = failure
    return TestClient(create_app(settings=settings, store=store))


@pytest.mark.parametrize(
    "url, message",
    [
        ("/api/images", "Failed to fetch images"),
        ("/api/search?q=blue", "Failed to fetch search results"),
        (f"/api/images/{ObjectId()}", "Failed to fetch image details"),
        ("/api/banners", "Failed to fetch banners"),
    ],
)
def test_store_failure_is_generic_500(broken_client, url, message):
    response = broken_client.get(url)
    assert response.status_code == 500
    assert response.json() == {"error": message}
    assert "mongo-primary" not in response.text


# =====================================================
# MISC
# =====================================================

def test_repeated_reads_are_identical(client, sample_items, database):
    database["banners"].insert_one({"imageUrl": "https://cdn.example/b1.jpg"})
    for url in ["/api/images", "/api/search?q=o", f"/api/images/{sample_items[1]}", "/api/banners"]:
        first = client.get(url)
        second = client.get(url)
        assert first.status_code == 200
        assert first.content == second.content


def test_unknown_route_uses_error_shape(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_health(client, store, monkeypatch):
    monkeypatch.setattr(store, "ping", lambda: True)
    assert client.get("/").json() == {"status": "ok", "database": "up"}

    monkeypatch.setattr(store, "ping", lambda: False)
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "degraded", "database": "down"}


def test_lifespan_pings_store_and_keeps_caller_store_open():
    store = MagicMock(spec=DocumentStore)
    store.ping.return_value = True
    store.database_name = "data"
    with TestClient(create_app(settings=Settings(), store=store)):
        pass
    store.ping.assert_called()
    store.close.assert_not_called()


def test_non_string_fields_are_rendered_as_text(client, database):
    database["details"].insert_many(
        [
            {"title": "Good", "imageUrl": "u"},
            {"title": "Bad", "applyNowButtonName": 5, "description": 2.5, "locateUsUrl": True},
        ]
    )
    response = client.get("/api/images")
    assert response.status_code == 200
    odd = response.json()[1]
    assert odd["applyNowButtonName"] == "5"
    assert odd["description"] == "2.5"
    assert odd["locateUsUrl"] == "true"

    response = client.get(f"/api/images/{odd['_id']}")
    assert response.status_code == 200
    assert response.json()["applyNowButtonName"] == "5"

    response = client.get("/api/search", params={"q": "bad"})
    assert response.status_code == 200
    assert [i["applyNowButtonName"] for i in response.json()] == ["5"]


def test_startup_ping_runs_off_the_event_loop():
    calls = []

    def ping():
        try:
            asyncio.get_running_loop()
            calls.append("event loop")
        except RuntimeError:
            calls.append("worker thread")
        return True

    store = MagicMock(spec=DocumentStore)
    store.ping.side_effect = ping
    store.database_name = "data"
    with TestClient(create_app(settings=Settings(), store=store)):
        pass
    assert calls == ["worker thread"]
