"""Pytest configuration and fixtures."""

import copy

import pytest
from fastapi.testclient import TestClient

from inventory_tracker.models.item import InventoryItem
from inventory_tracker.server import app, get_store
from inventory_tracker.services.inventory_store import InventoryStore
from inventory_tracker.storage.json_storage import JsonFileStorage, SEED_ITEMS


@pytest.fixture
def sample_item():
    """Create a sample InventoryItem for testing."""
    return InventoryItem.from_dict(copy.deepcopy(SEED_ITEMS[2]))


@pytest.fixture
def data_file(tmp_path):
    """Path of a not-yet-created inventory document."""
    return tmp_path / "data" / "inventory.json"


@pytest.fixture
def storage(data_file):
    """JSON storage on a temporary file."""
    return JsonFileStorage(data_file)


@pytest.fixture
def empty_store(storage):
    """Store with an empty inventory document."""
    store = InventoryStore(storage)
    store.initialize([])
    return store


@pytest.fixture
def seeded_store(storage):
    """Store seeded with Laptop, Desk Chair and Wireless Mouse."""
    store = InventoryStore(storage)
    store.initialize(copy.deepcopy(SEED_ITEMS))
    return store


@pytest.fixture
def api_client(seeded_store):
    """TestClient whose handlers use the seeded store."""
    app.dependency_overrides[get_store] = lambda: seeded_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def new_item_payload():
    """Payload for creating an item through the API."""
    return {
        "productName": "Widget",
        "sku": "W1",
        "category": "Hardware",
        "quantity": 5,
        "price": 9.99,
        "supplier": "Acme",
        "location": "Shelf 3"
    }
