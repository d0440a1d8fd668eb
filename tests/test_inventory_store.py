"""Tests for the inventory store."""

import json
import threading

import pytest

from inventory_tracker.services.inventory_store import InventoryStore
from inventory_tracker.storage.json_storage import JsonFileStorage
from inventory_tracker.utils.exceptions import (
    InventoryValidationError,
    ItemNotFoundError,
    StorageError,
)


def read_document(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


class TestInitialize:
    """Tests for creating the inventory document."""

    def test_writes_seed_once(self, storage, data_file):
        store = InventoryStore(storage)

        assert store.initialize([{"id": 1, "productName": "A", "sku": "A1", "quantity": 1, "price": 1}]) is True
        assert store.initialize([]) is False
        assert len(read_document(data_file)) == 1

    def test_list_without_document_is_empty(self, storage):
        assert InventoryStore(storage).list_items() == []


class TestListItems:
    """Tests for listing and filtering."""

    def test_returns_storage_order(self, seeded_store):
        items = seeded_store.list_items()

        assert [item.id for item in items] == [1, 2, 3]

    @pytest.mark.parametrize("term", ["mouse", "MOUSE", "Mouse"])
    def test_search_is_case_insensitive(self, seeded_store, term):
        items = seeded_store.list_items(search=term)

        assert [item.product_name for item in items] == ["Wireless Mouse"]

    def test_search_matches_sku_supplier_and_location(self, seeded_store):
        assert [i.id for i in seeded_store.list_items(search="dc0")] == [2]
        assert [i.id for i in seeded_store.list_items(search="furniture")] == [2]
        assert [i.id for i in seeded_store.list_items(search="warehouse a")] == [1, 3]

    def test_search_skips_items_without_optional_fields(self, empty_store):
        empty_store.create_item({"productName": "Cable", "sku": "CB01", "quantity": 1, "price": 2.0})

        assert empty_store.list_items(search="warehouse") == []

    def test_category_is_exact_match(self, seeded_store):
        assert [i.id for i in seeded_store.list_items(category="Electronics")] == [1, 3]
        assert seeded_store.list_items(category="electronics") == []

    def test_search_and_category_combine(self, seeded_store):
        items = seeded_store.list_items(search="tech corp", category="Office")

        assert items == []

    def test_empty_filters_are_ignored(self, seeded_store):
        assert len(seeded_store.list_items(search="", category="")) == 3

    def test_list_does_not_write(self, seeded_store, data_file):
        before = data_file.read_text()

        seeded_store.list_items(search="mouse")

        assert data_file.read_text() == before


class TestGetItem:
    """Tests for fetching a single item."""

    def test_get_existing(self, seeded_store):
        assert seeded_store.get_item(2).product_name == "Desk Chair"

    def test_get_missing(self, seeded_store):
        with pytest.raises(ItemNotFoundError):
            seeded_store.get_item(99)

    def test_mutating_result_does_not_persist(self, seeded_store):
        item = seeded_store.get_item(1)
        item.quantity = 0

        assert seeded_store.get_item(1).quantity == 15


class TestCreateItem:
    """Tests for creating items."""

    def test_first_item_gets_id_one(self, empty_store):
        item = empty_store.create_item({"productName": "Widget", "sku": "W1", "quantity": 5, "price": 9.99})

        assert item.id == 1
        assert item.last_updated is not None

    def test_id_is_max_plus_one(self, seeded_store):
        item = seeded_store.create_item({"productName": "Lamp", "sku": "LM1", "quantity": 2, "price": 19.0})

        assert item.id == 4

    def test_ids_are_distinct(self, empty_store):
        ids = [
            empty_store.create_item({"productName": f"P{n}", "sku": f"S{n}", "quantity": n, "price": 1.0}).id
            for n in range(10)
        ]

        assert len(set(ids)) == 10

    def test_id_reused_after_deleting_max(self, empty_store):
        first = empty_store.create_item({"productName": "Widget", "sku": "W1", "quantity": 5, "price": 9.99})
        empty_store.delete_item(first.id)

        second = empty_store.create_item({"productName": "Gadget", "sku": "G1", "quantity": 2, "price": 4.5})

        assert first.id == 1
        assert second.id == 1

    def test_client_id_and_timestamp_are_ignored(self, seeded_store):
        item = seeded_store.create_item({
            "id": 1,
            "lastUpdated": "2000-01-01T00:00:00Z",
            "productName": "Lamp",
            "sku": "LM1",
            "quantity": 2,
            "price": 19.0
        })

        assert item.id == 4
        assert item.last_updated.year > 2000

    @pytest.mark.parametrize("missing", ["productName", "sku", "quantity", "price"])
    def test_missing_required_field(self, seeded_store, data_file, missing):
        fields = {"productName": "Lamp", "sku": "LM1", "quantity": 2, "price": 19.0}
        del fields[missing]
        before = read_document(data_file)

        with pytest.raises(InventoryValidationError):
            seeded_store.create_item(fields)

        assert read_document(data_file) == before

    def test_zero_and_negative_quantity_allowed(self, empty_store):
        assert empty_store.create_item({"productName": "A", "sku": "A1", "quantity": 0, "price": 1}).quantity == 0
        assert empty_store.create_item({"productName": "B", "sku": "B1", "quantity": -3, "price": 1}).quantity == -3

    def test_non_object_payload(self, empty_store):
        with pytest.raises(InventoryValidationError):
            empty_store.create_item(["not", "an", "object"])

    def test_round_trip(self, seeded_store):
        created = seeded_store.create_item({
            "productName": "Monitor",
            "sku": "MN001",
            "category": "Electronics",
            "quantity": 4,
            "price": 199.5,
            "supplier": "Tech Corp",
            "location": "Warehouse C"
        })

        assert seeded_store.get_item(created.id) == created

    def test_persists_pretty_printed_document(self, empty_store, data_file):
        empty_store.create_item({"productName": "Widget", "sku": "W1", "quantity": 5, "price": 9.99})

        text = data_file.read_text()
        document = json.loads(text)
        assert '\n  {' in text
        assert document[0]["productName"] == "Widget"
        assert document[0]["lastUpdated"].endswith("Z")


class TestUpdateItem:
    """Tests for updating items."""

    def test_shallow_merge(self, seeded_store):
        item = seeded_store.update_item(1, {"quantity": 20})

        assert item.quantity == 20
        assert item.product_name == "Laptop"
        assert item.supplier == "Tech Corp"
        assert seeded_store.get_item(1).quantity == 20

    def test_id_is_pinned(self, seeded_store):
        item = seeded_store.update_item(2, {"id": 99, "location": "Warehouse C"})

        assert item.id == 2
        assert seeded_store.get_item(2).location == "Warehouse C"
        with pytest.raises(ItemNotFoundError):
            seeded_store.get_item(99)

    def test_last_updated_advances(self, seeded_store):
        before = seeded_store.get_item(3).last_updated

        item = seeded_store.update_item(3, {"price": 24.99})

        assert item.last_updated >= before

    def test_create_then_update_timestamp_monotonic(self, empty_store):
        created = empty_store.create_item({"productName": "A", "sku": "A1", "quantity": 1, "price": 1})
        updated = empty_store.update_item(created.id, {"quantity": 2})

        assert updated.last_updated >= created.last_updated

    def test_update_missing(self, seeded_store):
        with pytest.raises(ItemNotFoundError):
            seeded_store.update_item(99, {"quantity": 1})

    def test_invalid_type_rejected(self, seeded_store):
        with pytest.raises(InventoryValidationError):
            seeded_store.update_item(1, {"quantity": "lots"})

        assert seeded_store.get_item(1).quantity == 15

    def test_unknown_keys_dropped(self, seeded_store, data_file):
        seeded_store.update_item(1, {"colour": "grey"})

        assert "colour" not in read_document(data_file)[0]


class TestDeleteItem:
    """Tests for deleting items."""

    def test_delete(self, seeded_store):
        seeded_store.delete_item(2)

        assert [i.id for i in seeded_store.list_items()] == [1, 3]

    def test_delete_missing_leaves_collection(self, seeded_store):
        with pytest.raises(ItemNotFoundError):
            seeded_store.delete_item(42)

        assert len(seeded_store.list_items()) == 3


class TestStorageFailures:
    """Tests for corrupt or unreadable documents."""

    def test_corrupt_json(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text("{not json")
        store = InventoryStore(JsonFileStorage(data_file))

        with pytest.raises(StorageError):
            store.list_items()

    def test_document_must_be_array(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text('{"id": 1}')
        store = InventoryStore(JsonFileStorage(data_file))

        with pytest.raises(StorageError):
            store.get_item(1)

    def test_malformed_record(self, data_file):
        data_file.parent.mkdir(parents=True)
        data_file.write_text('[{"id": 1, "productName": "A"}]')
        store = InventoryStore(JsonFileStorage(data_file))

        with pytest.raises(StorageError, match="position 0"):
            store.list_items()

    def test_write_failure_keeps_previous_document(self, seeded_store, data_file, monkeypatch):
        before = data_file.read_text()

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("inventory_tracker.storage.json_storage.os.replace", failing_replace)

        with pytest.raises(StorageError):
            seeded_store.create_item({"productName": "A", "sku": "A1", "quantity": 1, "price": 1})

        assert data_file.read_text() == before
        assert [p.name for p in data_file.parent.iterdir()] == [data_file.name]


class TestConcurrency:
    """Tests for the single-writer lock."""

    def test_concurrent_creates_do_not_lose_updates(self, empty_store):
        def worker(n):
            empty_store.create_item({"productName": f"P{n}", "sku": f"S{n}", "quantity": n, "price": 1.0})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        items = empty_store.list_items()
        assert len(items) == 20
        assert sorted(item.id for item in items) == list(range(1, 21))


class TestNonFinitePrices:
    """Prices must be finite so the document stays valid JSON."""

    @pytest.mark.parametrize("price", [float("nan"), float("inf"), float("-inf")])
    def test_create_rejects_non_finite_price(self, seeded_store, data_file, price):
        before = data_file.read_text()

        with pytest.raises(InventoryValidationError):
            seeded_store.create_item({"productName": "Lamp", "sku": "LM1", "quantity": 2, "price": price})

        assert data_file.read_text() == before

    @pytest.mark.parametrize("price", [float("nan"), float("inf")])
    def test_update_rejects_non_finite_price(self, seeded_store, data_file, price):
        before = data_file.read_text()

        with pytest.raises(InventoryValidationError):
            seeded_store.update_item(1, {"price": price})

        assert data_file.read_text() == before

    def test_storage_refuses_to_write_nan(self, storage, data_file):
        with pytest.raises(StorageError):
            storage.save([{"id": 1, "productName": "A", "sku": "A1", "quantity": 1, "price": float("nan")}])

        assert not data_file.exists()


class TestUpdateLookupOrder:
    """A missing id is reported before payload problems."""

    def test_missing_id_with_invalid_payload(self, seeded_store):
        with pytest.raises(ItemNotFoundError):
            seeded_store.update_item(99, {"quantity": "lots"})

    def test_missing_id_with_non_object_payload(self, seeded_store):
        with pytest.raises(ItemNotFoundError):
            seeded_store.update_item(99, None)


class TestStoredIds:
    """Stored ids must be integers."""

    @pytest.mark.parametrize("bad_id", ["1.7", "\"1\"", "true", "null"])
    def test_non_integer_id_is_storage_error(self, data_file, bad_id):
        data_file.parent.mkdir(parents=True)
        data_file.write_text(
            '[{"id": %s, "productName": "A", "sku": "A1", "quantity": 1, "price": 1}]' % bad_id
        )
        store = InventoryStore(JsonFileStorage(data_file))

        with pytest.raises(StorageError, match="position 0"):
            store.list_items()
