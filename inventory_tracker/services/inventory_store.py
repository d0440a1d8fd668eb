"""Inventory store: the single owner of the item collection."""

import threading
from typing import List, Dict, Any, Optional

from pydantic import ValidationError

from ..models.item import InventoryItem, utc_now
from ..models.schemas import ItemCreate, ItemUpdate
from ..storage.json_storage import BaseStorage, Record
from ..utils.exceptions import InventoryValidationError, ItemNotFoundError, StorageError
from ..utils.logger import get_store_logger, get_error_logger


def _validation_details(error: ValidationError) -> Dict[str, Any]:
    """Flatten pydantic errors into ``{field: message}``."""
    details = {}
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        details[field] = err["msg"]
    return details


class InventoryStore:
    """
    CRUD operations over the inventory document.

    Every operation reads the whole document from storage and every mutation
    writes it back in full. Read-modify-write pairs are serialised with a lock,
    which protects against lost updates between threads of one process only.
    """

    def __init__(self, storage: BaseStorage):
        self.storage = storage
        self.logger = get_store_logger()
        self.error_logger = get_error_logger()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    def _load_items(self) -> List[InventoryItem]:
        records = self.storage.load()
        items = []
        for index, record in enumerate(records):
            try:
                items.append(InventoryItem.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                raise StorageError(
                    f"Malformed inventory record at position {index}",
                    details={"record": record, "error": str(e)}
                )
        return items

    def _save_items(self, items: List[InventoryItem]) -> None:
        try:
            self.storage.save([item.to_dict() for item in items])
        except StorageError as e:
            self.error_logger.error(f"Failed to persist inventory: {e.message}", extra={"details": e.details})
            raise

    @staticmethod
    def _find_index(items: List[InventoryItem], item_id: int) -> Optional[int]:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        return None

    @staticmethod
    def _next_id(items: List[InventoryItem]) -> int:
        # Deleting the highest id lets it be handed out again
        return max(item.id for item in items) + 1 if items else 1

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def initialize(self, seed: Optional[List[Record]] = None) -> bool:
        """
        Create the inventory document if it does not exist yet.

        Args:
            seed: Records to write into the new document (empty if None)

        Returns:
            True if a new document was written
        """
        with self._lock:
            if self.storage.exists():
                return False
            self.storage.save(list(seed or []))
            self.logger.info(f"Initialized inventory document with {len(seed or [])} items")
            return True

    def list_items(self, search: Optional[str] = None, category: Optional[str] = None) -> List[InventoryItem]:
        """
        List items in storage order, optionally filtered.

        Args:
            search: Case-insensitive substring matched against product name,
                SKU, supplier and location
            category: Exact, case-sensitive category match

        Returns:
            Matching items (possibly empty)
        """
        items = self._load_items()

        if search:
            items = [item for item in items if item.matches_search(search)]

        if category:
            items = [item for item in items if item.category == category]

        return items

    def get_item(self, item_id: int) -> InventoryItem:
        """
        Retrieve a single item by id.

        Raises:
            ItemNotFoundError: If no item has this id
        """
        items = self._load_items()
        index = self._find_index(items, item_id)
        if index is None:
            raise ItemNotFoundError("Item not found", details={"id": item_id})
        return items[index]

    def create_item(self, fields: Dict[str, Any]) -> InventoryItem:
        """
        Validate ``fields`` and append a new item.

        Args:
            fields: camelCase payload; ``productName``, ``sku``, ``quantity``
                and ``price`` are required

        Returns:
            The stored item with its assigned id and timestamp

        Raises:
            InventoryValidationError: If a required field is missing or invalid
        """
        try:
            payload = ItemCreate.model_validate(fields)
        except ValidationError as e:
            raise InventoryValidationError("Missing required fields", details=_validation_details(e))

        with self._lock:
            items = self._load_items()
            item = InventoryItem(
                id=self._next_id(items),
                last_updated=utc_now(),
                **payload.model_dump()
            )
            items.append(item)
            self._save_items(items)

        self.logger.info(f"Created item {item.id} ({item.sku})")
        return item

    def update_item(self, item_id: int, fields: Dict[str, Any]) -> InventoryItem:
        """
        Shallow-merge ``fields`` over an existing item.

        The item id is never changed and ``lastUpdated`` is refreshed.

        Raises:
            ItemNotFoundError: If no item has this id
            InventoryValidationError: If a supplied field has an invalid value
        """
        with self._lock:
            items = self._load_items()
            index = self._find_index(items, item_id)
            if index is None:
                raise ItemNotFoundError("Item not found", details={"id": item_id})

            try:
                changes = ItemUpdate.model_validate(fields).model_dump(exclude_unset=True)
            except ValidationError as e:
                raise InventoryValidationError("Invalid item fields", details=_validation_details(e))

            item = items[index]
            for key, value in changes.items():
                setattr(item, key, value)
            item.last_updated = utc_now()
            self._save_items(items)

        self.logger.info(f"Updated item {item_id}: {', '.join(sorted(changes)) or 'no fields'}")
        return item

    def delete_item(self, item_id: int) -> None:
        """
        Remove an item.

        Raises:
            ItemNotFoundError: If no item has this id
        """
        with self._lock:
            items = self._load_items()
            remaining = [item for item in items if item.id != item_id]
            if len(remaining) == len(items):
                raise ItemNotFoundError("Item not found", details={"id": item_id})
            self._save_items(remaining)

        self.logger.info(f"Deleted item {item_id}")
