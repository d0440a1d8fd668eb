"""Durable storage for the inventory document."""

import json
import os
import tempfile
from pathlib import Path
from typing import List, Dict, Any, Optional, Union

from ..utils.exceptions import StorageError
from ..utils.logger import get_store_logger

Record = Dict[str, Any]

SEED_ITEMS: List[Record] = [
    {
        "id": 1,
        "productName": "Laptop",
        "sku": "LP001",
        "category": "Electronics",
        "quantity": 15,
        "price": 999.99,
        "supplier": "Tech Corp",
        "location": "Warehouse A",
        "lastUpdated": "2023-10-28T10:30:00.000Z"
    },
    {
        "id": 2,
        "productName": "Desk Chair",
        "sku": "DC001",
        "category": "Office",
        "quantity": 8,
        "price": 149.99,
        "supplier": "Furniture Plus",
        "location": "Warehouse B",
        "lastUpdated": "2023-10-27T14:45:00.000Z"
    },
    {
        "id": 3,
        "productName": "Wireless Mouse",
        "sku": "WM001",
        "category": "Electronics",
        "quantity": 3,
        "price": 29.99,
        "supplier": "Tech Corp",
        "location": "Warehouse A",
        "lastUpdated": "2023-10-29T09:15:00.000Z"
    }
]


class BaseStorage:
    """Read/write port for the full list of item records."""

    def exists(self) -> bool:
        raise NotImplementedError

    def load(self) -> List[Record]:
        raise NotImplementedError

    def save(self, records: List[Record]) -> None:
        raise NotImplementedError


class JsonFileStorage(BaseStorage):
    """
    Stores records as a pretty-printed JSON array in a single file.

    Every save rewrites the whole document through a temporary file in the
    same directory followed by ``os.replace``, so readers see either the old
    or the new document and never a partial write.
    """

    def __init__(self, path: Union[str, Path], indent: int = 2):
        self.path = Path(path)
        self.indent = indent
        self.logger = get_store_logger()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[Record]:
        """
        Read the full document.

        Returns:
            List of raw records, empty when no document exists yet

        Raises:
            StorageError: If the file cannot be read or is not a JSON array
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StorageError(
                f"Inventory document is not valid JSON: {self.path}",
                details={"path": str(self.path), "error": str(e)}
            )
        except OSError as e:
            raise StorageError(
                f"Failed to read inventory document: {self.path}",
                details={"path": str(self.path), "error": str(e)}
            )

        if not isinstance(data, list):
            raise StorageError(
                f"Inventory document must contain a JSON array: {self.path}",
                details={"path": str(self.path), "type": type(data).__name__}
            )

        return data

    def save(self, records: List[Record]) -> None:
        """
        Replace the full document with ``records``.

        Raises:
            StorageError: If the document cannot be written
        """
        tmp_path: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent),
                prefix=f".{self.path.name}.",
                suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=self.indent, allow_nan=False)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(
                f"Failed to write inventory document: {self.path}",
                details={"path": str(self.path), "error": str(e)}
            )
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        self.logger.debug(f"Wrote {len(records)} records to {self.path}")
