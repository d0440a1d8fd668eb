"""FastAPI server exposing the inventory REST API.

Handlers are thin adapters: they parse path and query parameters, call the
``InventoryStore`` and translate its exceptions into HTTP responses.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .services.inventory_store import InventoryStore
from .storage.json_storage import JsonFileStorage, SEED_ITEMS
from .utils.config import get_config
from .utils.exceptions import InventoryValidationError, ItemNotFoundError, StorageError
from .utils.logger import get_server_logger, get_error_logger

config = get_config()
logger = get_server_logger()
error_logger = get_error_logger()

_store: Optional[InventoryStore] = None


def get_store() -> InventoryStore:
    """Dependency returning the process-wide store on the configured data file."""
    global _store
    if _store is None:
        storage = JsonFileStorage(config.data_file, indent=config.storage.indent)
        _store = InventoryStore(storage)
    return _store


def parse_item_id(raw_id: str) -> int:
    """
    Parse an item id path segment.

    Raises:
        HTTPException: 404 for non-numeric ids, which can never match an item
    """
    try:
        return int(raw_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Item not found")


# ------------------------------------------------------------------
# Lifespan
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the data file on startup."""
    logger.info("=" * 60)
    logger.info("Inventory Tracker API Starting")
    logger.info("=" * 60)
    logger.info(f"Environment:          {config.env.environment}")
    logger.info(f"Port:                 {config.env.port}")
    logger.info(f"Data file:            {config.data_file}")
    logger.info("=" * 60)

    store = app.dependency_overrides.get(get_store, get_store)()
    seed = SEED_ITEMS if config.storage.seed_on_first_run else []
    if store.initialize(seed):
        logger.info(f"Created data file with {len(seed)} seed items")

    yield

    logger.info("Inventory Tracker API shut down.")


# ------------------------------------------------------------------
# FastAPI app
# ------------------------------------------------------------------

app = FastAPI(
    title="Inventory Tracker API",
    description="CRUD API over a JSON-backed inventory",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.env.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "Inventory Tracker API",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config.env.environment
    }


# ------------------------------------------------------------------
# Items
# ------------------------------------------------------------------

@app.get("/api/items")
def list_items(
    search: Optional[str] = None,
    category: Optional[str] = None,
    store: InventoryStore = Depends(get_store)
) -> List[Dict[str, Any]]:
    """List items, optionally filtered by ``search`` and ``category``."""
    try:
        items = store.list_items(search=search, category=category)
    except StorageError as e:
        error_logger.error(f"Error fetching items: {e.message}", extra={"details": e.details})
        raise HTTPException(status_code=500, detail="Failed to fetch items")
    return [item.to_dict() for item in items]


@app.get("/api/items/{item_id}")
def get_item(item_id: str, store: InventoryStore = Depends(get_store)) -> Dict[str, Any]:
    """Get a single item."""
    try:
        item = store.get_item(parse_item_id(item_id))
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StorageError as e:
        error_logger.error(f"Error fetching item {item_id}: {e.message}", extra={"details": e.details})
        raise HTTPException(status_code=500, detail="Failed to fetch item")
    return item.to_dict()


@app.post("/api/items", status_code=status.HTTP_201_CREATED)
def create_item(
    payload: Any = Body(default=None),
    store: InventoryStore = Depends(get_store)
) -> Dict[str, Any]:
    """Create an item. ``id`` and ``lastUpdated`` are assigned by the store."""
    try:
        item = store.create_item(payload)
    except InventoryValidationError as e:
        logger.info(f"Rejected new item: {e.details}")
        raise HTTPException(status_code=400, detail=e.message)
    except StorageError as e:
        error_logger.error(f"Error creating item: {e.message}", extra={"details": e.details})
        raise HTTPException(status_code=500, detail="Failed to create item")
    return item.to_dict()


@app.put("/api/items/{item_id}")
def update_item(
    item_id: str,
    payload: Any = Body(default=None),
    store: InventoryStore = Depends(get_store)
) -> Dict[str, Any]:
    """Shallow-merge the supplied fields over an item."""
    try:
        item = store.update_item(parse_item_id(item_id), payload)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InventoryValidationError as e:
        logger.info(f"Rejected update of item {item_id}: {e.details}")
        raise HTTPException(status_code=400, detail=e.message)
    except StorageError as e:
        error_logger.error(f"Error updating item {item_id}: {e.message}", extra={"details": e.details})
        raise HTTPException(status_code=500, detail="Failed to update item")
    return item.to_dict()


@app.delete("/api/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(item_id: str, store: InventoryStore = Depends(get_store)) -> Response:
    """Delete an item."""
    try:
        store.delete_item(parse_item_id(item_id))
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except StorageError as e:
        error_logger.error(f"Error deleting item {item_id}: {e.message}", extra={"details": e.details})
        raise HTTPException(status_code=500, detail="Failed to delete item")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ------------------------------------------------------------------
# Exception handlers
# ------------------------------------------------------------------

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Custom HTTP exception handler."""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code
        }
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as 400."""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "status_code": 400
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """General exception handler for unexpected errors."""
    error_logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if not config.is_production else "An error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "inventory_tracker.server:app",
        host=config.env.host,
        port=config.env.port,
        reload=not config.is_production
    )
