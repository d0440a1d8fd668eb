"""Command-line interface for managing the inventory."""

import sys
import click
from typing import Any, Dict, Optional

from .models.item import InventoryItem, format_timestamp, stock_status
from .services.inventory_store import InventoryStore
from .storage.json_storage import JsonFileStorage, SEED_ITEMS
from .utils.config import get_config
from .utils.exceptions import BaseAppException, ItemNotFoundError, InventoryValidationError

STATUS_COLORS = {
    "out-of-stock": "red",
    "low-stock": "yellow",
    "in-stock": "green",
}


def _local_store() -> InventoryStore:
    config = get_config()
    return InventoryStore(JsonFileStorage(config.data_file, indent=config.storage.indent))


def _backend(ctx: click.Context):
    """Return the HTTP client when ``--api-url`` is set, else the local store."""
    api_url = ctx.obj.get("api_url")
    if api_url:
        from .api.inventory_client import InventoryClient
        return InventoryClient(api_url)
    return _local_store()


def _fail(message: str):
    click.echo(click.style(f"✗ {message}", fg="red"), err=True)
    sys.exit(1)


def _collect_fields(**options: Optional[Any]) -> Dict[str, Any]:
    """Map CLI option names to camelCase payload keys, skipping unset options."""
    keys = {
        "name": "productName",
        "sku": "sku",
        "category": "category",
        "quantity": "quantity",
        "price": "price",
        "supplier": "supplier",
        "location": "location",
    }
    return {keys[name]: value for name, value in options.items() if value is not None}


def _echo_item(item: InventoryItem):
    config = get_config()
    item_status = stock_status(item.quantity, config.inventory.low_stock_threshold)

    click.echo(f"ID:            {item.id}")
    click.echo(f"Product:       {item.product_name}")
    click.echo(f"SKU:           {item.sku}")
    click.echo(f"Category:      {item.category or 'N/A'}")
    click.echo("Quantity:      " + click.style(f"{item.quantity} ({item_status})", fg=STATUS_COLORS[item_status]))
    click.echo(f"Price:         ${item.price:.2f}")
    click.echo(f"Supplier:      {item.supplier or 'N/A'}")
    click.echo(f"Location:      {item.location or 'N/A'}")
    click.echo(f"Last updated:  {format_timestamp(item.last_updated) if item.last_updated else 'N/A'}")


@click.group()
@click.version_option(version="1.0.0")
@click.option(
    "--api-url",
    envvar="INVENTORY_API_URL",
    default=None,
    help="Talk to a running API (e.g. http://localhost:3000/api) instead of the local data file"
)
@click.pass_context
def cli(ctx: click.Context, api_url: Optional[str]):
    """
    Inventory Tracker CLI.

    Manage inventory items stored in a JSON document.
    """
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to config)")
@click.option("--port", type=int, default=None, help="Port (defaults to config)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the inventory API server."""
    import uvicorn

    config = get_config()
    uvicorn.run(
        "inventory_tracker.server:app",
        host=host or config.env.host,
        port=port or config.env.port,
        reload=reload
    )


@cli.command()
@click.option("--no-seed", is_flag=True, help="Create an empty document instead of the example items")
def init(no_seed: bool):
    """Create the data file if it does not exist."""
    config = get_config()
    try:
        created = _local_store().initialize([] if no_seed else SEED_ITEMS)
    except BaseAppException as e:
        _fail(e.message)

    if created:
        click.echo(click.style(f"✓ Created {config.data_file}", fg="green"))
    else:
        click.echo(f"{config.data_file} already exists, nothing to do")


@cli.command("list")
@click.option("--search", "-s", default=None, help="Case-insensitive match on name, SKU, supplier, location")
@click.option("--category", "-c", default=None, help="Exact category match")
@click.pass_context
def list_items(ctx: click.Context, search: Optional[str], category: Optional[str]):
    """List inventory items."""
    config = get_config()
    try:
        items = _backend(ctx).list_items(search=search, category=category)
    except BaseAppException as e:
        _fail(e.message)

    if not items:
        click.echo("No items found. Use 'add' to get started.")
        return

    click.echo(f"{'ID':>4}  {'Product':<24} {'SKU':<10} {'Category':<14} {'Qty':>6}  {'Price':>10}  {'Supplier':<16} {'Location':<14}")
    click.echo("─" * 110)
    for item in items:
        item_status = stock_status(item.quantity, config.inventory.low_stock_threshold)
        quantity = click.style(f"{item.quantity:>6}", fg=STATUS_COLORS[item_status])
        click.echo(
            f"{item.id:>4}  {item.product_name:<24} {item.sku:<10} {item.category or 'N/A':<14} "
            f"{quantity}  {item.price:>10.2f}  {item.supplier or 'N/A':<16} {item.location or 'N/A':<14}"
        )
    click.echo("─" * 110)
    click.echo(f"{len(items)} item(s)")


@cli.command()
@click.argument("item_id", type=int)
@click.pass_context
def show(ctx: click.Context, item_id: int):
    """Show a single item."""
    try:
        item = _backend(ctx).get_item(item_id)
    except BaseAppException as e:
        _fail(e.message)
    _echo_item(item)


@cli.command()
@click.option("--name", required=True, help="Product name")
@click.option("--sku", required=True, help="Stock keeping unit")
@click.option("--quantity", type=int, required=True, help="Quantity on hand")
@click.option("--price", type=float, required=True, help="Unit price")
@click.option("--category", default=None)
@click.option("--supplier", default=None)
@click.option("--location", default=None)
@click.pass_context
def add(ctx: click.Context, **options):
    """Add a new item."""
    try:
        item = _backend(ctx).create_item(_collect_fields(**options))
    except InventoryValidationError as e:
        _fail(f"Invalid item: {e.message} {e.details or ''}".rstrip())
    except BaseAppException as e:
        _fail(e.message)

    click.echo(click.style(f"✓ Added item {item.id}", fg="green", bold=True))
    _echo_item(item)


@cli.command()
@click.argument("item_id", type=int)
@click.option("--name", default=None, help="Product name")
@click.option("--sku", default=None, help="Stock keeping unit")
@click.option("--quantity", type=int, default=None, help="Quantity on hand")
@click.option("--price", type=float, default=None, help="Unit price")
@click.option("--category", default=None)
@click.option("--supplier", default=None)
@click.option("--location", default=None)
@click.pass_context
def update(ctx: click.Context, item_id: int, **options):
    """Update fields of an existing item."""
    fields = _collect_fields(**options)
    if not fields:
        _fail("Nothing to update; pass at least one field option")

    try:
        item = _backend(ctx).update_item(item_id, fields)
    except ItemNotFoundError:
        _fail(f"Item {item_id} not found")
    except BaseAppException as e:
        _fail(e.message)

    click.echo(click.style(f"✓ Updated item {item.id}", fg="green", bold=True))
    _echo_item(item)


@cli.command()
@click.argument("item_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx: click.Context, item_id: int, yes: bool):
    """Delete an item."""
    if not yes:
        click.confirm(f"Are you sure you want to delete item {item_id}?", abort=True)

    try:
        _backend(ctx).delete_item(item_id)
    except ItemNotFoundError:
        _fail(f"Item {item_id} not found")
    except BaseAppException as e:
        _fail(e.message)

    click.echo(click.style(f"✓ Deleted item {item_id}", fg="green"))


@cli.command()
def config_info():
    """Display current configuration settings."""
    try:
        config = get_config()

        click.echo("Configuration Settings:")
        click.echo("=" * 60)
        click.echo()

        click.echo("Environment:")
        click.echo(f"  Environment:     {config.env.environment}")
        click.echo(f"  Log level:       {config.logging.level}")
        click.echo()

        click.echo("Server:")
        click.echo(f"  Host:            {config.env.host}")
        click.echo(f"  Port:            {config.env.port}")
        click.echo(f"  CORS origins:    {', '.join(config.env.cors_origins)}")
        click.echo()

        click.echo("Storage:")
        click.echo(f"  Data file:       {config.data_file}")
        click.echo(f"  Seed first run:  {config.storage.seed_on_first_run}")
        click.echo()

        click.echo("Client:")
        click.echo(f"  API URL:         {config.env.api_url}")
        click.echo(f"  Timeout:         {config.api.timeout}s")
        click.echo(f"  Max retries:     {config.api.max_retries}")
        click.echo()

    except Exception as e:
        click.echo(click.style(f"✗ Error loading config: {str(e)}", fg="red"), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
