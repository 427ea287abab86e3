"""
Defines the command-line interface for inspecting and editing a persisted cart.
"""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cart_store import __version__
from cart_store.core.cart import CartStore
from cart_store.exceptions import CartStoreError
from cart_store.models.config import StoreConfig
from cart_store.storage.config_manager import ConfigManager
from cart_store.utils.formatting import describe_item, format_color, format_qty
from cart_store.utils.structured_logger import (
    StructuredLogger,
    create_structured_logger,
)

from .formatters import print_cart_table, print_config, print_validation_table

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("cart_store")

app = typer.Typer(
    name="cart-store",
    help=(
        "Inspect and edit a shopping cart kept in persistent key-value storage."
        " Use 'cart-store <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "cart-store"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@contextmanager
def cart_session() -> Iterator[CartStore]:
    """Opens the configured store, turning application errors into exit code 1."""
    base_logger: StructuredLogger | None = None
    try:
        config = ConfigManager(CONFIG_FILE).load_config()
        log.debug(f"Using '{config.backend}' backend, key '{config.storage_key}'.")
        event_logger = None
        if config.event_log:
            base_logger, event_logger = create_structured_logger(
                Path(config.data_dir).expanduser() / "logs", enable_json=True
            )
            base_logger.set_session_context(
                backend=config.backend, storage_key=config.storage_key
            )
        yield CartStore.from_config(config, event_logger=event_logger)
    except CartStoreError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e
    finally:
        if base_logger:
            base_logger.close()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the current configuration."
    ),
):
    """Cart Store CLI"""
    if version:
        console.print(f"[bold]cart-store[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("cart_store").setLevel(log_level)

    if show_config:
        if not CONFIG_FILE.is_file():
            console.print(
                "[red]✗ Config file not found.[/] Run [cyan]cart-store init[/cyan]"
                " first."
            )
            raise typer.Exit(code=1)
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_config(CONFIG_FILE, config.model_dump(exclude={"config_path"}))
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    backend: str = typer.Option(
        "file", "--backend", "-b", help="Storage backend: file, sqlite or memory."
    ),
    data_dir: Path | None = typer.Option(  # noqa: B008
        None, "--data-dir", help="Where the backend keeps its data."
    ),
    storage_key: str = typer.Option(
        "cart", "--storage-key", help="Backend key holding the cart."
    ),
    validate_qty: bool = typer.Option(
        False,
        "--validate-qty/--no-validate-qty",
        help="Reject negative or non-numeric quantities.",
    ),
    event_log: bool = typer.Option(
        False,
        "--event-log/--no-event-log",
        help="Record cart changes as JSON lines under the data directory.",
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration."
    ),
):
    """Create the configuration file."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {
        "backend": backend,
        "data_dir": str(data_dir or CONFIG_DIR),
        "storage_key": storage_key,
        "validate_qty": validate_qty,
        "event_log": event_log,
    }
    try:
        config = StoreConfig(**settings, config_path=str(CONFIG_DIR))
    except ValidationError as e:
        console.print(f"[red]✗ Invalid settings:[/red]\n{escape(str(e))}")
        raise typer.Exit(code=1) from e

    try:
        ConfigManager(CONFIG_FILE).save_new_config(settings)
    except CartStoreError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    console.print(
        f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]"
    )
    if config.backend == "memory":
        console.print(
            "[yellow]⚠️  The memory backend does not keep the cart between"
            " commands.[/yellow]"
        )


@app.command(name="list")
def list_command():
    """Show every line in the cart."""
    with cart_session() as store:
        print_cart_table(store.get_items(), store.total_items())


@app.command()
def add(
    product_id: str = typer.Argument(..., help="Product identifier."),
    qty: int = typer.Option(1, "--qty", "-q", help="Quantity to add."),
    color: str | None = typer.Option(
        None, "--color", "-c", help="Color identifier (omit for none)."
    ),
):
    """Add a product to the cart, or increase its quantity."""
    with cart_session() as store:
        store.add_item(product_id, color, qty)
    console.print(
        f"[green]✓ Added {format_qty(qty)} x {escape(product_id)}"
        f" ({escape(format_color(color))}).[/green]"
    )


@app.command()
def remove(
    product_id: str = typer.Argument(..., help="Product identifier."),
    color: str | None = typer.Option(
        None, "--color", "-c", help="Color identifier (omit for none)."
    ),
):
    """Remove a product/color line from the cart."""
    with cart_session() as store:
        store.remove_item(product_id, color)
    console.print(
        f"[green]✓ Removed {escape(product_id)}"
        f" ({escape(format_color(color))}).[/green]"
    )


@app.command()
def update(
    product_id: str = typer.Argument(..., help="Product identifier."),
    qty: int = typer.Argument(..., help="New quantity for the line."),
    color: str | None = typer.Option(
        None, "--color", "-c", help="Color identifier (omit for none)."
    ),
):
    """Set the quantity of a line already in the cart."""
    with cart_session() as store:
        item = store.update_qty(product_id, color, qty)
    console.print(
        f"[green]✓ Line is now {escape(describe_item(item))}.[/green]"
    )


@app.command()
def clear(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Bypass the confirmation prompt.",
    ),
):
    """Remove every line from the cart."""
    if not force and not typer.confirm("Are you sure you want to empty the cart?"):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    with cart_session() as store:
        store.clear()
    console.print("[green]✓ Cart cleared.[/green]")


@app.command()
def total():
    """Print the total quantity of items in the cart."""
    with cart_session() as store:
        count = store.total_items()
    console.print(format_qty(count))


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_validation_table(config)
    except CartStoreError as e:
        console.print(f"[red]✗ Configuration is invalid: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
