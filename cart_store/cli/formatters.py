"""
Functions for formatting and displaying cart data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cart_store.models.cart import CartItem
from cart_store.models.config import BACKEND_MAP, StoreConfig
from cart_store.utils.formatting import format_color, format_qty


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "InvalidCombinationError": [
            "• Run `cart-store list` to see the product/color lines in the cart.",
            "• Use `cart-store add` to create a line before updating it.",
        ],
        "InvalidQuantityError": [
            "• Quantities must be numbers of zero or more.",
            "• Set `validate_qty = false` in the config to accept any quantity.",
        ],
        "ConfigurationError": [
            "• Run `cart-store init` to create a configuration file.",
            "• Run `cart-store init --force` to overwrite an invalid one.",
        ],
        "BackendError": [
            "• Check that the data directory exists and is writable.",
            "• Run `cart-store --show-config` to see which backend is in use.",
        ],
        "JSONDecodeError": [
            "• The stored cart is not valid JSON.",
            "• Run `cart-store clear --force` to reset it.",
        ],
        "ValidationError": [
            "• The stored cart contains entries with unexpected fields.",
            "• Run `cart-store clear --force` to reset it.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the current configuration file contents."""
    console = Console()
    content = ""
    for key, value in config_data.items():
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip(),
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: StoreConfig):
    """Displays a summary of the current settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Backend:", f"[green]{BACKEND_MAP[config.backend]}[/green]")
    table.add_row("Data Directory:", f"[dim]{config.data_dir}[/dim]")
    table.add_row("Storage Key:", config.storage_key)
    table.add_row(
        "Quantity Checks:", "✓ Enabled" if config.validate_qty else "✗ Disabled"
    )
    table.add_row("Event Log:", "✓ Enabled" if config.event_log else "✗ Disabled")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_cart_table(items: list[CartItem], total: int | float):
    """Displays the cart lines and their total quantity."""
    console = Console()
    if not items:
        console.print("[dim]The cart is empty.[/dim]")
        return

    table = Table(title="Cart")
    table.add_column("#", style="dim")
    table.add_column("Product", style="cyan")
    table.add_column("Color", style="magenta")
    table.add_column("Qty", justify="right", style="green")
    for i, item in enumerate(items, 1):
        table.add_row(
            str(i),
            escape(item.product_id),
            escape(format_color(item.color_id)),
            format_qty(item.qty),
        )
    console.print(table)
    console.print(f"\n[bold]Total items:[/] [green]{format_qty(total)}[/green]")
