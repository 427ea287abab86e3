"""
Main entry point for the cart-store application.
This module handles top-level setup, exception handling, and CLI invocation.
"""

import json
import logging
import os
import sys

import typer
from pydantic import ValidationError
from rich.console import Console

from cart_store.cli.app import app
from cart_store.cli.formatters import format_error_with_suggestions
from cart_store.exceptions import CartStoreError


def main() -> None:
    """Main entry point function."""
    if os.name == "nt":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            sys.stderr.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass

    log = logging.getLogger("cart_store")
    console = Console()

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(0)
    except CartStoreError as e:
        console.print()
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except (json.JSONDecodeError, ValidationError) as e:
        console.print()
        console.print(format_error_with_suggestions(e, {"type": "Stored cart"}))
        sys.exit(1)
    except Exception as e:
        console.print()
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
