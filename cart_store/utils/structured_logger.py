"""
Structured logging of cart events.
Provides JSON-formatted event logs with session context alongside the regular log.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any


class StructuredLogger:
    """
    Logger that outputs both human-readable and machine-parseable logs.

    Usage:
        logger = StructuredLogger("cart_store", log_dir=Path("logs"))
        logger.info("item_added", product_id="shirt", color_id="red", qty=2)
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = True,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
        """
        self.name = name
        self.log_dir = log_dir
        self.enable_json = enable_json and log_dir is not None

        self._logger = logging.getLogger(name)

        self._json_file = None
        if self.enable_json:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.json_log_path = log_dir / f"cart_store_{timestamp}.jsonl"
            self._json_file = open(self.json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        # Session context (added to all log entries)
        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
            "start_time": datetime.now().isoformat(),
        }

    def set_session_context(self, **kwargs) -> None:
        """Set session-level context that appears in all logs."""
        self._session_context.update(kwargs)

    def _format_message(self, event: str, **context) -> str:
        parts = [f"[{event}]"]
        for key, value in context.items():
            parts.append(f"{key}={value}")
        return " ".join(parts)

    def _write_json(self, level: str, event: str, **context) -> None:
        """Write structured log entry to JSON file."""
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry) + "\n")
            self._json_file.flush()
        except (OSError, TypeError, ValueError) as e:
            # Fallback to stderr if JSON logging fails
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def info(self, event: str, **context) -> None:
        self._logger.info(
            self._format_message(event, **context), extra={"markup": False}
        )
        self._write_json("INFO", event, **context)

    def warning(self, event: str, **context) -> None:
        self._logger.warning(
            self._format_message(event, **context), extra={"markup": False}
        )
        self._write_json("WARNING", event, **context)

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class CartEventLogger:
    """Specialized logger for cart mutations."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def item_added(
        self, product_id: str, color_id: str | None, qty: float, new_qty: float
    ):
        """Log a quantity added to a new or existing line."""
        self.logger.info(
            "item_added",
            product_id=product_id,
            color_id=color_id,
            qty=qty,
            new_qty=new_qty,
        )

    def item_removed(self, product_id: str, color_id: str | None, removed: int):
        self.logger.info(
            "item_removed",
            product_id=product_id,
            color_id=color_id,
            removed=removed,
        )

    def qty_updated(
        self, product_id: str, color_id: str | None, old_qty: float, new_qty: float
    ):
        self.logger.info(
            "qty_updated",
            product_id=product_id,
            color_id=color_id,
            old_qty=old_qty,
            new_qty=new_qty,
        )

    def update_rejected(self, product_id: str, color_id: str | None):
        """Log an update for a combination that is not in the cart."""
        self.logger.warning(
            "update_rejected",
            product_id=product_id,
            color_id=color_id,
        )

    def cart_cleared(self):
        self.logger.info("cart_cleared")


def create_structured_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, CartEventLogger]:
    """
    Create the structured loggers.

    Returns:
        Tuple of (base_logger, cart_event_logger)
    """
    base = StructuredLogger(
        "cart_store.events", log_dir=log_dir, enable_json=enable_json
    )
    return base, CartEventLogger(base)
