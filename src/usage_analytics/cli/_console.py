"""Consoles and log wiring shared by the CLI commands."""

import logging
import os

from rich.box import ROUNDED
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from usage_analytics.config import get_settings
from usage_analytics.logging import configure_logging

no_color = os.environ.get("NO_COLOR", "").lower() in ("1", "true", "yes")

console = Console(highlight=False, no_color=no_color)
err_console = Console(highlight=False, no_color=no_color, stderr=True)


def warning(msg: str) -> None:
    console.print(Text.assemble(("  ! ", "yellow"), msg))


def nl() -> None:
    console.print()


def error_panel(msg: str, *, title: str = "Failed") -> None:
    """Print a red panel with `title` and the error message."""
    body = Text()
    body.append("✗ ", style="red bold")
    body.append(title, style="red")
    body.append("\n\n")
    body.append(msg, style="dim")
    console.print(
        Panel(body, border_style="red dim", box=ROUNDED, padding=(0, 1), expand=False)
    )


def setup_logging(verbose: bool = False) -> None:
    """Route log records to stderr; httpx chatter stays at WARNING.

    `USAGE_ANALYTICS_LOG_FORMAT=json` swaps the rich handler for JSON lines and
    `USAGE_ANALYTICS_DEBUG` has the same effect as `--verbose`.
    """
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    settings = get_settings()
    verbose = verbose or settings.debug
    if settings.log_format == "json":
        configure_logging(
            log_format="json", debug=verbose, default_level=logging.WARNING
        )
        return

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
        keywords=[],
    )

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    logging.getLogger("usage_analytics").setLevel(level)
