from __future__ import annotations

from rich.console import Console

# Diagnostics go to stderr so a report piped through stdout stays clean.
err_console = Console(stderr=True)
