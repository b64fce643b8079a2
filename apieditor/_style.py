"""Minimal CLI styling helpers with TTY-aware ANSI formatting."""

import sys

# Detect TTY; skip all formatting if output is piped
_USE_COLOR = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()

# ANSI codes
BOLD = "\033[1m" if _USE_COLOR else ""
DIM = "\033[2m" if _USE_COLOR else ""
GREEN = "\033[32m" if _USE_COLOR else ""
RED = "\033[31m" if _USE_COLOR else ""
RESET = "\033[0m" if _USE_COLOR else ""


def header(version: str) -> str:
    """Return the branded header line."""
    return f"{BOLD}api-editor{RESET} {DIM}v{version}{RESET} · remote program editor"


def success(text: str) -> str:
    return f"  {GREEN}✓{RESET} {text}"


def error(text: str) -> str:
    return f"  {RED}✗{RESET} {text}"


def table(rows: list[list[str]], headers: list[str]) -> str:
    """Render rows as left-aligned columns under a bold header."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    head = "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    lines = [f"  {BOLD}{head.rstrip()}{RESET}"]
    for row in rows:
        lines.append("  " + "  ".join(c.ljust(widths[i]) for i, c in enumerate(row)).rstrip())
    return "\n".join(lines)
