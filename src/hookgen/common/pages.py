"""Static page helpers."""
from __future__ import annotations
from pathlib import Path

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

def load_page(name: str = "index.html") -> str:
    """
    Load a packaged HTML page.

    Args:
        name: File name under hookgen/static.
    """
    return (STATIC_DIR / name).read_text(encoding="utf-8")
