# url_inventory/__init__.py
"""
URL Inventory package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

from url_inventory.cli import cli  # noqa: E402

__all__ = ["__version__", "cli"]
