"""Application entry points for the Iris Locator project."""

from .cli import IrisLocatorApp, main

__all__ = ["IrisLocatorApp", "main"]
