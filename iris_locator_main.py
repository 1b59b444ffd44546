#!/usr/bin/env python3
"""Compatibility shim for the iris locator CLI entry point."""

import sys

from app.cli import IrisLocatorApp, main

__all__ = ["IrisLocatorApp", "main"]


if __name__ == "__main__":
    sys.exit(main())
