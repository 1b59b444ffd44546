#!/usr/bin/env python3
"""
Entropy-based Iris Locator
Init file for the iris_locator package

Created: 2025
"""

from .types import FaceRegion, SearchWindow, IrisPair
from .errors import IrisLocatorError, InvalidRegion, EmptySearchSpace
from .config_manager import ConfigManager, SearchConfig
from .face_detector import FaceDetector
from .iris_locator import IrisLocator, locate_irises

__version__ = "1.0.0"
__author__ = "Iris Locator Python Team"

__all__ = [
    'FaceRegion',
    'SearchWindow',
    'IrisPair',
    'IrisLocatorError',
    'InvalidRegion',
    'EmptySearchSpace',
    'ConfigManager',
    'SearchConfig',
    'FaceDetector',
    'IrisLocator',
    'locate_irises'
]
