"""Per-face failure conditions raised inside the localisation pipeline."""


class IrisLocatorError(Exception):
    """Base class for face-level failures; the orchestrator skips the face."""


class InvalidRegion(IrisLocatorError):
    """Face box is degenerate or lies outside the image."""


class EmptySearchSpace(IrisLocatorError):
    """Cropped region cannot hold a single search window."""
