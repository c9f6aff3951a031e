"""passportscan — batch passport scanning, normalization and export."""

from passportscan.version import __version__

__all__ = ["__version__"]
