"""
Central version management for Games In Common.
"""

from __future__ import annotations

__all__ = ["__app_name__", "__version__"]

__app_name__ = "Games In Common"
__version__ = "1.0.0"
