"""Core infrastructure modules."""

from .global_paths import GlobalPath

__all__ = ["GlobalPath"]

# Settings live in .config to avoid circular imports with util.log
# To use: from ccstatusline.core.config import load_settings
