"""
Utility helpers for reqtree.
"""

from .logging_config import CSVFormatter, ColoredFormatter, setup_logging

__all__ = ["setup_logging", "ColoredFormatter", "CSVFormatter"]
