"""
Transfer Layer.

This package is responsible for writing remote course files to disk.
"""

from .downloader import Downloader

__all__ = ["Downloader"]
