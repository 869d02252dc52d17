"""
Canvas API Layer.

This package handles all communication with the Canvas LMS REST API.
"""

from .client import CanvasAPIClient

__all__ = ["CanvasAPIClient"]
