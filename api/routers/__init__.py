"""
API Routers for Pixel Transform
"""

from . import system, transform

__all__ = ["transform", "system"]
