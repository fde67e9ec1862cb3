"""
API Routes Module

This module contains the API endpoint implementations:
- twin.py: status, dashboard, validation, control and simulation endpoints

All routers are combined in main.py to create the complete API.
"""

from .twin import router as twin_router

__all__ = [
    "twin_router",
]
