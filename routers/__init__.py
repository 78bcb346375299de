"""
Router package initialization
"""

from .auth import router as auth_router
from .stores import router as stores_router
from .location import router as location_router

__all__ = ["auth_router", "stores_router", "location_router"]
