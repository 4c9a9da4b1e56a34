"""
ShelfLink - FastAPI Backend.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_service_container,
    get_current_user_id,
    ServiceContainer,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_service_container",
    "get_current_user_id",
    "ServiceContainer",
]
