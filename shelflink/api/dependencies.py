"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Service instances (repository, link repair)
- Current user (forwarded by the upstream auth provider)
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request

from shelflink.errors import AuthenticationError


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./shelflink.db"
    database_echo: bool = False

    # Auth: header carrying the user id set by the auth provider
    user_id_header: str = "X-User-Id"

    # Environment
    environment: str = "development"
    debug: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
            user_id_header=os.getenv("USER_ID_HEADER", cls.user_id_header),
            environment=os.getenv("SHELFLINK_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Dependencies (Lazy Loading)
# =============================================================================

class ServiceContainer:
    """
    Container for lazy-loaded service instances.

    Services are initialized on first access to avoid startup delays.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._link_repository = None
        self._link_repair_service = None

    @property
    def link_repository(self):
        """Get link repository instance."""
        if self._link_repository is None:
            from ..storage.link_repository import LinkRepository
            self._link_repository = LinkRepository(
                self.settings.database_url,
                echo=self.settings.database_echo,
            )
        return self._link_repository

    @property
    def link_repair_service(self):
        """Get link repair service instance."""
        if self._link_repair_service is None:
            from ..linking.service import LinkRepairService
            self._link_repair_service = LinkRepairService(self.link_repository)
        return self._link_repair_service

    def close(self) -> None:
        """Release the database engine, if one was created."""
        if self._link_repository is not None:
            self._link_repository.engine.dispose()
            self._link_repository = None
            self._link_repair_service = None


_service_container: Optional[ServiceContainer] = None


def init_services(settings: Settings) -> ServiceContainer:
    """Initialize service container."""
    global _service_container
    _service_container = ServiceContainer(settings)
    return _service_container


def get_service_container() -> ServiceContainer:
    """Get service container instance."""
    if _service_container is None:
        # Auto-initialize with default settings if not explicitly initialized
        return init_services(get_settings())
    return _service_container


def get_link_repair_service(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for link repair service."""
    return container.link_repair_service


# =============================================================================
# Authentication
# =============================================================================

def get_current_user_id(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Resolve the current user from the auth provider's forwarded header.

    Raises:
        AuthenticationError: No user on the request
    """
    user_id = request.headers.get(settings.user_id_header, "").strip()
    if not user_id:
        raise AuthenticationError(detail=f"Missing {settings.user_id_header} header")
    return user_id
