"""
Configuration module for the Memegen MCP Server.

This module handles all environment variable loading and configuration settings.
The upstream memegen.link endpoint and the transport settings are configured here.
"""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values can be overridden via environment variables or a .env file.
    """

    # ==========================================================================
    # APPLICATION SETTINGS
    # ==========================================================================

    APP_NAME: str = "memegen-mcp-server"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Root logger level. DEBUG=true forces DEBUG regardless of this value.
    LOG_LEVEL: str = "INFO"

    # ==========================================================================
    # MEMEGEN API SETTINGS
    # ==========================================================================

    # Base URL of the public memegen.link API. Template lookups and generated
    # image URLs are both rooted here.
    MEMEGEN_API_BASE: str = "https://api.memegen.link"

    # ==========================================================================
    # HTTP TRANSPORT SETTINGS (memegen-mcp-http only)
    # ==========================================================================

    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Comma-separated list of allowed origins, e.g.
    # "https://your-frontend.com,https://www.your-frontend.com"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS string into a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def log_level(self) -> int:
        """Resolve the numeric logging level."""
        if self.DEBUG:
            return logging.DEBUG
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO

    class Config:
        # Load settings from .env file if it exists
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once
    and reused across the application.

    Returns:
        Settings: The application settings instance
    """
    return Settings()
