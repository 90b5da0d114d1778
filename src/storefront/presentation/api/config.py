"""API configuration adapter.

Bridges the centralized storefront_config settings with the API layer.
"""

from fastapi import Request

from storefront_config.settings import Settings, get_settings


def get_api_settings(request: Request) -> Settings:
    """Get the settings the application was created with.

    Falls back to the centralized configuration when the app was built
    without an explicit override.
    """
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()
