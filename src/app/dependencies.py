from fastapi import Depends, Request
from common.errors import ConfigurationError
from common.settings import Settings
from providers.base import ProviderClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_api_key(settings: Settings = Depends(get_settings)) -> Settings:
    # checked before any provider call is attempted
    if not settings.has_api_key:
        raise ConfigurationError(
            "Please set DOCUSEAL_API_KEY in environment variables",
            error="DocuSeal API key not configured",
        )
    return settings


def get_provider(request: Request) -> ProviderClient:
    return request.app.state.provider
