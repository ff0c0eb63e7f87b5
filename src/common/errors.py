from __future__ import annotations
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from providers.base import ProviderResult


class GatewayError(Exception):
    """Base error; carries everything needed to render an error response."""
    status_code = 500

    def __init__(self, message: str, error: Any = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.error = error if error is not None else message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class ConfigurationError(GatewayError):
    status_code = 500


class NotFoundError(GatewayError):
    status_code = 404


class ValidationError(GatewayError):
    status_code = 400


class ProviderCallError(GatewayError):
    """A failed upstream call, surfaced with the upstream status when there is one."""

    def __init__(self, message: str, result: "ProviderResult"):
        super().__init__(message, error=result.error, status_code=result.status or 500)
        self.result = result
