# src/providers/base.py
from __future__ import annotations
from typing import Any, Dict, Optional
from pydantic import BaseModel
from common.settings import Settings


class ProviderResult(BaseModel):
    """Normalized outcome of one provider call. Clients return it, they never raise."""
    success: bool
    status: int
    data: Any = None
    error: Any = None


class ProviderClient:
    name = "base"

    async def call(
        self,
        method: str,
        endpoint: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ProviderResult:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


def get_client(settings: Settings) -> ProviderClient:
    from .docuseal import DocuSealClient
    return DocuSealClient.from_settings(settings)
