# src/providers/docuseal.py
# DocuSeal REST client matching the base.py interface:
#   call(method, endpoint, body, params) -> ProviderResult
#
# Every outcome, transport errors included, comes back as a ProviderResult so
# the pipeline can branch on .success without exception handling.

from __future__ import annotations
from typing import Any, Dict, Optional
import logging
import httpx
from common.settings import Settings
from .base import ProviderClient, ProviderResult

logger = logging.getLogger(__name__)

USER_AGENT = "docuseal-gateway/1.0"


def _parse_body(r: httpx.Response) -> Any:
    if not r.content:
        return None
    try:
        return r.json()
    except ValueError:
        return r.text


class DocuSealClient(ProviderClient):
    name = "docuseal"

    def __init__(self, *, base_url: str, api_key: Optional[str], timeout: float = 30.0,
                 http: Optional[httpx.AsyncClient] = None):
        self.base = base_url.rstrip("/")
        self.api_key = (api_key or "").strip()
        self._http = http or httpx.AsyncClient(base_url=self.base, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "DocuSealClient":
        return cls(base_url=settings.api_base, api_key=settings.api_key, timeout=settings.timeout)

    # ---------- helpers ----------
    def _headers(self) -> Dict[str, str]:
        return {
            "X-Auth-Token": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    # ---------- public interface ----------
    async def call(
        self,
        method: str,
        endpoint: str,
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> ProviderResult:
        method = method.upper()
        try:
            r = await self._http.request(method, endpoint, json=body, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error("DocuSeal API error: %s %s -> %s: %s", method, endpoint, type(e).__name__, e)
            return ProviderResult(success=False, status=500, error={"message": str(e) or type(e).__name__})

        payload = _parse_body(r)
        if r.status_code // 100 == 2:
            return ProviderResult(success=True, status=r.status_code, data=payload)

        if payload is None or isinstance(payload, str):
            error: Any = {"message": payload or f"Request failed with status code {r.status_code}"}
        else:
            error = payload
        logger.error("DocuSeal API error: %s %s -> %s: %s", method, endpoint, r.status_code, error)
        return ProviderResult(success=False, status=r.status_code, error=error)

    async def aclose(self) -> None:
        await self._http.aclose()
