import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from providers.base import ProviderClient, ProviderResult


def ok(data: Any = None, status: int = 200) -> ProviderResult:
    return ProviderResult(success=True, status=status, data=data)


def fail(status: int, error: Any = None) -> ProviderResult:
    return ProviderResult(success=False, status=status, error=error or {"error": f"status {status}"})


class FakeProvider(ProviderClient):
    """Records every call and answers from a routing function."""
    name = "fake"

    def __init__(self, route: Callable[[str, str, Optional[dict], Optional[dict]], Any]):
        self.route = route
        self.calls: List[Tuple[str, str, Optional[dict], Optional[dict]]] = []

    async def call(self, method, endpoint, body=None, params=None):
        self.calls.append((method, endpoint, body, params))
        out = self.route(method, endpoint, body, params)
        if asyncio.iscoroutine(out):
            out = await out
        if isinstance(out, BaseException):
            raise out
        return out

    def calls_for(self, method: str) -> List[Tuple[str, str, Optional[dict], Optional[dict]]]:
        return [c for c in self.calls if c[0] == method]


def docuseal_router(
    submissions: List[Dict[str, Any]],
    lookup: Optional[ProviderResult] = None,
    deletes: Optional[Dict[Any, Any]] = None,
    create: Optional[ProviderResult] = None,
    records: Optional[Dict[Any, ProviderResult]] = None,
):
    deletes = deletes or {}
    records = records or {}

    def route(method, endpoint, body, params):
        if method == "GET" and endpoint == "/submissions":
            return lookup or ok({"data": submissions, "pagination": {}})
        if method == "DELETE":
            sid = endpoint.rsplit("/", 1)[-1]
            return deletes.get(sid) or ok({"id": sid, "archived_at": "2026-01-01T00:00:00Z"})
        if method == "POST" and endpoint == "/submissions/pdf":
            return create or ok({"id": 99, "name": body.get("name"), "submitters": body.get("submitters")})
        if method == "GET" and endpoint.startswith("/submissions/"):
            sid = endpoint.rsplit("/", 1)[-1]
            return records.get(sid) or ok({"id": int(sid), "status": "pending"})
        raise AssertionError(f"unexpected call {method} {endpoint}")

    return route


@pytest.fixture
def submit_request() -> Dict[str, Any]:
    return {
        "id": "contract-42",
        "name": "Contract 42",
        "documents": [{"name": "contract.pdf", "file": "JVBERi0xLjQK"}],
        "submitters": [{"role": "First Party", "email": "signer@example.com"}],
        "expire_at": "2026-12-31 00:00:00 UTC",
    }
