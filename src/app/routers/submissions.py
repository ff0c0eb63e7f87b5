from __future__ import annotations
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional, Dict, Any, List, Union
from common.errors import ValidationError
from pipeline.graph import run_reconcile, run_purge, search, find_by_key
from providers.base import ProviderClient
from ..dependencies import get_provider, require_api_key

router = APIRouter(dependencies=[Depends(require_api_key)])


class SubmitAgreementRequest(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Union[str, int]
    documents: List[Dict[str, Any]]
    submitters: List[Dict[str, Any]]
    name: Optional[str] = None
    expire_at: Optional[str] = None
    archived: bool = False
    message: Optional[Dict[str, Any]] = None
    completed_redirect_url: Optional[str] = None
    bcc_completed: Optional[str] = None
    reply_to: Optional[str] = None

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("must not be blank")
        return v


@router.get("/submissions")
async def list_submissions(
    name: Optional[str] = Query(None, description="Provider-side search key"),
    archived: bool = Query(False),
    client: ProviderClient = Depends(get_provider),
):
    if not name:
        raise ValidationError("The 'name' query parameter is required.")
    return await search(client, name, archived=archived)


@router.get("/submissions/{name}")
async def get_submission(name: str, client: ProviderClient = Depends(get_provider)):
    if not name.strip():
        raise ValidationError("The 'name' path parameter is required.")
    record = await find_by_key(client, name)
    return record.data


@router.delete("/submissions")
async def purge_submissions(
    name: Optional[str] = Query(None, description="Only delete submissions matching this key"),
    client: ProviderClient = Depends(get_provider),
):
    report = await run_purge(client, name)
    if not report.ok:
        return JSONResponse(status_code=report.status, content=report.body())
    # 200 even when individual deletions were rejected; each carries its own status
    return {"deleted": [d.model_dump() for d in report.deleted]}


@router.post("/submit-agreement-with-signatures")
async def submit_agreement_with_signatures(
    req: SubmitAgreementRequest,
    client: ProviderClient = Depends(get_provider),
):
    report = await run_reconcile(client, req.id, req.model_dump())
    if not report.ok:
        return JSONResponse(status_code=report.status, content=report.body())
    return report.body()
