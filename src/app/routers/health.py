from datetime import datetime, timezone
from fastapi import APIRouter

SERVICE_NAME = "DocuSeal Signature API"
VERSION = "1.0.0"

router = APIRouter()

@router.get("/health")
def healthcheck():
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": VERSION,
    }
