from typing import Any, Dict
from pipeline.state import ReconcileState
from schema.defaults import loader as defaults_loader

# Caller values for these keys are ignored; every submission goes out with them.
FIXED_FIELDS: Dict[str, Any] = {
    "send_email": False,
    "send_sms": False,
    "order": "preserved",
    "merge_documents": False,
    "remove_tags": True,
}

CALLER_FIELDS = ("name", "documents", "submitters", "expire_at")

# Defaults a caller may replace when it sends a non-null value.
OVERRIDABLE_FIELDS = ("message", "completed_redirect_url", "bcc_completed", "reply_to")


def build_submission_payload(request: Dict[str, Any], provider: str = "docuseal") -> Dict[str, Any]:
    payload = defaults_loader.load_defaults(provider)
    for field in CALLER_FIELDS:
        payload[field] = request.get(field)
    for field in OVERRIDABLE_FIELDS:
        if request.get(field) is not None:
            payload[field] = request[field]
    payload.update(FIXED_FIELDS)
    return payload


def build_payload_node(state: ReconcileState) -> Dict[str, Any]:
    return {"payload": build_submission_payload(state.request)}
