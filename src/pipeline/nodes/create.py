import logging
from typing import Any, Dict
from pipeline.state import ReconcileState, CREATE_FAILED
from providers.base import ProviderClient

logger = logging.getLogger(__name__)


async def create_node(state: ReconcileState, client: ProviderClient) -> Dict[str, Any]:
    result = await client.call("POST", "/submissions/pdf", body=state.payload)
    if not result.success:
        # deletions already happened and stay happened; only report them
        logger.warning("creating submission %r failed with status %s after %d deletion(s)",
                       state.payload.get("name"), result.status, len(state.deleted))
        return {"failure": result, "failed_stage": "create", "message": CREATE_FAILED}
    return {"submission": result.data}
