import asyncio
import logging
from typing import Any, Dict, List
from pipeline.state import ReconcileState, DeletionOutcome
from providers.base import ProviderClient, ProviderResult

logger = logging.getLogger(__name__)


def _outcome(submission_id: Any, settled: Any) -> DeletionOutcome:
    if isinstance(settled, BaseException):
        return DeletionOutcome(id=submission_id, status="rejected", reason={"message": str(settled) or type(settled).__name__})
    if isinstance(settled, ProviderResult) and settled.success:
        return DeletionOutcome(id=submission_id, status="fulfilled", value=settled)
    reason = settled.model_dump() if isinstance(settled, ProviderResult) else settled
    return DeletionOutcome(id=submission_id, status="rejected", reason=reason)


async def delete_all(client: ProviderClient, submissions: List[Dict[str, Any]]) -> List[DeletionOutcome]:
    """
    Permanently delete every submission concurrently and wait for all of them
    to settle. One failure never cancels its siblings; results come back in the
    same order as `submissions`.
    """
    ids = [s.get("id") for s in submissions]
    settled = await asyncio.gather(
        *(client.call("DELETE", f"/submissions/{sid}", params={"permanently": "true"}) for sid in ids),
        return_exceptions=True,
    )
    outcomes = [_outcome(sid, res) for sid, res in zip(ids, settled)]
    rejected = sum(1 for o in outcomes if o.status == "rejected")
    if rejected:
        logger.warning("%d of %d deletion(s) rejected", rejected, len(outcomes))
    return outcomes


async def delete_node(state: ReconcileState, client: ProviderClient) -> Dict[str, Any]:
    return {"deleted": await delete_all(client, state.submissions)}
