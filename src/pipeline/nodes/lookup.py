import logging
from typing import Any, Dict, List, Tuple
from pipeline.state import ReconcileState, SubmissionQuery, LOOKUP_FAILED
from providers.base import ProviderClient, ProviderResult

logger = logging.getLogger(__name__)


def extract_submissions(data: Any) -> List[Dict[str, Any]]:
    # DocuSeal wraps list responses as {"data": [...], "pagination": {...}}
    if isinstance(data, dict):
        return list(data.get("data") or [])
    if isinstance(data, list):
        return data
    return []


async def fetch_submissions(client: ProviderClient, query: SubmissionQuery) -> Tuple[ProviderResult, List[Dict[str, Any]]]:
    result = await client.call("GET", "/submissions", params=query.params())
    if not result.success:
        return result, []
    return result, extract_submissions(result.data)


async def lookup_node(state: ReconcileState, client: ProviderClient) -> Dict[str, Any]:
    result, submissions = await fetch_submissions(client, state.query)
    if not result.success:
        logger.warning("lookup for %r failed with status %s", state.query.key, result.status)
        return {"failure": result, "failed_stage": "lookup", "message": LOOKUP_FAILED}
    logger.info("lookup for %r matched %d submission(s)", state.query.key, len(submissions))
    return {"submissions": submissions}
