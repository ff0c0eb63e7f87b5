import logging
from typing import Dict, Any, List, Optional
from langgraph.graph import StateGraph, END
from common.errors import NotFoundError, ProviderCallError, ValidationError
from providers.base import ProviderClient, ProviderResult
from .state import ReconcileState, ReconciliationReport, SubmissionQuery
from .nodes.lookup import lookup_node, fetch_submissions
from .nodes.delete import delete_node
from .nodes.build_payload import build_payload_node
from .nodes.create import create_node

logger = logging.getLogger(__name__)

RECONCILE_LIMIT = 100
PURGE_LIMIT = 1000


def _after_lookup(state: ReconcileState) -> str:
    # deleting or creating without knowing the existing set is unsafe
    return "abort" if state.failure is not None else "continue"


def build_graph(client: ProviderClient, create: bool = True):
    """
    lookup -> delete_matches [-> build_payload -> create_submission]

    With create=False the graph stops after the deletions (purge).
    """
    async def lookup(state: ReconcileState):
        return await lookup_node(state, client)

    async def delete_matches(state: ReconcileState):
        return await delete_node(state, client)

    async def create_submission(state: ReconcileState):
        return await create_node(state, client)

    g = StateGraph(ReconcileState)
    g.add_node("lookup", lookup)
    g.add_node("delete_matches", delete_matches)

    g.set_entry_point("lookup")
    g.add_conditional_edges("lookup", _after_lookup, {"continue": "delete_matches", "abort": END})

    if create:
        g.add_node("build_payload", build_payload_node)
        g.add_node("create_submission", create_submission)
        g.add_edge("delete_matches", "build_payload")
        g.add_edge("build_payload", "create_submission")
        g.add_edge("create_submission", END)
    else:
        g.add_edge("delete_matches", END)

    return g.compile()


def _report(state: ReconcileState) -> ReconciliationReport:
    if state.failure is not None:
        return ReconciliationReport(
            deleted=state.deleted,
            error=state.failure.error,
            message=state.message,
            failed_stage=state.failed_stage,
            status=state.failure.status or 500,
        )
    return ReconciliationReport(submission=state.submission, deleted=state.deleted)


async def _run(client: ProviderClient, state: ReconcileState, create: bool) -> ReconciliationReport:
    app = build_graph(client, create=create)
    result = await app.ainvoke(state)
    # LangGraph may return a dict; coerce to ReconcileState for attribute access
    final_state = ReconcileState(**result) if isinstance(result, dict) else result
    return _report(final_state)


async def run_reconcile(client: ProviderClient, key: Any, request: Dict[str, Any]) -> ReconciliationReport:
    """Replace every submission matching `key` with one new submission built from `request`."""
    # an empty q matches every submission; only purge may run unfiltered
    if key is None or not str(key).strip():
        raise ValidationError("The 'id' field is required to replace submissions.")
    state = ReconcileState(query=SubmissionQuery(key=str(key), limit=RECONCILE_LIMIT), request=request)
    report = await _run(client, state, create=True)
    logger.info("reconcile %r: %d deletion(s), ok=%s", key, len(report.deleted), report.ok)
    return report


async def run_purge(client: ProviderClient, key: Optional[str] = None) -> ReconciliationReport:
    """Delete every submission matching `key`, or every submission when no key is given."""
    state = ReconcileState(query=SubmissionQuery(key=key or None, limit=PURGE_LIMIT))
    report = await _run(client, state, create=False)
    logger.info("purge %r: %d deletion(s), ok=%s", key, len(report.deleted), report.ok)
    return report


async def search(client: ProviderClient, key: str, archived: bool = False) -> List[Dict[str, Any]]:
    result, submissions = await fetch_submissions(client, SubmissionQuery(key=key, archived=archived, limit=RECONCILE_LIMIT))
    if not result.success:
        raise ProviderCallError("Failed to fetch submissions by name.", result)
    if not submissions:
        raise NotFoundError(f"No submissions found for name: {key}", error="No matching submissions found")
    return submissions


async def find_by_key(client: ProviderClient, key: str) -> ProviderResult:
    """Look up the first submission matching `key` and fetch its full record by id."""
    result, submissions = await fetch_submissions(client, SubmissionQuery(key=key, archived=False, limit=1))
    if not result.success:
        raise ProviderCallError("Failed to fetch submissions by name.", result)
    if not submissions:
        raise NotFoundError(f"No submissions found for name: {key}", error="No matching submissions found")
    record = await client.call("GET", f"/submissions/{submissions[0].get('id')}")
    if not record.success:
        raise ProviderCallError("Failed to fetch submission by ID.", record)
    return record
