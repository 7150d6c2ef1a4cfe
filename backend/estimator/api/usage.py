"""
Usage Intelligence API Endpoints

The history feed is pushed in (jobs and/or invoices as stored documents);
queries read the last published usage index.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from estimator.api.deps import IntelligenceStore


router = APIRouter(prefix="/usage", tags=["usage"])


class HistoryFeedRequest(BaseModel):
    """
    Latest history feed. A missing list leaves that half of the feed
    unchanged; an empty list clears it. Entries that are not valid documents
    are skipped.
    """
    jobs: Optional[List[Any]] = Field(None, description="Job documents")
    invoices: Optional[List[Any]] = Field(None, description="Invoice documents")


def _stats_response(stats) -> Dict[str, Any]:
    return {"count": len(stats), "materials": [entry.to_dict() for entry in stats]}


@router.post("/history")
def push_history(
    request: HistoryFeedRequest,
    store: IntelligenceStore,
    sync: bool = Query(False, description="Rebuild before responding"),
) -> Dict[str, Any]:
    """
    Push the latest jobs/invoices feed.

    The usage index is rebuilt in the background after a short debounce, or
    inline when sync=true.
    """
    decoded = {}
    if request.jobs is not None:
        decoded["jobs"] = store.update_jobs(request.jobs)
    if request.invoices is not None:
        decoded["invoices"] = store.update_invoices(request.invoices)

    response: Dict[str, Any] = {"decoded": decoded, "status": "scheduled"}
    if sync:
        index = store.rebuild_now()
        response["status"] = "rebuilt"
        response["material_count"] = len(index)
    return response


@router.delete("/history")
async def clear_history(store: IntelligenceStore) -> Dict[str, Any]:
    """Drop all history and publish an empty index."""
    store.clear()
    return {"status": "cleared"}


@router.get("/frequent")
async def frequently_used(
    store: IntelligenceStore,
    limit: Optional[int] = Query(None, ge=0),
) -> Dict[str, Any]:
    """Most used materials, most recent first on ties."""
    return _stats_response(store.frequently_used(limit))


@router.get("/job-types/{job_type}")
async def materials_for_job_type(
    job_type: str,
    store: IntelligenceStore,
    limit: Optional[int] = Query(None, ge=0),
) -> Dict[str, Any]:
    """Materials used on jobs whose type contains job_type."""
    return _stats_response(store.materials_for_job_type(job_type, limit))


@router.get("/paired")
async def commonly_used_with(
    store: IntelligenceStore,
    name: str = Query(..., min_length=1, description="Material name"),
    limit: Optional[int] = Query(None, ge=0),
) -> Dict[str, Any]:
    """Materials most often used on the same job/invoice as name."""
    return _stats_response(store.commonly_used_with(name, limit))
