"""Search endpoint backed by the YouTube extractor."""

import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from ...exceptions import SearchError
from ..deps import AppContext, get_context

router = APIRouter()

MAX_RESULTS_LIMIT = 100
LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_max_results(raw: Optional[str], default: int) -> int:
    """Read the leading integer of ``raw``, so "10abc" is 10 and "5.5" is 5."""
    if raw is None:
        return default
    match = LEADING_INT.match(raw)
    value = int(match.group(1)) if match else 0
    if value < 1 or value > MAX_RESULTS_LIMIT:
        raise HTTPException(400, 'Parameter "max" must be between 1 and 100')
    return value


@router.get("/search")
def search_videos(
    q: Optional[str] = Query(None),
    max_results: Optional[str] = Query(None, alias="max"),
    context: AppContext = Depends(get_context),
):
    if not q or not q.strip():
        raise HTTPException(400, 'Query parameter "q" is required')
    limit = _parse_max_results(max_results, context.default_search_limit)

    try:
        videos = context.extractor.search(q, limit)
    except (SearchError, ValueError) as exc:
        logger.error(f"Search error: {exc}")
        raise HTTPException(500, str(exc)) from exc

    data = [video.to_dict() for video in videos]
    return {"success": True, "data": data, "count": len(data)}
