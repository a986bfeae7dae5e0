"""Single video lookup."""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from ...exceptions import SearchError
from ..deps import AppContext, get_context

router = APIRouter()


@router.get("/video/{video_id}")
def video_details(video_id: str, context: AppContext = Depends(get_context)):
    if not video_id.strip():
        raise HTTPException(400, "Video ID is required")
    try:
        video = context.extractor.video_details(video_id)
    except (SearchError, ValueError) as exc:
        logger.error(f"Video details error: {exc}")
        raise HTTPException(500, str(exc)) from exc
    return {"success": True, "data": video.to_dict()}
