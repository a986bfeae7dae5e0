"""Download hand-off: the server only returns the watch URL and external tools."""

from fastapi import APIRouter, HTTPException

from ...track import watch_url

router = APIRouter()

DOWNLOAD_TOOLS = (
    {"name": "yt-dlp", "url": "https://github.com/yt-dlp/yt-dlp"},
    {"name": "4K Video Downloader", "url": "https://www.4kdownload.com/"},
)


@router.get("/download/")
def download_missing_id():
    raise HTTPException(400, "Video ID is required")


@router.get("/download/{video_id}")
def download_info(video_id: str):
    if not video_id.strip():
        raise HTTPException(400, "Video ID is required")
    youtube_url = watch_url(video_id)
    suggestions = [dict(tool) for tool in DOWNLOAD_TOOLS]
    suggestions.append({"name": "Copy link and paste to downloader", "link": youtube_url})
    return {
        "success": True,
        "videoId": video_id,
        "youtubeUrl": youtube_url,
        "message": "Use external tools to download",
        "suggestions": suggestions,
    }
