"""Favorites CRUD over the JSON-file store."""

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from ...exceptions import FavoriteExistsError, FavoriteNotFoundError, FavoritesError
from ..deps import AppContext, get_context
from ..schemas import FavoriteRequest

router = APIRouter()


@router.get("/favorites")
def list_favorites(context: AppContext = Depends(get_context)):
    try:
        favorites = context.favorites.list()
    except FavoritesError as exc:
        logger.error(f"Error reading favorites: {exc}")
        raise HTTPException(500, "Failed to read favorites") from exc
    return {"success": True, "data": favorites, "count": len(favorites)}


@router.post("/favorites")
def add_favorite(body: FavoriteRequest, context: AppContext = Depends(get_context)):
    if not body.id or not body.title:
        raise HTTPException(400, "Video ID and title are required")
    try:
        entry = context.favorites.add(
            body.id, body.title, thumbnail=body.thumbnail, channel=body.channel
        )
    except FavoriteExistsError as exc:
        raise HTTPException(409, str(exc)) from exc
    except FavoritesError as exc:
        logger.error(f"Error adding favorite: {exc}")
        raise HTTPException(500, "Failed to add favorite") from exc
    return {"success": True, "data": entry}


@router.delete("/favorites/{video_id}")
def remove_favorite(video_id: str, context: AppContext = Depends(get_context)):
    if not video_id.strip():
        raise HTTPException(400, "Video ID is required")
    try:
        context.favorites.remove(video_id)
    except FavoriteNotFoundError as exc:
        raise HTTPException(404, str(exc)) from exc
    except FavoritesError as exc:
        logger.error(f"Error removing favorite: {exc}")
        raise HTTPException(500, "Failed to remove favorite") from exc
    return {"success": True, "message": "Video removed from favorites"}
