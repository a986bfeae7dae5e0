"""Request bodies accepted by the API."""

from typing import Optional

from pydantic import BaseModel


class FavoriteRequest(BaseModel):
    """Body of ``POST /api/favorites``. ``id`` and ``title`` are checked by the route."""

    id: Optional[str] = None
    title: Optional[str] = None
    thumbnail: Optional[str] = None
    channel: Optional[str] = None
