"""HTTP API server exposing search, video lookup, favorites and download links."""

from .app import create_app
from .deps import AppContext

__all__ = ["AppContext", "create_app"]
