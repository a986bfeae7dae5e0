"""Configuration helpers that read runtime defaults from the environment."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

PACKAGE_ROOT = Path(__file__).resolve().parents[1]


def _guess_user_root() -> Path:
    cwd = Path.cwd().resolve()
    if (cwd / ".env").exists() or (cwd / "data").exists():
        return cwd
    return PACKAGE_ROOT


USER_ROOT = _guess_user_root()

if os.getenv("TUBEPLAY_SKIP_DOTENV") != "1":
    load_dotenv(dotenv_path=USER_ROOT / ".env")


def _env_path(env_var: str, fallback: Path) -> Path:
    value = os.getenv(env_var)
    if not value:
        return fallback
    candidate = Path(value).expanduser()
    if candidate.is_absolute():
        return candidate
    return (USER_ROOT / candidate).resolve()


def _env_list(env_var: str) -> List[str]:
    value = os.getenv(env_var)
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _env_int(env_var: str, default: int) -> int:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_float(env_var: str, default: float) -> float:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _detect_js_runtime() -> Optional[str]:
    for candidate in ("node", "deno"):
        if shutil.which(candidate):
            return candidate
    return None


@dataclass(frozen=True)
class PlayerDefaults:
    api_host: str
    api_port: int
    api_url: str
    data_dir: Path
    favorites_file: Path
    state_file: Path
    page_size: int
    search_limit: int
    allowed_origins: List[str]
    js_runtime: Optional[str]
    remote_components: List[str]
    log_level: str
    log_file: Optional[Path]
    request_timeout: float


def load_defaults() -> PlayerDefaults:
    host = os.getenv("TUBEPLAY_API_HOST", "127.0.0.1")
    port = _env_int("TUBEPLAY_API_PORT", 3000)
    data_dir = _env_path("TUBEPLAY_DATA_DIR", USER_ROOT / "data")
    log_file = os.getenv("TUBEPLAY_LOG_FILE")
    return PlayerDefaults(
        api_host=host,
        api_port=port,
        api_url=os.getenv("TUBEPLAY_API_URL", f"http://{host}:{port}").rstrip("/"),
        data_dir=data_dir,
        favorites_file=_env_path("TUBEPLAY_FAVORITES_FILE", data_dir / "favorites.json"),
        state_file=_env_path("TUBEPLAY_STATE_FILE", data_dir / "player_state.json"),
        page_size=max(1, _env_int("TUBEPLAY_PAGE_SIZE", 20)),
        search_limit=min(100, max(1, _env_int("TUBEPLAY_SEARCH_LIMIT", 100))),
        allowed_origins=_env_list("TUBEPLAY_ALLOWED_ORIGINS"),
        js_runtime=os.getenv("TUBEPLAY_JS_RUNTIME") or _detect_js_runtime(),
        remote_components=_env_list("TUBEPLAY_REMOTE_COMPONENTS"),
        log_level=os.getenv("TUBEPLAY_LOG_LEVEL", "INFO").upper(),
        log_file=_env_path("TUBEPLAY_LOG_FILE", Path()) if log_file else None,
        request_timeout=_env_float("TUBEPLAY_REQUEST_TIMEOUT", 15.0),
    )
