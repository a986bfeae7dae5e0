import time

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health_check():
    return {"status": "ok", "timestamp": int(time.time() * 1000)}
