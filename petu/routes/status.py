from datetime import datetime, timezone

from fastapi import APIRouter

from petu.core.config import settings

router = APIRouter(tags=["status"])


@router.get("/")
def root():
    return {
        "app": settings.APP_NAME,
        "status": "online",
        "message": "Backend running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage": settings.STORAGE_BACKEND,
    }


@router.get("/api/test")
def test_endpoint():
    return {
        "success": True,
        "message": "Test OK",
        "serverTime": datetime.now(timezone.utc).isoformat(),
    }
