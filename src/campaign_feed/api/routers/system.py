from fastapi import APIRouter

from campaign_feed.config import settings

router = APIRouter(tags=["System"])


@router.get("/health")
def health():
    return {"status": "ok", "version": settings.app.version}
