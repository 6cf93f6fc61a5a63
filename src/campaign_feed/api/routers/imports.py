from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from campaign_feed.api.deps import get_sync_service, require_auth
from campaign_feed.config import settings
from campaign_feed.sync import SyncService

router = APIRouter(prefix="/imports", tags=["Imports"])


@router.post("/csv")
async def import_csv(
    file: UploadFile = File(...),
    sync_service: SyncService = Depends(get_sync_service),
    _auth=Depends(require_auth),
):
    """Replaces the loaded responses with an uploaded CSV export of the sheet."""
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    content = await file.read()
    max_bytes = settings.security.max_upload_bytes
    if max_bytes and len(content) > max_bytes:
        raise HTTPException(status_code=413, detail=f"File too large; max {settings.security.max_upload_mb}MB")

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=422, detail="CSV must be UTF-8 encoded")

    records = sync_service.load_text(text, source=f"upload:{file.filename}")
    return {"records": len(records)}
