from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from campaign_feed.api.deps import get_sync_service, require_auth
from campaign_feed.config import settings
from campaign_feed.sync import SyncService, extract_sheet_id

router = APIRouter(prefix="/sync", tags=["Sync"])


@router.post("")
def sync_sheet(
    sheet: Optional[str] = Query(None, description="Google Sheet URL or id; defaults to the configured sheet"),
    sync_service: SyncService = Depends(get_sync_service),
    _auth=Depends(require_auth),
):
    if not settings.sheets.enabled:
        raise HTTPException(status_code=400, detail="Google sync is disabled in settings.")

    sheet_id = None
    if sheet:
        sheet_id = extract_sheet_id(sheet)
        if not sheet_id:
            raise HTTPException(status_code=400, detail="Invalid Google Sheet URL or ID")

    records = sync_service.sync(sheet_id=sheet_id)
    return {"records": len(records), "status": sync_service.get_status()}


@router.get("/status")
def sync_status(sync_service: SyncService = Depends(get_sync_service)):
    return sync_service.get_status()
