from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import Depends, Header, HTTPException, Query

from campaign_feed.ai import InsightService, build_ai_client
from campaign_feed.config import settings
from campaign_feed.domain.models import CampaignResponse, DateRange, FilterState
from campaign_feed.services import ResponseExporter, ResponseQueryService
from campaign_feed.sync import GoogleSheetsCsvProvider, SyncService

# Global/Cached instances
_sync_instance: Optional[SyncService] = None
_insight_instance: Optional[InsightService] = None


def get_sync_service() -> SyncService:
    global _sync_instance
    if _sync_instance is None:
        provider = GoogleSheetsCsvProvider(
            service_account_file=settings.sheets.service_account_file,
            api_key=settings.sheets.api_key,
            sheet_name=settings.sheets.sheet_name,
            max_retries=settings.sheets.max_retries,
            backoff_seconds=settings.sheets.backoff_seconds,
            timeout=settings.sheets.timeout_seconds,
        )
        _sync_instance = SyncService(
            provider=provider,
            sheet_id=settings.sheets.sheet_id,
            cache_dir=settings.paths.cache_dir,
        )
    return _sync_instance


def get_query_service() -> ResponseQueryService:
    return ResponseQueryService()


def get_exporter() -> ResponseExporter:
    return ResponseExporter()


def get_insight_service() -> InsightService:
    global _insight_instance
    if _insight_instance is None:
        _insight_instance = InsightService(ai_client=build_ai_client(settings))
    return _insight_instance


def get_filter_state(
    start_date: Optional[date] = Query(None, description="Inclusive lower bound (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Inclusive upper bound (YYYY-MM-DD)"),
    q: str = Query("", description="Case-insensitive search over name, message and location"),
    has_media: bool = Query(False, description="Only responses with at least one photo or video"),
) -> FilterState:
    return FilterState(
        date_range=DateRange(start_date=start_date, end_date=end_date),
        search_query=q,
        has_media=has_media,
    )


def get_records(sync_service: SyncService = Depends(get_sync_service)) -> List[CampaignResponse]:
    # First request triggers the initial sheet load.
    if not sync_service.status:
        sync_service.sync()
    return sync_service.records


def get_filtered_records(
    records: List[CampaignResponse] = Depends(get_records),
    state: FilterState = Depends(get_filter_state),
    query_service: ResponseQueryService = Depends(get_query_service),
) -> List[CampaignResponse]:
    return query_service.filter(records, state)


def require_auth(
    authorization: Optional[str] = Header(None),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
):
    token = settings.security.api_token
    if not token:
        return

    if authorization == f"Bearer {token}" or authorization == f"Token {token}" or x_api_key == token:
        return

    raise HTTPException(status_code=401, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})
