from typing import List

from fastapi import APIRouter, Depends

from campaign_feed.ai import InsightService
from campaign_feed.api.deps import get_filtered_records, get_insight_service
from campaign_feed.domain.models import CampaignResponse

router = APIRouter(prefix="/insights", tags=["Insights"])


@router.post("")
def generate_insight(
    records: List[CampaignResponse] = Depends(get_filtered_records),
    service: InsightService = Depends(get_insight_service),
):
    """Executive summary of the (filtered) responses."""
    return service.generate(records)
