from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from campaign_feed.api.deps import get_exporter, get_filtered_records, get_query_service
from campaign_feed.domain.models import CampaignResponse
from campaign_feed.services import ResponseExporter, ResponseQueryService

router = APIRouter(prefix="/responses", tags=["Responses"])


@router.get("")
def list_responses(records: List[CampaignResponse] = Depends(get_filtered_records)):
    """Mapped responses, newest first, narrowed by the optional filters."""
    return {
        "count": len(records),
        "rows": [r.model_dump(by_alias=True, mode="json") for r in records],
    }


@router.get("/summary")
def responses_summary(
    records: List[CampaignResponse] = Depends(get_filtered_records),
    query_service: ResponseQueryService = Depends(get_query_service),
):
    return query_service.summary(records)


@router.get("/export")
def export_responses(
    records: List[CampaignResponse] = Depends(get_filtered_records),
    exporter: ResponseExporter = Depends(get_exporter),
):
    return Response(
        content=exporter.to_csv(records),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="campaign_responses.csv"'},
    )
