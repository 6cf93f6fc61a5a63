from campaign_feed.services.exporter import ResponseExporter
from campaign_feed.services.queries import ResponseQueryService

__all__ = ["ResponseExporter", "ResponseQueryService"]
