from campaign_feed.sync.provider import GoogleSheetsCsvProvider, SheetsProvider, extract_sheet_id
from campaign_feed.sync.service import SyncService

__all__ = [
    "GoogleSheetsCsvProvider",
    "SheetsProvider",
    "SyncService",
    "extract_sheet_id",
]
