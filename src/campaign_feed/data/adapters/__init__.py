from campaign_feed.data.adapters.csv_rows import parse_csv_text
from campaign_feed.data.adapters.form_responses import CampaignRowMapper

__all__ = [
    "CampaignRowMapper",
    "parse_csv_text",
]
