from dataclasses import dataclass

from campaign_feed.domain.models import CampaignResponse


@dataclass
class MappedRow:
    """Intermediate representation of a mapped sheet row, before assembly."""
    row_index: int
    record: CampaignResponse
    has_content: bool  # any of name/location/message found before placeholders
    date_parsed: bool
