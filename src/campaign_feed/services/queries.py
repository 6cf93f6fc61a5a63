from collections import Counter
from typing import Dict, Iterable, List

from campaign_feed.domain.models import CampaignResponse, FilterState, Sentiment


class ResponseQueryService:
    """
    Client-side style filtering and light aggregates over mapped responses.
    """

    @staticmethod
    def matches(record: CampaignResponse, state: FilterState) -> bool:
        day = record.timestamp.date()
        if state.date_range.start_date and day < state.date_range.start_date:
            return False
        if state.date_range.end_date and day > state.date_range.end_date:
            return False

        if state.search_query:
            query = state.search_query.lower()
            haystack = (record.name, record.message, record.location)
            if not any(query in field.lower() for field in haystack):
                return False

        if state.has_media and not record.has_media:
            return False
        return True

    def filter(self, records: Iterable[CampaignResponse], state: FilterState) -> List[CampaignResponse]:
        return [r for r in records if self.matches(r, state)]

    def summary(self, records: Iterable[CampaignResponse], top_n: int = 10) -> Dict:
        records = list(records)
        sentiments = Counter(r.sentiment for r in records)
        locations = Counter(r.location for r in records)
        return {
            "total": len(records),
            "sentiment": {s.value: sentiments.get(s, 0) for s in Sentiment},
            "with_media": sum(1 for r in records if r.has_media),
            "photos": sum(len(r.photo_urls) for r in records),
            "videos": sum(len(r.video_urls) for r in records),
            "top_locations": [{"location": loc, "responses": cnt} for loc, cnt in locations.most_common(top_n)],
        }
