from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class CampaignResponse(BaseModel):
    """
    One normalized sheet row. JSON field names are camelCase (photoUrls, extraFields, ...).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    timestamp: datetime  # sort key only, UTC
    date_of_drive: str
    name: str
    location: str
    message: str = ""
    staff_involved: str = ""
    pamphlets_used: str = ""
    photo_urls: Tuple[str, ...] = ()
    video_urls: Tuple[str, ...] = ()
    sentiment: Sentiment = Sentiment.NEUTRAL
    # Plain dict: frozen=True blocks reassignment only, so callers must not edit it in place.
    extra_fields: Dict[str, str] = Field(default_factory=dict)

    @property
    def has_media(self) -> bool:
        return bool(self.photo_urls or self.video_urls)


class DateRange(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    start_date: Optional[date] = None
    end_date: Optional[date] = None


class FilterState(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    date_range: DateRange = Field(default_factory=DateRange)
    search_query: str = ""
    has_media: bool = False
