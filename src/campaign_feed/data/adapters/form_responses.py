import logging
from datetime import datetime
from typing import Any, Callable, List, Mapping, MutableSet, Optional, Tuple

from campaign_feed.data import media
from campaign_feed.data.dates import normalize_date
from campaign_feed.data.dto import MappedRow
from campaign_feed.data.field_mapper import FieldMapper
from campaign_feed.domain.models import CampaignResponse
from campaign_feed.logic.sentiment import SentimentClassifier

logger = logging.getLogger(__name__)


class CampaignRowMapper:
    """
    Maps one raw sheet row (header -> cell text, column order preserved) to a
    CampaignResponse.

    Known fields are resolved through FieldMapper aliases, every column left
    over is scanned for Drive links, and whatever is still unclaimed and
    non-empty lands in extra_fields. A column is claimed by exactly one of
    those three, never two.
    """

    def __init__(
        self,
        mapper: Optional[FieldMapper] = None,
        classifier: Optional[SentimentClassifier] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.mapper = mapper or FieldMapper()
        self.config = self.mapper.config
        self.classifier = classifier or SentimentClassifier(self.config.sentiment)
        self.now = now

    def map_row(self, row: Mapping[str, Any], index: int) -> MappedRow:
        consumed: set[str] = set()
        form = self.config.form

        raw_date = self.mapper.extract_field(row, "date", consumed)
        parsed_date = normalize_date(raw_date, now=self.now)

        name = self.mapper.extract_field(row, "name", consumed)
        location = self._extract_location(row, consumed)
        message = self.mapper.extract_field(row, "message", consumed)
        staff_involved = self.mapper.extract_field(row, "staff_involved", consumed)
        pamphlets_used = self.mapper.extract_field(row, "pamphlets_used", consumed)

        photo_ids, video_ids = self._scan_media(row, consumed)
        sentiment = self.classifier.classify(message, location)
        extra_fields = self._extra_fields(row, consumed)

        record = CampaignResponse(
            id=f"row-{index}",
            timestamp=parsed_date.timestamp,
            date_of_drive=raw_date or parsed_date.timestamp.date().isoformat(),
            name=name or form.name_placeholder,
            location=location or form.location.placeholder,
            message=message,
            staff_involved=staff_involved,
            pamphlets_used=pamphlets_used,
            photo_urls=media.photo_urls(photo_ids, self.config.media),
            video_urls=media.video_urls(video_ids, self.config.media),
            sentiment=sentiment,
            extra_fields=extra_fields,
        )
        return MappedRow(
            row_index=index,
            record=record,
            has_content=bool(name or location or message),
            date_parsed=parsed_date.parsed,
        )

    def _extract_location(self, row: Mapping[str, Any], consumed: MutableSet[str]) -> str:
        location = self.mapper.extract_field(row, "location", consumed)
        skip = {t.lower() for t in self.config.form.not_applicable_tokens}
        for column in self.mapper.location_extras:
            value = self.mapper.extract_exact(row, column, consumed)
            if not value or value.lower() in skip:
                continue
            location = f"{location}, {value}" if location else value
        return location

    def _scan_media(self, row: Mapping[str, Any], consumed: MutableSet[str]) -> Tuple[List[str], List[str]]:
        photo_ids: List[str] = []
        video_ids: List[str] = []
        for key, value in row.items():
            if key in consumed or value is None:
                continue
            ids = media.split_drive_ids(str(value))
            if not ids:
                continue
            consumed.add(key)
            # The header decides the bucket for the whole cell.
            if self.mapper.is_video_header(key):
                video_ids.extend(ids)
            else:
                photo_ids.extend(ids)
        return photo_ids, video_ids

    def _extra_fields(self, row: Mapping[str, Any], consumed: MutableSet[str]) -> dict[str, str]:
        extra: dict[str, str] = {}
        for key, value in row.items():
            if key in consumed or value is None:
                continue
            text = str(value)
            if not text.strip() or self.mapper.is_ignored_header(key):
                continue
            extra[key] = text
        return extra
