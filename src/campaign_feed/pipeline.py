import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional

from campaign_feed.data.adapters import CampaignRowMapper
from campaign_feed.data.assembler import assemble
from campaign_feed.data.field_mapper import FieldMapper, SchemaSnapshot
from campaign_feed.domain.models import CampaignResponse

logger = logging.getLogger(__name__)


def map_rows(
    rows: Iterable[Mapping[str, Any]],
    mapper: Optional[FieldMapper] = None,
    now: Optional[Callable[[], datetime]] = None,
) -> List[CampaignResponse]:
    """
    Raw sheet rows -> filtered, newest-first CampaignResponse list.
    Ids are row-<position in the input>, so they are stable only within one run.
    """
    rows = list(rows)
    row_mapper = CampaignRowMapper(mapper=mapper, now=now)
    if rows:
        snapshot = headers_snapshot(rows, row_mapper.mapper)
        if snapshot.unmapped:
            logger.info(
                "headers without a known field (media or extra columns)",
                extra={"headers": snapshot.unmapped},
            )

    mapped = [row_mapper.map_row(row, index) for index, row in enumerate(rows)]
    records = assemble(mapped)
    logger.info("mapped rows", extra={"rows": len(rows), "records": len(records)})
    return records


def headers_snapshot(rows: Iterable[Mapping[str, Any]], mapper: Optional[FieldMapper] = None) -> SchemaSnapshot:
    headers: dict[str, None] = {}
    for row in rows:
        headers.update(dict.fromkeys(row.keys()))
    return (mapper or FieldMapper()).snapshot(headers.keys())
