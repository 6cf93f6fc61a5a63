import logging
from typing import Iterable, List, Tuple

from campaign_feed.data.dto import MappedRow
from campaign_feed.domain.models import CampaignResponse

logger = logging.getLogger(__name__)


def assemble(rows: Iterable[MappedRow]) -> List[CampaignResponse]:
    """
    Drops rows with no name, location or message and orders the rest newest
    first. Rows whose date could not be parsed (timestamp defaulted to now)
    go last, keeping their sheet order.
    """
    rows = list(rows)
    kept = [r for r in rows if r.has_content]
    dropped = len(rows) - len(kept)
    if dropped:
        logger.info("dropped blank rows", extra={"dropped": dropped, "kept": len(kept)})

    kept.sort(key=_sort_key)
    return [r.record for r in kept]


def _sort_key(row: MappedRow) -> Tuple[int, float, int]:
    if not row.date_parsed:
        return (1, 0.0, row.row_index)
    return (0, -row.record.timestamp.timestamp(), row.row_index)
