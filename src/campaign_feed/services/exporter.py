from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from campaign_feed.config import settings
from campaign_feed.domain.models import CampaignResponse

BASE_COLUMNS = [
    "id",
    "dateOfDrive",
    "timestamp",
    "name",
    "location",
    "message",
    "staffInvolved",
    "pamphletsUsed",
    "sentiment",
    "photoUrls",
    "videoUrls",
]


class ResponseExporter:
    """
    Flattens responses into a CSV table: media lists are newline-joined and every
    extra sheet column becomes an "extra:<header>" column.
    """

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = Path(output_dir or settings.paths.output_dir)

    def to_frame(self, records: Iterable[CampaignResponse]) -> pd.DataFrame:
        rows = []
        extra_headers: dict[str, None] = {}
        for record in records:
            data = record.model_dump(by_alias=True, mode="json")
            row = {col: data[col] for col in BASE_COLUMNS}
            row["photoUrls"] = "\n".join(record.photo_urls)
            row["videoUrls"] = "\n".join(record.video_urls)
            for header, value in record.extra_fields.items():
                extra_headers.setdefault(header, None)
                row[f"extra:{header}"] = value
            rows.append(row)
        columns = BASE_COLUMNS + [f"extra:{h}" for h in extra_headers]
        return pd.DataFrame(rows, columns=columns).fillna("")

    def to_csv(self, records: Iterable[CampaignResponse]) -> str:
        return self.to_frame(records).to_csv(index=False)

    def export(self, records: Iterable[CampaignResponse], filename: str = "campaign_responses.csv") -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / filename
        path.write_text(self.to_csv(records), encoding="utf-8")
        return path
