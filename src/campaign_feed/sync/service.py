import logging
import time
from pathlib import Path
from typing import Callable, List, Optional

from campaign_feed.config import settings
from campaign_feed.data.adapters import parse_csv_text
from campaign_feed.domain.models import CampaignResponse
from campaign_feed.exceptions import ConfigError
from campaign_feed.pipeline import headers_snapshot, map_rows
from campaign_feed.sync.provider import SheetsProvider

logger = logging.getLogger(__name__)


class SyncService:
    """
    Pulls the configured sheet, maps it and keeps the latest records in memory.
    The last good CSV is cached on disk and used when the sheet cannot be reached.
    """

    def __init__(
        self,
        provider: SheetsProvider,
        sheet_id: Optional[str] = None,
        cache_dir: Optional[Path] = None,
        map_fn: Optional[Callable[[list], List[CampaignResponse]]] = None,
    ):
        self.provider = provider
        self.sheet_id = sheet_id if sheet_id is not None else settings.sheets.sheet_id
        self.cache_dir = Path(cache_dir) if cache_dir else Path(settings.paths.cache_dir)
        self.map_rows = map_fn or map_rows
        self.status: dict = {}
        self.records: List[CampaignResponse] = []

    def sync(self, sheet_id: Optional[str] = None) -> List[CampaignResponse]:
        if sheet_id:
            self.sheet_id = sheet_id
        if not self.sheet_id:
            raise ConfigError("Google Sheets sheet_id is not configured.")

        try:
            text, used_cache = self._download(self.sheet_id)
            rows = parse_csv_text(text)
            records = self.map_rows(rows)
        except Exception as exc:
            self._update_status(rows=0, records=0, used_cache=False, error=str(exc))
            raise

        self.records = records
        self._update_status(rows=len(rows), records=len(records), used_cache=used_cache, error=None)
        if rows:
            self.status["schema"] = headers_snapshot(rows).to_dict()
        return records

    def load_text(self, text: str, source: str = "upload") -> List[CampaignResponse]:
        """Maps CSV text that did not come from the sheet (e.g. an uploaded export)."""
        rows = parse_csv_text(text)
        self.records = self.map_rows(rows)
        self._update_status(rows=len(rows), records=len(self.records), used_cache=False, error=None, source=source)
        return self.records

    def get_status(self) -> dict:
        return {
            "enabled": settings.sheets.enabled,
            "sheet_id": self.sheet_id,
            **self.status,
        }

    def _cache_path(self, sheet_id: str) -> Path:
        return self.cache_dir / f"{sheet_id}.csv"

    def _download(self, sheet_id: str) -> tuple[str, bool]:
        cache_path = self._cache_path(sheet_id)
        try:
            text = self.provider.fetch_csv(sheet_id)
        except ConfigError:
            raise
        except Exception:
            if cache_path.exists():
                logger.warning("sheet fetch failed, using cached copy", extra={"path": str(cache_path)})
                return cache_path.read_text(encoding="utf-8"), True
            raise

        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            cache_path.write_text(text, encoding="utf-8")
        except OSError:
            logger.exception("failed to write sheet cache", extra={"path": str(cache_path)})
        return text, False

    def _update_status(
        self,
        rows: int,
        records: int,
        used_cache: bool,
        error: Optional[str],
        source: Optional[str] = None,
    ):
        self.status = {
            "last_sync": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "rows": rows,
            "records": records,
            "used_cache": used_cache,
            "status": "error" if error else "ok",
            "source": source or ("cache" if used_cache else "remote"),
        }
        if error:
            self.status["error"] = error
