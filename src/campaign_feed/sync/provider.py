import logging
import re
import time
from pathlib import Path
from typing import Callable, Optional, Protocol
from urllib.parse import quote

import requests
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from campaign_feed.exceptions import ConfigError, DataSourceError

logger = logging.getLogger(__name__)

_SHEET_URL_ID = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")
_BARE_SHEET_ID = re.compile(r"^[a-zA-Z0-9_-]{20,}$")


def extract_sheet_id(value: Optional[str]) -> Optional[str]:
    """Sheet id from a full Google Sheets URL or a bare id; None if neither."""
    if not value:
        return None
    text = value.strip()
    match = _SHEET_URL_ID.search(text)
    if match:
        return match.group(1)
    if _BARE_SHEET_ID.match(text):
        return text
    return None


class SheetsProvider(Protocol):
    def fetch_csv(self, sheet_id: str) -> str:
        ...


class GoogleSheetsCsvProvider:
    """
    Downloads a Google Sheet as CSV text.
    Tries the gviz, export and publish endpoints in turn; each one is retried on
    network errors and 429/5xx before moving to the next.
    """

    ENDPOINTS = (
        "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:csv&sheet={sheet_name}",
        "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv",
        "https://docs.google.com/spreadsheets/d/{sheet_id}/pub?output=csv",
    )

    def __init__(
        self,
        service_account_file: Optional[Path] = None,
        api_key: Optional[str] = None,
        sheet_name: str = "Form Responses 1",
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        timeout: float = 20.0,
    ):
        self.api_key = api_key
        self.sheet_name = sheet_name
        self.max_retries = max(1, max_retries)
        self.backoff_seconds = backoff_seconds
        self.timeout = timeout
        self.creds = None
        if service_account_file and Path(service_account_file).exists():
            self.creds = service_account.Credentials.from_service_account_file(
                service_account_file,
                scopes=["https://www.googleapis.com/auth/drive.readonly"],
            )

    def endpoints(self, sheet_id: str) -> list[str]:
        sheet_name = quote(self.sheet_name)
        return [e.format(sheet_id=sheet_id, sheet_name=sheet_name) for e in self.ENDPOINTS]

    def fetch_csv(self, sheet_id: str) -> str:
        if not sheet_id:
            raise ConfigError("Google Sheets sheet_id is not configured.")

        get = self._requester()
        params = {"key": self.api_key} if self.api_key and not self.creds else None
        last_error: Optional[Exception] = None

        for url in self.endpoints(sheet_id):
            logger.info("Attempting to fetch sheet", extra={"url": url})
            for attempt in range(self.max_retries):
                try:
                    resp = get(url, params=params, timeout=self.timeout)
                except requests.RequestException as exc:  # network failure
                    last_error = exc
                    if attempt < self.max_retries - 1:
                        time.sleep(self.backoff_seconds * (2**attempt))
                        continue
                    break

                if resp.status_code == 200:
                    try:
                        text = self._validated_text(resp)
                    except DataSourceError as exc:
                        last_error = exc
                        break
                    logger.info("Fetched sheet", extra={"url": url, "bytes": len(text)})
                    return text

                last_error = DataSourceError(f"Status {resp.status_code} from {url}")
                if attempt < self.max_retries - 1 and resp.status_code in {429, 500, 502, 503, 504}:
                    time.sleep(self.backoff_seconds * (2**attempt))
                    continue
                break

            logger.warning("Fetch failed", extra={"url": url, "error": str(last_error)})

        detail = str(last_error) if last_error else "Unknown network error"
        raise DataSourceError(f"Failed to load Google Sheet. Last error: {detail}.") from last_error

    def _requester(self) -> Callable[..., requests.Response]:
        if self.creds:
            return AuthorizedSession(self.creds).get
        return requests.get

    @staticmethod
    def _validated_text(resp: requests.Response) -> str:
        content_type = resp.headers.get("content-type", "")
        if "text/html" in content_type:
            raise DataSourceError("Sheet is likely private (received HTML login page instead of CSV).")
        text = resp.text
        if not text or ("," not in text and "\n" not in text):
            raise DataSourceError("Sheet returned an empty or non-tabular payload.")
        return text
