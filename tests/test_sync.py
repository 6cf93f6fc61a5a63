from pathlib import Path

import pytest
import requests

from campaign_feed.exceptions import ConfigError, DataSourceError
from campaign_feed.sync import GoogleSheetsCsvProvider, SyncService, extract_sheet_id

SHEET_ID = "18fCHeqsvt7FIpXNBAHNj-AssUAKSRRJOFXugL1s-Wp4"


class FakeSheetsProvider:
    def __init__(self, text: str):
        self.text = text
        self.calls = []

    def fetch_csv(self, sheet_id: str) -> str:
        self.calls.append(sheet_id)
        return self.text


class FailingProvider:
    def fetch_csv(self, sheet_id: str) -> str:
        raise DataSourceError("network down")


class FakeResponse:
    def __init__(self, status_code=200, text="", content_type="text/csv"):
        self.status_code = status_code
        self.text = text
        self.headers = {"content-type": content_type}


def test_sync_maps_and_caches(tmp_path, sample_csv):
    provider = FakeSheetsProvider(sample_csv)
    svc = SyncService(provider=provider, sheet_id=SHEET_ID, cache_dir=tmp_path)

    records = svc.sync()
    assert [r.name for r in records] == ["Meera", "Asha", "Ravi"]
    assert svc.records == records
    assert (tmp_path / f"{SHEET_ID}.csv").read_text(encoding="utf-8") == sample_csv

    status = svc.get_status()
    assert status["status"] == "ok"
    assert status["rows"] == 3
    assert status["records"] == 3
    assert status["used_cache"] is False
    assert "Vehicle No" in status["schema"]["unmapped"]


def test_sync_falls_back_to_cache(tmp_path, sample_csv):
    (tmp_path / f"{SHEET_ID}.csv").write_text(sample_csv, encoding="utf-8")
    svc = SyncService(provider=FailingProvider(), sheet_id=SHEET_ID, cache_dir=tmp_path)

    records = svc.sync()
    assert len(records) == 3
    status = svc.get_status()
    assert status["used_cache"] is True
    assert status["source"] == "cache"


def test_sync_error_without_cache(tmp_path):
    svc = SyncService(provider=FailingProvider(), sheet_id=SHEET_ID, cache_dir=tmp_path)
    with pytest.raises(DataSourceError):
        svc.sync()
    status = svc.get_status()
    assert status["status"] == "error"
    assert "network down" in status["error"]
    assert svc.records == []


def test_sync_requires_sheet_id(tmp_path):
    svc = SyncService(provider=FakeSheetsProvider(""), sheet_id="", cache_dir=tmp_path)
    with pytest.raises(ConfigError):
        svc.sync()


def test_sync_switches_sheet(tmp_path, sample_csv):
    provider = FakeSheetsProvider(sample_csv)
    svc = SyncService(provider=provider, sheet_id=SHEET_ID, cache_dir=tmp_path)
    svc.sync(sheet_id="another-sheet-id-0123456789")
    assert provider.calls == ["another-sheet-id-0123456789"]
    assert svc.get_status()["sheet_id"] == "another-sheet-id-0123456789"


def test_load_text_replaces_records(tmp_path, sample_csv):
    svc = SyncService(provider=FailingProvider(), sheet_id=SHEET_ID, cache_dir=tmp_path)
    records = svc.load_text(sample_csv, source="upload:responses.csv")
    assert len(records) == 3
    assert svc.get_status()["source"] == "upload:responses.csv"


def test_extract_sheet_id():
    url = f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit#gid=0"
    assert extract_sheet_id(url) == SHEET_ID
    assert extract_sheet_id(f"  {SHEET_ID}  ") == SHEET_ID
    assert extract_sheet_id("not a sheet") is None
    assert extract_sheet_id("") is None
    assert extract_sheet_id(None) is None


def test_provider_endpoints_quote_sheet_name():
    provider = GoogleSheetsCsvProvider(sheet_name="Form Responses 1")
    urls = provider.endpoints(SHEET_ID)
    assert len(urls) == 3
    assert "gviz/tq?tqx=out:csv&sheet=Form%20Responses%201" in urls[0]
    assert urls[1].endswith("/export?format=csv")
    assert urls[2].endswith("/pub?output=csv")


def test_provider_retries_transient_status(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(url)
        if len(calls) == 1:
            return FakeResponse(status_code=503)
        return FakeResponse(text="Date,Name\n2024-01-01,Asha\n")

    monkeypatch.setattr("campaign_feed.sync.provider.requests.get", fake_get)
    provider = GoogleSheetsCsvProvider(backoff_seconds=0)

    assert provider.fetch_csv(SHEET_ID).startswith("Date,Name")
    assert len(calls) == 2
    assert calls[0] == calls[1]


def test_provider_moves_to_next_endpoint(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(url)
        if "gviz" in url:
            return FakeResponse(status_code=404)
        return FakeResponse(text="Date,Name\n")

    monkeypatch.setattr("campaign_feed.sync.provider.requests.get", fake_get)
    provider = GoogleSheetsCsvProvider(backoff_seconds=0)

    provider.fetch_csv(SHEET_ID)
    # 404 is not retried.
    assert len(calls) == 2
    assert "/export?format=csv" in calls[1]


def test_provider_detects_private_sheet(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(url)
        return FakeResponse(text="<html>Sign in</html>", content_type="text/html; charset=utf-8")

    monkeypatch.setattr("campaign_feed.sync.provider.requests.get", fake_get)
    provider = GoogleSheetsCsvProvider(backoff_seconds=0)

    with pytest.raises(DataSourceError, match="private"):
        provider.fetch_csv(SHEET_ID)
    assert len(calls) == 3


def test_provider_network_errors_exhaust_retries(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(url)
        raise requests.ConnectionError("offline")

    monkeypatch.setattr("campaign_feed.sync.provider.requests.get", fake_get)
    provider = GoogleSheetsCsvProvider(max_retries=2, backoff_seconds=0)

    with pytest.raises(DataSourceError, match="offline"):
        provider.fetch_csv(SHEET_ID)
    assert len(calls) == 6


def test_provider_requires_sheet_id():
    with pytest.raises(ConfigError):
        GoogleSheetsCsvProvider().fetch_csv("")


def test_provider_sends_api_key(monkeypatch):
    seen = {}

    def fake_get(url, params=None, timeout=None):
        seen["params"] = params
        seen["timeout"] = timeout
        return FakeResponse(text="Date,Name\n")

    monkeypatch.setattr("campaign_feed.sync.provider.requests.get", fake_get)
    GoogleSheetsCsvProvider(api_key="k-123", timeout=5).fetch_csv(SHEET_ID)
    assert seen == {"params": {"key": "k-123"}, "timeout": 5}


def test_missing_service_account_file_is_ignored(tmp_path: Path):
    provider = GoogleSheetsCsvProvider(service_account_file=tmp_path / "missing.json")
    assert provider.creds is None
