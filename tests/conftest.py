from datetime import datetime, UTC

import pytest

from campaign_feed.data.field_mapper import FieldMapper

FIXED_NOW = datetime(2030, 6, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def mapper():
    return FieldMapper()


@pytest.fixture
def fixed_now():
    return lambda: FIXED_NOW


@pytest.fixture
def campaign_row():
    return {
        "Date": "01-01-2024",
        "Campaign Incharge": "Asha",
        "Place 1": "Pune",
        "Any Remark": "great success",
        "Photo Upload": "https://drive.google.com/open?id=AAA111",
        "Video Clip": "id=BBB222",
    }


SAMPLE_CSV = (
    "Timestamp,Date,Campaign Incharge,Place 1,Place 2,Place 3,Staff Involve(d),Total Pamplet,"
    "Any Remark,Photo Upload,Video Upload,Vehicle No\n"
    '1/2/2024 10:00:00,02/01/2024,Asha,Pune,Hadapsar,NA,4,200,great turnout,'
    '"https://drive.google.com/open?id=P1, https://drive.google.com/file/d/P2/view",'
    "https://drive.google.com/open?id=V1,MH12\n"
    "1/3/2024 10:00:00,not-a-date,Ravi,Nashik,,,2,50,stuck at gate,,,\n"
    ",,,,,,,,,,,\n"
    "1/4/2024 09:00:00,2024-03-05,Meera,Satara,,,3,80,pending approval,,,MH11\n"
)


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV
