"""
Google Drive file-id extraction for media cells.

Form upload columns hold one or more Drive links per cell (comma, space or
line-break separated); every link is reduced to its file id so the same upload
referenced twice is kept once.
"""
import re
from typing import Iterable, List, Optional

from campaign_feed.config_fields import MediaConfig

_ID_PATTERNS = (
    re.compile(r"id=([a-zA-Z0-9_-]+)"),
    re.compile(r"/d/([a-zA-Z0-9_-]+)"),
    re.compile(r"open\?id=([a-zA-Z0-9_-]+)"),
)

_TOKEN_SEPARATORS = re.compile(r"[\s,]+")


def extract_drive_id(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    for pattern in _ID_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def split_drive_ids(cell: Optional[str]) -> List[str]:
    """
    Every Drive id found in a multi-value cell, first occurrence order, no duplicates.
    """
    if not cell:
        return []
    ids: List[str] = []
    for part in _TOKEN_SEPARATORS.split(str(cell)):
        part = part.strip()
        if not part:
            continue
        file_id = extract_drive_id(part)
        if file_id and file_id not in ids:
            ids.append(file_id)
    return ids


def unique(ids: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(ids))


def photo_urls(ids: Iterable[str], config: Optional[MediaConfig] = None) -> List[str]:
    template = (config or MediaConfig()).photo_url_template
    return [template.format(file_id=i) for i in unique(ids)]


def video_urls(ids: Iterable[str], config: Optional[MediaConfig] = None) -> List[str]:
    template = (config or MediaConfig()).video_url_template
    return [template.format(file_id=i) for i in unique(ids)]
