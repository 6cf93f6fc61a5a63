import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, MutableSet, Optional

from campaign_feed.config_fields import FieldConfig, field_config

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


@dataclass
class HeaderMatch:
    raw: str
    normalized: str
    field: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "raw": self.raw,
            "normalized": self.normalized,
            "field": self.field,
        }


@dataclass
class SchemaSnapshot:
    raw_headers: List[str]
    mapped: List[HeaderMatch]
    unmapped: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_headers": self.raw_headers,
            "mapped": [m.to_dict() for m in self.mapped],
            "unmapped": self.unmapped,
        }


class FieldMapper:
    """
    Config-driven resolver for free-form sheet headers.

    Matching is deliberately permissive: a header matches an alias when its
    normalized form equals or contains the normalized alias, and the first
    header in column order that matches any alias wins. When a sheet has several
    plausible columns for one field the result depends on column order; that is
    the known approximation of this resolver, not a ranking.
    """

    def __init__(self, config: FieldConfig = field_config):
        self.config = config
        form = config.form
        self.field_aliases: Dict[str, List[str]] = {
            "date": list(form.date.aliases),
            "name": list(form.name.aliases),
            "location": list(form.location.aliases),
            "message": list(form.message.aliases),
            "staff_involved": list(form.staff.aliases),
            "pamphlets_used": list(form.pamphlets.aliases),
        }
        self.location_extras = [self.normalize(c) for c in form.location.extra_columns]

    @staticmethod
    def normalize(text: Optional[str]) -> str:
        if text is None:
            return ""
        return _NON_ALNUM.sub("", str(text).lower())

    def find_key(self, keys: Iterable[str], aliases: Iterable[str]) -> Optional[str]:
        """Return the first key (in the given order) matching any alias, or None."""
        alias_norms = [n for n in (self.normalize(a) for a in aliases) if n]
        if not alias_norms:
            return None
        for key in keys:
            n_key = self.normalize(key)
            if any(n_key == alias or alias in n_key for alias in alias_norms):
                return key
        return None

    def extract_by_aliases(
        self,
        row: Mapping[str, Any],
        aliases: Iterable[str],
        consumed: Optional[MutableSet[str]] = None,
    ) -> str:
        key = self.find_key(row.keys(), aliases)
        if key is None:
            return ""
        if consumed is not None:
            consumed.add(key)
        value = row.get(key)
        return "" if value is None else str(value).strip()

    def extract_field(self, row: Mapping[str, Any], field: str, consumed: Optional[MutableSet[str]] = None) -> str:
        return self.extract_by_aliases(row, self.field_aliases[field], consumed)

    def extract_exact(
        self,
        row: Mapping[str, Any],
        normalized_header: str,
        consumed: Optional[MutableSet[str]] = None,
    ) -> Optional[str]:
        """
        Exact (normalized) header lookup. Keys already consumed are skipped.
        Returns None when no such column exists, otherwise its trimmed value.
        """
        for key, value in row.items():
            if consumed is not None and key in consumed:
                continue
            if self.normalize(key) != normalized_header:
                continue
            if consumed is not None:
                consumed.add(key)
            return "" if value is None else str(value).strip()
        return None

    def is_video_header(self, header: str) -> bool:
        n_header = self.normalize(header)
        return any(self.normalize(token) in n_header for token in self.config.media.video_tokens)

    def is_ignored_header(self, header: str) -> bool:
        n_header = self.normalize(header)
        return any(n_header == self.normalize(h) for h in self.config.form.ignored_headers)

    def snapshot(self, headers: Iterable[Any]) -> SchemaSnapshot:
        raw_headers = [str(h) for h in headers if h is not None and str(h).strip()]
        mapped: List[HeaderMatch] = []
        taken = set()

        for field, aliases in self.field_aliases.items():
            key = self.find_key(raw_headers, aliases)
            if key is None or key in taken:
                continue
            taken.add(key)
            mapped.append(HeaderMatch(raw=key, normalized=self.normalize(key), field=field))

        for raw in raw_headers:
            normalized = self.normalize(raw)
            if raw not in taken and normalized in self.location_extras:
                taken.add(raw)
                mapped.append(HeaderMatch(raw=raw, normalized=normalized, field="location"))

        unmapped = [h for h in raw_headers if h not in taken]
        return SchemaSnapshot(raw_headers=raw_headers, mapped=mapped, unmapped=unmapped)
