import hashlib
import logging
from datetime import datetime, UTC
from typing import Callable, Dict, Optional, Sequence, Tuple

from campaign_feed.ai.client import AIResult, BaseAIClient
from campaign_feed.config import settings
from campaign_feed.domain.models import CampaignResponse
from campaign_feed.services.queries import ResponseQueryService

logger = logging.getLogger(__name__)


class InsightService:
    """
    Generates an executive summary of campaign responses with an AI client,
    caching results in memory and falling back to a rule-based summary.
    """

    def __init__(
        self,
        ai_client: BaseAIClient,
        query_service: Optional[ResponseQueryService] = None,
        campaign_name: Optional[str] = None,
        max_context_chars: Optional[int] = None,
        cache_ttl_minutes: Optional[int] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.ai_client = ai_client
        self.query_service = query_service or ResponseQueryService()
        self.campaign_name = campaign_name or settings.app.campaign_name
        self.max_context_chars = max_context_chars or settings.ai.max_context_chars
        self.cache_ttl_minutes = cache_ttl_minutes if cache_ttl_minutes is not None else settings.ai.cache_ttl_minutes
        self.now = now or (lambda: datetime.now(UTC))
        self._cache: Dict[str, Tuple[datetime, str]] = {}

    def generate(self, records: Sequence[CampaignResponse]) -> dict:
        """
        Returns {"content": str, "source": str, "cached": bool}
        """
        if not records:
            return {"content": "No responses to analyze.", "source": "empty", "cached": False}

        context = self._build_context(records)
        prompt = self._prompt_template()
        cache_key = self._cache_key(prompt, context)
        cached = self._maybe_get_cached(cache_key)
        if cached:
            return cached

        try:
            result: AIResult = self.ai_client.generate(prompt=prompt, context=context)
        except Exception:
            logger.exception("AI analysis failed, using deterministic summary")
            result = AIResult(content=self._fallback_summary(records), source="fallback", cached=False)

        self._cache[cache_key] = (self.now(), result.content)
        return {"content": result.content, "source": result.source, "cached": result.cached}

    def _maybe_get_cached(self, cache_key: str) -> Optional[dict]:
        entry = self._cache.get(cache_key)
        if not entry:
            return None
        created_at, content = entry
        age_min = (self.now() - created_at).total_seconds() / 60
        if age_min > self.cache_ttl_minutes:
            self._cache.pop(cache_key, None)
            return None
        return {"content": content, "source": "cache", "cached": True}

    def _build_context(self, records: Sequence[CampaignResponse]) -> str:
        lines = [
            f"- {r.timestamp.date().isoformat()}: {r.message} ({r.sentiment.value})"
            for r in records
        ]
        text = "\n".join(lines)
        if len(text) > self.max_context_chars:
            text = text[: self.max_context_chars] + "...(truncated)"
        return text

    def _prompt_template(self) -> str:
        return (
            f"You are the Campaign Manager for '{self.campaign_name}'. "
            "Analyze the following participant responses and provide a concise executive summary. "
            "Focus on: 1. Overall sentiment trends. 2. Key themes or recurring issues (positive or negative). "
            "3. Actionable recommendations. "
            "Keep the response professional, structured (use Markdown), and under 300 words."
        )

    def _fallback_summary(self, records: Sequence[CampaignResponse]) -> str:
        summary = self.query_service.summary(records, top_n=3)
        sentiment = summary["sentiment"]
        places = ", ".join(f"{p['location']} ({p['responses']})" for p in summary["top_locations"]) or "none"
        return (
            f"[DETERMINISTIC SUMMARY] Responses={summary['total']}; "
            f"positive={sentiment['positive']}, neutral={sentiment['neutral']}, negative={sentiment['negative']}; "
            f"with media={summary['with_media']}; "
            f"top locations: {places}."
        )

    @staticmethod
    def _cache_key(prompt: str, context: str) -> str:
        return hashlib.sha256(f"{prompt}|{context}".encode("utf-8")).hexdigest()
