import re
from typing import Iterable, Optional

from campaign_feed.config_fields import SentimentConfig, field_config
from campaign_feed.domain.models import Sentiment


def _keyword_pattern(keywords: Iterable[str]) -> Optional[re.Pattern]:
    words = [re.escape(k.lower()) for k in keywords if k]
    if not words:
        return None
    return re.compile("|".join(words))


class SentimentClassifier:
    """
    Keyword polarity tagger. Positive keywords are checked first, so text
    carrying both classes is positive. Keywords match as substrings.
    """

    def __init__(self, config: SentimentConfig = field_config.sentiment):
        self._positive = _keyword_pattern(config.positive)
        self._negative = _keyword_pattern(config.negative)

    def classify(self, message: str, location: str = "") -> Sentiment:
        text = f"{message or ''} {location or ''}".lower()
        if self._positive is not None and self._positive.search(text):
            return Sentiment.POSITIVE
        if self._negative is not None and self._negative.search(text):
            return Sentiment.NEGATIVE
        return Sentiment.NEUTRAL
