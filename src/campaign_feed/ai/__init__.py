from campaign_feed.ai.client import AIResult, BaseAIClient, HTTPAIClient, SimulatedAIClient, build_ai_client
from campaign_feed.ai.insight_service import InsightService

__all__ = [
    "AIResult",
    "BaseAIClient",
    "HTTPAIClient",
    "InsightService",
    "SimulatedAIClient",
    "build_ai_client",
]
