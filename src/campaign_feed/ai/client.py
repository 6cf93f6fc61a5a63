import hashlib
import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from campaign_feed.exceptions import ConfigError, DataSourceError

logger = logging.getLogger(__name__)


@dataclass
class AIResult:
    content: str
    source: str  # remote | simulated | fallback | cache
    cached: bool = False


class BaseAIClient:
    def generate(self, prompt: str, context: str) -> AIResult:  # pragma: no cover - interface
        raise NotImplementedError


class SimulatedAIClient(BaseAIClient):
    """
    Offline stand-in: echoes the size of the response digest it was handed.
    Output is stable for the same context.
    """

    def generate(self, prompt: str, context: str) -> AIResult:
        lines = [line for line in context.splitlines() if line.startswith("- ")]
        digest = hashlib.md5(context.encode("utf-8")).hexdigest()[:8]
        content = f"[SIMULATED] Summary of {len(lines)} campaign responses (context {digest})."
        return AIResult(content=content, source="simulated")


class HTTPAIClient(BaseAIClient):
    """
    Chat-completions client for the campaign summary.

    The manager prompt goes in as the system message and the response digest as
    the user message. Accepted reply shapes: chat (choices[].message.content),
    legacy completions (choices[].text) and a bare {"content": "..."}.
    Anything else is a DataSourceError, which sends InsightService to its
    deterministic summary.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        model: str,
        max_tokens: int = 600,
        temperature: float = 0.2,
        timeout: int = 30,
    ):
        if not base_url:
            raise ConfigError("AI base_url must be configured for HTTP provider.")
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout

    def build_payload(self, prompt: str, context: str) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": prompt},
                {"role": "user", "content": f"Campaign responses (newest first):\n{context}"},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def generate(self, prompt: str, context: str) -> AIResult:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            resp = requests.post(
                self.base_url,
                json=self.build_payload(prompt, context),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DataSourceError(f"AI provider unreachable: {exc}") from exc

        if resp.status_code != 200:
            logger.warning("AI provider rejected request", extra={"status": resp.status_code})
            raise DataSourceError(f"AI provider error: {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as exc:
            raise DataSourceError("AI provider returned invalid JSON") from exc

        content = _reply_text(data)
        if not content:
            raise DataSourceError("AI provider reply has no summary text")
        return AIResult(content=content.strip(), source="remote")


def _reply_text(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("content"), str):
        return data["content"]
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    first = choices[0]
    message = first.get("message")
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        return message["content"]
    if isinstance(first.get("text"), str):
        return first["text"]
    return None


def build_ai_client(settings) -> BaseAIClient:
    ai = settings.ai
    if not ai.enabled or ai.provider == "offline":
        return SimulatedAIClient()
    if ai.provider == "http":
        return HTTPAIClient(
            base_url=ai.base_url,
            api_key=ai.api_key,
            model=ai.model,
            max_tokens=ai.max_tokens,
            temperature=ai.temperature,
        )
    raise ConfigError(f"Unknown AI provider: {ai.provider}")
