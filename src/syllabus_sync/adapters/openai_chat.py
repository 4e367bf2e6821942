"""OpenAI chat completions adapter - HTTP client for task extraction."""

import logging

import requests

logger = logging.getLogger(__name__)

API_URL = "https://api.openai.com/v1/chat/completions"


class LLMError(RuntimeError):
    """Raised when the LLM request fails."""

    pass


class OpenAIChatService:
    """
    OpenAI chat completions adapter.

    Implements LLMService protocol. No prompt logic - just I/O.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: int = 120,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """Generate text from a prompt. Returns complete response."""
        if not self.api_key:
            raise LLMError("Missing OPENAI_API_KEY")

        try:
            resp = self._session.post(
                API_URL,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": self.model,
                    "temperature": 0,
                    "messages": [{"role": "user", "content": prompt}],
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise LLMError(f"OpenAI request failed: {e}") from e

        if resp.status_code != 200:
            logger.error(f"OpenAI HTTP {resp.status_code}: {resp.text[:500]}")
            raise LLMError(f"OpenAI HTTP {resp.status_code}: {resp.text[:500]}")

        try:
            data = resp.json()
        except ValueError:
            raise LLMError("OpenAI returned non-JSON body")

        choices = data.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""
