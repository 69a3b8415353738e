"""Remote classifier gateway backed by the Groq chat completions API."""

from __future__ import annotations

import logging
import time
from typing import Optional, Protocol

import httpx

from sportsapp.obs import metrics
from sportsapp.settings import groq_key_configured, settings

logger = logging.getLogger(__name__)

GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
SYSTEM_PROMPT = "You are a content moderation assistant. Be concise and direct."
APPROVED = "APPROVED"
TEMPERATURE = 0.3


class ClassifierGateway(Protocol):
    """Anything that turns a moderation prompt into a free-text verdict."""

    async def complete(self, prompt: str, max_tokens: int = 150) -> str:
        ...


class GroqClient(ClassifierGateway):
    """Single-call wrapper that never raises; every failure reads as APPROVED."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        url: str = GROQ_API_URL,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.groq_api_key
        self.model = model or settings.groq_api_model
        self.url = url
        self._timeout = timeout if timeout is not None else settings.groq_api_timeout_seconds
        self._http = http
        self._owns_http = http is None

    @property
    def configured(self) -> bool:
        return groq_key_configured(self.api_key)

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    def build_payload(self, prompt: str, max_tokens: int) -> dict:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": TEMPERATURE,
        }

    async def complete(self, prompt: str, max_tokens: int = 150) -> str:
        if not self.configured:
            logger.warning("groq api key not configured; skipping ai moderation")
            metrics.observe_classifier("skipped")
            return APPROVED

        headers = {"Authorization": f"Bearer {self.api_key}"}
        start = time.perf_counter()
        try:
            response = await self._client().post(
                self.url,
                json=self.build_payload(prompt, max_tokens),
                headers=headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except Exception:
            metrics.observe_classifier("error", time.perf_counter() - start)
            logger.exception("error calling groq api", extra={"model": self.model})
            return APPROVED

        metrics.observe_classifier("ok", time.perf_counter() - start)
        if content is None:
            return APPROVED
        return str(content).strip()

    async def aclose(self) -> None:
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None
