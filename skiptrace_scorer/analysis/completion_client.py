"""
Chat-completion client — the "complete text" capability.

API:   https://api.openai.com/v1/chat/completions
Docs:  https://platform.openai.com/docs/api-reference/chat/create

Credential setup (.env, gitignored):
  OPENAI_API_KEY=sk-...

Any OpenAI-compatible endpoint works by pointing ``analysis.base_url`` at it.
Requests are never retried; the only timeout is ``analysis.timeout_seconds``
on the transport.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from skiptrace_scorer.config import AnalysisConfig
from skiptrace_scorer.errors import AnalysisUnavailable

logger = logging.getLogger(__name__)


class CompletionClient:
    """Sends one system + user message pair and returns the reply text.

    Usage::

        client = CompletionClient(config.analysis)
        text = client.complete(SYSTEM_PROMPT, prompt)   # raises AnalysisUnavailable

    Attributes:
        config: Analysis section of ``AppConfig``.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config
        self._http_client = http_client

    @property
    def url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/chat/completions"

    def complete(self, system: str, prompt: str) -> str:
        """Request a completion synchronously.

        Raises:
            AnalysisUnavailable: Missing key, transport error, non-2xx status,
                or a response without ``choices[0].message.content``.
        """
        headers, payload = self._build_request(system, prompt)
        try:
            if self._http_client is not None:
                resp = self._http_client.post(
                    self.url, headers=headers, json=payload,
                    timeout=self.config.timeout_seconds,
                )
            else:
                with httpx.Client() as client:
                    resp = client.post(
                        self.url, headers=headers, json=payload,
                        timeout=self.config.timeout_seconds,
                    )
        except httpx.HTTPError as exc:
            raise AnalysisUnavailable(f"request failed: {exc}") from exc
        return _parse_response(resp)

    async def acomplete(
        self,
        system: str,
        prompt: str,
        client: httpx.AsyncClient,
    ) -> str:
        """Async variant sharing a caller-owned ``httpx.AsyncClient``.

        Raises:
            AnalysisUnavailable: Same conditions as ``complete()``.
        """
        headers, payload = self._build_request(system, prompt)
        try:
            resp = await client.post(
                self.url, headers=headers, json=payload,
                timeout=self.config.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise AnalysisUnavailable(f"request failed: {exc}") from exc
        return _parse_response(resp)

    def _build_request(
        self, system: str, prompt: str
    ) -> tuple[dict[str, str], dict[str, Any]]:
        if not self.config.api_key:
            raise AnalysisUnavailable("OPENAI_API_KEY must be set in .env.")
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
        return headers, payload


def _parse_response(resp: httpx.Response) -> str:
    """Return ``choices[0].message.content`` or raise ``AnalysisUnavailable``."""
    if not resp.is_success:
        raise AnalysisUnavailable(
            resp.reason_phrase or "request failed", status_code=resp.status_code
        )
    try:
        data = resp.json()
        content = data["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise AnalysisUnavailable(f"unexpected response shape: {exc}") from exc
    if not isinstance(content, str):
        raise AnalysisUnavailable("completion content is not text")
    return content
