"""Text-completion collaborator — OpenAI-compatible chat completions over httpx."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import httpx
import structlog

from bio_forge.config import get_settings
from bio_forge.core.errors import CollaboratorFailure

logger = structlog.get_logger()


@dataclass(frozen=True)
class Completion:
    """Generated text and the token usage the service reported."""

    text: str
    tokens_used: int = 0


class CompletionClient:
    """Calls a chat-completions endpoint. Any non-success raises CollaboratorFailure."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        max_tokens: int = 1000,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._transport = transport

    async def complete(self, system: str, prompt: str) -> Completion:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.max_tokens,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("completion.http_error", status=e.response.status_code)
            raise CollaboratorFailure(
                f"Completion service returned {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("completion.call_failed", error=str(e))
            raise CollaboratorFailure(f"Completion service call failed: {e}") from e

        try:
            text = data["choices"][0]["message"]["content"] or ""
            if not isinstance(text, str):
                raise TypeError(f"content is {type(text).__name__}")
            usage = data.get("usage") or {}
            tokens_used = int(usage.get("total_tokens") or 0)
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            logger.warning("completion.malformed_body", error=str(e))
            raise CollaboratorFailure("Completion service returned a malformed body") from e
        if not text.strip():
            raise CollaboratorFailure("Completion service returned no text")

        return Completion(text=text, tokens_used=tokens_used)


@lru_cache
def get_completion_client() -> CompletionClient:
    """Get cached completion client configured from settings."""
    settings = get_settings()
    return CompletionClient(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=settings.completion_model,
        max_tokens=settings.completion_max_tokens,
        timeout=settings.completion_timeout,
    )
