"""Completion endpoint HTTP client with bounded timeout and retries"""

import asyncio
import httpx
from typing import Any, Dict, List, Optional
from budget_notifier.config import settings
from budget_notifier.domain.exceptions import (
    CompletionError,
    CompletionHTTPError,
    CompletionTimeoutError,
    CompletionTransportError,
    MalformedCompletionError,
    RateLimitError,
)
from budget_notifier.domain.result import classify_failure
from budget_notifier.infrastructure.observability.metrics import (
    completion_failure_counter,
    completion_latency_histogram,
)


class CompletionClient:
    """Client for an OpenAI-compatible chat completion API"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.ai_base_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.ai_api_key
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.ai_timeout_seconds
        self.max_retries = settings.ai_max_retries if max_retries is None else max_retries
        self.backoff_base = settings.ai_backoff_base if backoff_base is None else backoff_base
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def complete(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Request a chat completion and return the trimmed message text.

        Retry strategy:
        - Up to max_retries extra attempts after the first one
        - Retries on timeouts, network failures, 429 and 5xx
        - Exponential backoff: base, 2*base, 4*base...

        Raises:
            CompletionError subclass on final failure or malformed response
        """
        payload: Dict[str, Any] = {"model": self.model, "messages": messages}
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            while True:
                try:
                    with completion_latency_histogram.time():
                        return await self._post(client, payload)

                except CompletionError as e:
                    attempt += 1
                    completion_failure_counter.labels(reason=classify_failure(e).value).inc()

                    if not _is_retryable(e) or attempt > self.max_retries:
                        raise

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)

    async def _post(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> str:
        try:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=self._headers(),
            )
            response.raise_for_status()
            data = response.json()
            content = data["choices"][0]["message"]["content"]
            return (content or "").strip()

        except httpx.TimeoutException as e:
            raise CompletionTimeoutError(f"Completion API timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 429:
                raise RateLimitError("Completion API error: 429 Too Many Requests") from e
            raise CompletionHTTPError(status) from e
        except httpx.RequestError as e:
            raise CompletionTransportError(f"Completion API unreachable: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            raise MalformedCompletionError(f"Invalid completion payload: {e!r}") from e


def _is_retryable(error: CompletionError) -> bool:
    if isinstance(error, CompletionHTTPError):
        return error.status_code >= 500
    return isinstance(error, (CompletionTimeoutError, CompletionTransportError, RateLimitError))
