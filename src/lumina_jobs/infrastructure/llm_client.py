"""LLM gateway client (OpenAI-compatible chat completions)."""

from typing import Any

import httpx

from lumina_jobs.core.errors import LLMError


class LLMClient:
    """Single-turn completions against the AI gateway."""

    def __init__(
        self,
        api_key: str | None,
        api_url: str,
        model: str,
        timeout: float = 60.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self.model = model
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the assistant text for one system + user exchange.

        Raises:
            LLMError: Not configured, transport failure or non-2xx response.
        """
        if not self._api_key:
            raise LLMError("LLM_API_KEY is not configured")

        try:
            response = await self._http.post(
                self._api_url,
                headers={"Authorization": f"Bearer {self._api_key}"},
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                },
            )
        except httpx.HTTPError as e:
            raise LLMError(f"LLM request failed: {e}") from e

        if response.is_error:
            raise LLMError(
                f"LLM gateway returned {response.status_code}: {response.text[:200]}"
            )

        data: dict[str, Any] = response.json()
        choices = data.get("choices") or []
        if not choices:
            return ""
        return str((choices[0].get("message") or {}).get("content") or "")

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()
