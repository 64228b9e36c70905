"""Provider adapters: protocol-level handling for each upstream provider.

Each adapter turns a composed prompt into its provider's request, sends it
and returns an AttemptResult. Adapters never raise to the chain: every
failure comes back as an AttemptFailure value.

Provider-specific behaviors:
  - Gemini: google-genai SDK call, text parts of the first candidate
  - A4F chat: OpenAI-compatible chat/completions
  - OpenRouter chat: OpenAI-compatible with reasoning enabled; the trace is
    prepended to the answer
  - OpenRouter image: chat/completions with ``modalities: ["image"]``
  - A4F image: images/generations, ``data[0].url``
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from fancy_gateway.gateway.decode import (
    decode_chat_text,
    decode_gemini_text,
    decode_image_reference,
    upstream_error_message,
)
from fancy_gateway.gateway.types import (
    AttemptFailure,
    AttemptResult,
    AttemptSuccess,
    FailureKind,
    ProviderError,
    ProviderName,
    ProviderSpec,
)

logger = logging.getLogger(__name__)

# Upstream error bodies can be whole HTML pages; keep log lines bounded
_MAX_DETAIL_CHARS = 500


class BaseProviderAdapter(ABC):
    """Base class for all provider adapters."""

    provider: ProviderName
    label: str = ""  # human-readable name used in failure messages

    def __init__(self, spec: ProviderSpec):
        if spec.name != self.provider:
            raise ValueError(f"{type(self).__name__} cannot serve provider {spec.name.value}")
        self.spec = spec

    async def attempt(self, prompt: str, **options: Any) -> AttemptResult:
        """Try this provider once. Never raises for provider-level failures."""
        if not self.spec.configured:
            return AttemptFailure(
                provider=self.provider,
                kind=FailureKind.MISSING_CREDENTIAL,
                reason=f"Missing {self.spec.credential_env}",
            )

        try:
            payload = await self._call(prompt, **options)
        except ProviderError as e:
            return AttemptFailure(
                provider=self.provider,
                kind=e.kind,
                reason=str(e),
                raw_detail=e.raw_detail[:_MAX_DETAIL_CHARS],
            )
        except httpx.TimeoutException:
            return AttemptFailure(
                provider=self.provider,
                kind=FailureKind.TRANSPORT_FAILURE,
                reason=f"{self.label} timeout after {self.spec.timeout_seconds:g}s",
            )
        except httpx.HTTPError as e:
            return AttemptFailure(
                provider=self.provider,
                kind=FailureKind.TRANSPORT_FAILURE,
                reason=f"{self.label} request failed: {e}",
            )

        return AttemptSuccess(provider=self.provider, model=self.spec.model, payload=payload)

    @abstractmethod
    async def _call(self, prompt: str, **options: Any) -> str:
        """Send the request and return the extracted payload, or raise ProviderError."""
        ...

    # -- raw HTTP helpers ---------------------------------------------------

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.spec.api_key}",
            "Content-Type": "application/json",
        }
        headers.update(dict(self.spec.extra_headers))
        return headers

    async def _post_json(self, path: str, payload: dict[str, Any]) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        url = f"{self.spec.base_url.rstrip('/')}/{path.lstrip('/')}"
        logger.debug("POST %s (provider=%s, model=%s)", url, self.provider.value, self.spec.model)
        async with httpx.AsyncClient(timeout=self.spec.timeout_seconds) as client:
            resp = await client.post(url, json=payload, headers=self._headers())

        raw_text = resp.text
        try:
            data = resp.json()
        except ValueError:
            data = None
            if resp.is_success:
                raise ProviderError(
                    FailureKind.MALFORMED_UPSTREAM_BODY,
                    f"{self.label} API error ({resp.status_code}): Invalid JSON response",
                    raw_detail=raw_text,
                )

        if not resp.is_success:
            message = upstream_error_message(data, raw_text)
            raise ProviderError(
                FailureKind.UPSTREAM_REJECTED,
                f"{self.label} API error ({resp.status_code}): {message}",
                raw_detail=raw_text,
            )
        return data


# ---------------------------------------------------------------------------
# Gemini (google-genai SDK)
# ---------------------------------------------------------------------------


class GeminiAdapter(BaseProviderAdapter):
    """Google Gemini through the official SDK."""

    provider = ProviderName.GEMINI
    label = "Gemini"

    def _client(self) -> genai.Client:
        # HttpOptions.timeout is in milliseconds
        http_options = genai_types.HttpOptions(
            timeout=int(self.spec.timeout_seconds * 1000),
            base_url=self.spec.base_url or None,
        )
        return genai.Client(api_key=self.spec.api_key, http_options=http_options)

    async def _call(self, prompt: str, **options: Any) -> str:
        client = self._client()
        try:
            result = await client.aio.models.generate_content(
                model=self.spec.model,
                contents=[{"role": "user", "parts": [{"text": prompt}]}],
            )
        except genai_errors.APIError as e:
            raise ProviderError(
                FailureKind.UPSTREAM_REJECTED,
                f"{self.label} API error ({e.code}): {e.message or e.status}",
                raw_detail=str(e),
            ) from e
        finally:
            # Each client owns its own connection pool
            await client.aio.aclose()

        return decode_gemini_text(result.model_dump(mode="json", exclude_none=True), self.label)


# ---------------------------------------------------------------------------
# OpenAI-compatible chat/completions
# ---------------------------------------------------------------------------


class OpenAIChatAdapter(BaseProviderAdapter):
    """Plain OpenAI-style chat/completions call with a single user message."""

    include_reasoning = False

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.spec.model,
            "messages": [{"role": "user", "content": prompt}],
        }

    async def _call(self, prompt: str, **options: Any) -> str:
        data = await self._post_json("chat/completions", self._payload(prompt))
        return decode_chat_text(data, self.label, include_reasoning=self.include_reasoning)


class A4FChatAdapter(OpenAIChatAdapter):
    provider = ProviderName.A4F_CHAT
    label = "A4F"


class OpenRouterChatAdapter(OpenAIChatAdapter):
    """OpenRouter with reasoning turned on; the trace is shown ahead of the answer."""

    provider = ProviderName.OPENROUTER_CHAT
    label = "OpenRouter"
    include_reasoning = True

    def _payload(self, prompt: str) -> dict[str, Any]:
        payload = super()._payload(prompt)
        payload["reasoning"] = {"enabled": True}
        return payload


# ---------------------------------------------------------------------------
# Image providers
# ---------------------------------------------------------------------------


class OpenRouterImageAdapter(BaseProviderAdapter):
    """Image output through chat/completions. Size is not configurable here."""

    provider = ProviderName.OPENROUTER_IMAGE
    label = "OpenRouter"

    async def _call(self, prompt: str, **options: Any) -> str:
        payload = {
            "model": self.spec.model,
            "messages": [{"role": "user", "content": prompt}],
            "modalities": ["image"],
        }
        data = await self._post_json("chat/completions", payload)
        return decode_image_reference(data, self.label)


class A4FImageAdapter(BaseProviderAdapter):
    """OpenAI-style images/generations endpoint."""

    provider = ProviderName.A4F_IMAGE
    label = "A4F"

    async def _call(self, prompt: str, size: str | None = None, **options: Any) -> str:
        payload: dict[str, Any] = {
            "model": self.spec.model,
            "prompt": prompt,
            "n": 1,
        }
        if size:
            payload["size"] = size
        data = await self._post_json("images/generations", payload)
        return decode_image_reference(data, self.label)


# ---------------------------------------------------------------------------
# Adapter registry
# ---------------------------------------------------------------------------

ADAPTER_REGISTRY: dict[ProviderName, type[BaseProviderAdapter]] = {
    ProviderName.GEMINI: GeminiAdapter,
    ProviderName.A4F_CHAT: A4FChatAdapter,
    ProviderName.OPENROUTER_CHAT: OpenRouterChatAdapter,
    ProviderName.OPENROUTER_IMAGE: OpenRouterImageAdapter,
    ProviderName.A4F_IMAGE: A4FImageAdapter,
}


def get_adapter(spec: ProviderSpec) -> BaseProviderAdapter:
    """Factory: get the appropriate adapter for a provider spec."""
    cls = ADAPTER_REGISTRY.get(spec.name)
    if cls is None:
        raise ValueError(f"No adapter registered for provider: {spec.name}")
    return cls(spec)
