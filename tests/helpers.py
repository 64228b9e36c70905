"""Shared test doubles for gateway tests."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from fancy_gateway.gateway.provider_adapters import BaseProviderAdapter
from fancy_gateway.gateway.types import EndpointKind, ProviderName, ProviderSpec


class ScriptedAdapter(BaseProviderAdapter):
    """Adapter whose provider call returns (or raises) a scripted value."""

    label = "Scripted"

    def __init__(self, spec: ProviderSpec, outcome: Any):
        self.provider = spec.name
        super().__init__(spec)
        self.outcome = outcome
        self.calls: list[tuple[str, dict]] = []

    async def _call(self, prompt: str, **options: Any) -> str:
        self.calls.append((prompt, options))
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


def make_spec(
    name: ProviderName = ProviderName.A4F_CHAT,
    api_key: str = "test-key",
    model: str = "test-model",
    **kwargs: Any,
) -> ProviderSpec:
    kwargs.setdefault("kind", EndpointKind.SDK_CALL if name == ProviderName.GEMINI else EndpointKind.RAW_HTTP)
    kwargs.setdefault("base_url", "" if name == ProviderName.GEMINI else "https://upstream.test/v1")
    kwargs.setdefault("timeout_seconds", 5.0)
    return ProviderSpec(
        name=name,
        model=model,
        credential_env=f"{name.name}_API_KEY",
        api_key=api_key,
        **kwargs,
    )


def make_httpx_response(status_code: int, json_data: Any = None, text: str = "") -> httpx.Response:
    """Create a proper httpx.Response with request set."""
    request = httpx.Request("POST", "https://upstream.test/v1")
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, request=request)
    return httpx.Response(status_code, text=text, request=request)


def chat_completion(content: Any = "Hello world", **message: Any) -> dict:
    return {
        "model": "test-model",
        "choices": [{"message": {"role": "assistant", "content": content, **message}, "finish_reason": "stop"}],
    }


@contextmanager
def mock_upstream(*responses: Any) -> Iterator[tuple[MagicMock, AsyncMock]]:
    """Patch httpx.AsyncClient in the adapters module.

    Each item in ``responses`` answers one ``post`` call in order; exceptions
    are raised instead of returned.
    """
    with patch("fancy_gateway.gateway.provider_adapters.httpx.AsyncClient") as mock_client_cls:
        mock_client = AsyncMock()
        mock_client.post.side_effect = list(responses)
        mock_client.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client.__aexit__ = AsyncMock(return_value=None)
        mock_client_cls.return_value = mock_client
        yield mock_client_cls, mock_client


@contextmanager
def mock_gemini(response: Any) -> Iterator[tuple[MagicMock, AsyncMock, AsyncMock]]:
    """Patch genai.Client in the adapters module.

    ``response`` is returned from ``generate_content``, or raised when it is
    an exception. Yields the client class, ``generate_content`` and ``aclose``.
    """
    with patch("fancy_gateway.gateway.provider_adapters.genai.Client") as mock_client_cls:
        if isinstance(response, BaseException):
            generate = AsyncMock(side_effect=response)
        else:
            generate = AsyncMock(return_value=response)
        aclose = AsyncMock(return_value=None)
        mock_client_cls.return_value.aio.models.generate_content = generate
        mock_client_cls.return_value.aio.aclose = aclose
        yield mock_client_cls, generate, aclose
