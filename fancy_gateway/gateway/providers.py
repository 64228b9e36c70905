"""Provider chains built from settings.

Order is priority: best provider first. The tuples are built once at
startup and never reordered.
"""

from __future__ import annotations

from fancy_gateway.core.config import Settings
from fancy_gateway.gateway.types import EndpointKind, ProviderName, ProviderSpec


def _openrouter_headers(settings: Settings) -> tuple[tuple[str, str], ...]:
    return (
        ("HTTP-Referer", settings.app_url),
        ("X-Title", settings.app_name),
    )


def build_chat_providers(settings: Settings) -> tuple[ProviderSpec, ...]:
    timeout = settings.provider_timeout_seconds
    return (
        ProviderSpec(
            name=ProviderName.GEMINI,
            kind=EndpointKind.SDK_CALL,
            model=settings.gemini_model,
            credential_env="GEMINI_API_KEY",
            api_key=settings.gemini_api_key,
            timeout_seconds=timeout,
        ),
        ProviderSpec(
            name=ProviderName.A4F_CHAT,
            kind=EndpointKind.RAW_HTTP,
            model=settings.a4f_chat_model,
            credential_env="A4F_API_KEY",
            api_key=settings.a4f_api_key,
            base_url=settings.a4f_base_url,
            timeout_seconds=timeout,
        ),
        ProviderSpec(
            name=ProviderName.OPENROUTER_CHAT,
            kind=EndpointKind.RAW_HTTP,
            model=settings.openrouter_chat_model,
            credential_env="OPENROUTER_API_KEY",
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            timeout_seconds=timeout,
            extra_headers=_openrouter_headers(settings),
        ),
    )


def build_image_providers(settings: Settings) -> tuple[ProviderSpec, ...]:
    timeout = settings.provider_timeout_seconds
    return (
        ProviderSpec(
            name=ProviderName.OPENROUTER_IMAGE,
            kind=EndpointKind.RAW_HTTP,
            model=settings.openrouter_image_model,
            credential_env="OPENROUTER_API_KEY",
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            timeout_seconds=timeout,
            extra_headers=_openrouter_headers(settings),
        ),
        ProviderSpec(
            name=ProviderName.A4F_IMAGE,
            kind=EndpointKind.RAW_HTTP,
            model=settings.a4f_image_model,
            credential_env="A4F_API_KEY",
            api_key=settings.a4f_api_key,
            base_url=settings.a4f_base_url,
            timeout_seconds=timeout,
        ),
    )
