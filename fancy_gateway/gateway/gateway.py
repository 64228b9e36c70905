"""Completion gateways: chat and image entry points.

Usage:
    chat = ChatGateway.from_settings(settings)
    outcome = await chat.complete(ChatRequest(prompt="hi", mode=ChatMode.CODE))

    images = ImageGateway.from_settings(settings)
    outcome = await images.generate(ImageRequest(prompt="draw a cat"))
"""

from __future__ import annotations

import logging

from fancy_gateway.core.config import Settings
from fancy_gateway.gateway.chain import ProviderChain
from fancy_gateway.gateway.prompt_builder import build_prompt
from fancy_gateway.gateway.providers import build_chat_providers, build_image_providers
from fancy_gateway.gateway.types import ChatRequest, GatewayOutcome, ImageRequest

logger = logging.getLogger(__name__)

CHAT_CHAIN = "chat"
IMAGE_CHAIN = "image"


class ChatGateway:
    """Persona injection, then the chat provider chain."""

    def __init__(self, chain: ProviderChain):
        self.chain = chain

    @classmethod
    def from_settings(cls, settings: Settings) -> ChatGateway:
        return cls(ProviderChain.from_specs(CHAT_CHAIN, build_chat_providers(settings)))

    async def complete(self, request: ChatRequest) -> GatewayOutcome:
        prompt = build_prompt(request.prompt, request.mode)
        logger.debug("chat request (mode=%s, %d chars)", request.mode.value, len(request.prompt))
        return await self.chain.run(prompt)


class ImageGateway:
    """Image provider chain. The prompt is sent as-is, without a persona."""

    def __init__(self, chain: ProviderChain):
        self.chain = chain

    @classmethod
    def from_settings(cls, settings: Settings) -> ImageGateway:
        return cls(ProviderChain.from_specs(IMAGE_CHAIN, build_image_providers(settings)))

    async def generate(self, request: ImageRequest) -> GatewayOutcome:
        logger.debug("image request (size=%s, %d chars)", request.size, len(request.prompt))
        return await self.chain.run(request.prompt, size=request.size)
