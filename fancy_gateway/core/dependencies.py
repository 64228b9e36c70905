from functools import lru_cache

from fancy_gateway.core.config import settings
from fancy_gateway.gateway.gateway import ChatGateway, ImageGateway


@lru_cache
def get_chat_gateway() -> ChatGateway:
    """Built once per process from the startup settings."""
    return ChatGateway.from_settings(settings)


@lru_cache
def get_image_gateway() -> ImageGateway:
    return ImageGateway.from_settings(settings)
