"""Health API: liveness plus which providers have credentials."""

from fastapi import APIRouter, Depends

from fancy_gateway.core.dependencies import get_chat_gateway, get_image_gateway
from fancy_gateway.gateway.chain import ProviderChain
from fancy_gateway.gateway.gateway import ChatGateway, ImageGateway

router = APIRouter(tags=["health"])


def _describe(chain: ProviderChain) -> list[dict]:
    return [
        {
            "provider": spec.name.value,
            "kind": spec.kind.value,
            "model": spec.model,
            "configured": spec.configured,
        }
        for spec in chain.specs
    ]


@router.get("/health")
async def health(
    chat: ChatGateway = Depends(get_chat_gateway),
    image: ImageGateway = Depends(get_image_gateway),
):
    """Providers are listed in priority order. Credentials are never echoed."""
    return {
        "status": "ok",
        "chat": _describe(chat.chain),
        "image": _describe(image.chain),
    }
