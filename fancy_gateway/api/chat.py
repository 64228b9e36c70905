"""Chat API: text completion through the chat provider chain."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from fancy_gateway.core.dependencies import get_chat_gateway
from fancy_gateway.gateway.gateway import ChatGateway
from fancy_gateway.gateway.normalizer import TEXT_MEDIA_TYPE, chat_response
from fancy_gateway.schemas.completion import ChatRequestBody

router = APIRouter(tags=["chat"])


@router.post("/chat", response_class=PlainTextResponse)
async def chat(request: Request, gateway: ChatGateway = Depends(get_chat_gateway)):
    """Answer a message as plain text.

    Body: ``{"message": str, "mode": "code" | anything}``. The answer comes
    from the first provider that produces a non-empty message; if all fail
    the response is a 500 naming the primary provider's error.
    """
    try:
        raw = await request.json()
    except ValueError:
        return PlainTextResponse("Invalid request body", status_code=400, media_type=TEXT_MEDIA_TYPE)

    try:
        body = ChatRequestBody.model_validate(raw)
    except ValidationError:
        return PlainTextResponse("Missing or invalid message", status_code=400, media_type=TEXT_MEDIA_TYPE)

    outcome = await gateway.complete(body.to_request())
    return chat_response(outcome)
