"""Response normalizer: turns a GatewayOutcome into the wire response.

  - Chat success: raw text, written once
  - Chat failure: 500 text naming the primary provider's error
  - Image success: ``{"imageUrl": ..., "model": ...}``
  - Image failure: 500 ``{"error": ...}`` naming the primary provider's error
"""

from __future__ import annotations

from fastapi.responses import JSONResponse, PlainTextResponse

from fancy_gateway.gateway.types import GatewayFailure, GatewayOutcome, GatewaySuccess

TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"


def chat_failure_message(failure: GatewayFailure) -> str:
    return f"Chat failed. Primary error: {failure.primary_reason}. All backups also failed."


def image_failure_message(failure: GatewayFailure) -> str:
    return f"Image generation failed. Primary error: {failure.primary_reason}. All backups also failed."


def image_payload(success: GatewaySuccess) -> dict[str, str]:
    return {"imageUrl": success.payload, "model": success.model}


def chat_response(outcome: GatewayOutcome) -> PlainTextResponse:
    if isinstance(outcome, GatewaySuccess):
        return PlainTextResponse(outcome.payload, media_type=TEXT_MEDIA_TYPE)
    return PlainTextResponse(chat_failure_message(outcome), status_code=500, media_type=TEXT_MEDIA_TYPE)


def image_response(outcome: GatewayOutcome) -> JSONResponse:
    if isinstance(outcome, GatewaySuccess):
        return JSONResponse(image_payload(outcome))
    return JSONResponse({"error": image_failure_message(outcome)}, status_code=500)
