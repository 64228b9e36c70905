"""Typed decoders for upstream response bodies.

Each provider family gets a small pydantic schema. A body that does not fit
the schema fails here, at the decode boundary, as MALFORMED_UPSTREAM_BODY;
a body that fits but carries nothing usable fails as EMPTY_OR_ABSENT_PAYLOAD.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError

from fancy_gateway.gateway.types import FailureKind, ProviderError

# ---------------------------------------------------------------------------
# Gemini (generateContent)
# ---------------------------------------------------------------------------


class GeminiPart(BaseModel):
    text: str | None = None
    thought: bool | None = None


class GeminiContent(BaseModel):
    parts: list[GeminiPart] | None = None


class GeminiCandidate(BaseModel):
    content: GeminiContent | None = None
    finish_reason: str | None = None


class GeminiBody(BaseModel):
    candidates: list[GeminiCandidate] | None = None


# ---------------------------------------------------------------------------
# OpenAI-style chat/completions and images/generations
# ---------------------------------------------------------------------------


class ImageUrl(BaseModel):
    url: str | None = None


class ImageEntry(BaseModel):
    type: str | None = None
    image_url: ImageUrl | str | None = None


class ContentPart(BaseModel):
    type: str | None = None
    text: str | None = None
    image_url: ImageUrl | str | None = None
    imageUrl: ImageUrl | str | None = None


class ReasoningDetail(BaseModel):
    type: str | None = None
    text: str | None = None
    summary: str | None = None


class ChatMessage(BaseModel):
    role: str | None = None
    content: str | list[ContentPart] | None = None
    reasoning: str | None = None
    reasoning_details: list[ReasoningDetail] | str | None = None
    images: list[ImageEntry] | None = None


class ChatChoice(BaseModel):
    message: ChatMessage | None = None
    finish_reason: str | None = None


class ImageDatum(BaseModel):
    url: str | None = None
    b64_json: str | None = None


class CompletionBody(BaseModel):
    model: str | None = None
    choices: list[ChatChoice] | None = None
    data: list[ImageDatum] | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _validate(schema: type[BaseModel], raw: Any, label: str) -> Any:
    try:
        return schema.model_validate(raw)
    except ValidationError as e:
        raise ProviderError(
            FailureKind.MALFORMED_UPSTREAM_BODY,
            f"{label} returned an unexpected response shape",
            raw_detail=str(e),
        ) from e


def _url_of(value: ImageUrl | str | None) -> str | None:
    if isinstance(value, str):
        return value or None
    if value is not None and value.url:
        return value.url
    return None


def _first_message(body: CompletionBody, label: str) -> ChatMessage:
    message = body.choices[0].message if body.choices else None
    if message is None:
        raise ProviderError(FailureKind.EMPTY_OR_ABSENT_PAYLOAD, f"No message in {label} response")
    return message


def _message_text(message: ChatMessage) -> str:
    content = message.content
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return "".join(part.text or "" for part in content if part.type in (None, "text"))


def _reasoning_trace(message: ChatMessage) -> str:
    if message.reasoning:
        return message.reasoning.strip()
    details = message.reasoning_details
    if isinstance(details, str):
        return details.strip()
    if details:
        return " ".join((d.text or d.summary or "").strip() for d in details if d.text or d.summary).strip()
    return ""


# ---------------------------------------------------------------------------
# Decoders
# ---------------------------------------------------------------------------


def decode_gemini_text(raw: Any, label: str = "Gemini") -> str:
    """Concatenate the text parts of the first candidate, skipping thought parts."""
    body: GeminiBody = _validate(GeminiBody, raw, label)
    candidate = body.candidates[0] if body.candidates else None
    if candidate is None or candidate.content is None:
        reason = f" (finish reason: {candidate.finish_reason})" if candidate and candidate.finish_reason else ""
        raise ProviderError(FailureKind.EMPTY_OR_ABSENT_PAYLOAD, f"No candidates in {label} response{reason}")

    text = "".join(p.text or "" for p in candidate.content.parts or [] if not p.thought)
    if not text.strip():
        raise ProviderError(FailureKind.EMPTY_OR_ABSENT_PAYLOAD, f"Empty message in {label} response")
    return text


def decode_chat_text(raw: Any, label: str, include_reasoning: bool = False) -> str:
    """Extract the assistant text of the first choice.

    With ``include_reasoning`` the reasoning trace, if any, is prepended as
    ``*[Reasoning] ...*`` followed by a blank line. The trace alone never
    counts as an answer.
    """
    body: CompletionBody = _validate(CompletionBody, raw, label)
    message = _first_message(body, label)

    text = _message_text(message)
    if not text.strip():
        raise ProviderError(FailureKind.EMPTY_OR_ABSENT_PAYLOAD, f"Empty message in {label} response")

    if include_reasoning:
        trace = _reasoning_trace(message)
        if trace:
            text = f"*[Reasoning] {trace}*\n\n{text}"
    return text


def decode_image_reference(raw: Any, label: str) -> str:
    """Find the generated image in any of the known response shapes.

    Order: ``message.images[0].image_url`` (string or ``{url}``), then the
    first ``message.content[]`` image part, then ``data[0].url``, then
    ``data[0].b64_json`` as a data URL.
    """
    body: CompletionBody = _validate(CompletionBody, raw, label)

    message = body.choices[0].message if body.choices else None
    if message is not None:
        if message.images:
            url = _url_of(message.images[0].image_url)
            if url:
                return url

        if isinstance(message.content, list):
            for part in message.content:
                if part.type == "image_url" or part.image_url is not None or part.imageUrl is not None:
                    url = _url_of(part.image_url) or _url_of(part.imageUrl)
                    if url:
                        return url
                    break

    if body.data:
        first = body.data[0]
        if first.url:
            return first.url
        if first.b64_json:
            return f"data:image/png;base64,{first.b64_json}"

    if body.choices and message is None and not body.data:
        raise ProviderError(FailureKind.EMPTY_OR_ABSENT_PAYLOAD, f"No message in {label} response")
    raise ProviderError(FailureKind.EMPTY_OR_ABSENT_PAYLOAD, f"No image in {label} response")


def upstream_error_message(raw: Any, fallback: str) -> str:
    """Pull ``error.message`` out of an upstream error body, else use the raw text."""
    if isinstance(raw, dict):
        error = raw.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str) and error:
            return error
    return fallback
