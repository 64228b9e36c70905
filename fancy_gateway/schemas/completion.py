from typing import Any

from pydantic import BaseModel, Field, StrictStr, model_validator

from fancy_gateway.gateway.types import ChatMode, ChatRequest, ImageRequest


def _first_text(*values: str | None) -> str:
    for value in values:
        if value and value.strip():
            return value
    return ""


class ChatRequestBody(BaseModel):
    message: StrictStr | None = None
    prompt: StrictStr | None = None  # accepted alias for message
    mode: Any = None  # anything but "code" selects the plain persona

    @property
    def text(self) -> str:
        return _first_text(self.message, self.prompt)

    @model_validator(mode="after")
    def _require_text(self) -> "ChatRequestBody":
        if not self.text:
            raise ValueError("message must be a non-empty string")
        return self

    def to_request(self) -> ChatRequest:
        return ChatRequest(prompt=self.text, mode=ChatMode.from_wire(self.mode))


class ImageRequestBody(BaseModel):
    prompt: StrictStr | None = None
    message: StrictStr | None = None  # accepted alias for prompt
    size: str | None = Field(None, pattern=r"^\d{2,4}x\d{2,4}$")

    @property
    def text(self) -> str:
        return _first_text(self.prompt, self.message)

    @model_validator(mode="after")
    def _require_text(self) -> "ImageRequestBody":
        if not self.text:
            raise ValueError("prompt must be a non-empty string")
        return self

    def to_request(self) -> ImageRequest:
        return ImageRequest(prompt=self.text, size=self.size)
