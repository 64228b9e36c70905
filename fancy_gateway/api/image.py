"""Image API: image generation through the image provider chain."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from fancy_gateway.core.dependencies import get_image_gateway
from fancy_gateway.gateway.gateway import ImageGateway
from fancy_gateway.gateway.normalizer import image_response
from fancy_gateway.schemas.completion import ImageRequestBody

router = APIRouter(tags=["image"])


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=400)


@router.post("/image")
async def generate_image(request: Request, gateway: ImageGateway = Depends(get_image_gateway)):
    """Generate one image.

    Body: ``{"prompt": str, "size": "1024x1024"?}`` (``message`` is accepted
    in place of ``prompt``). Returns ``{"imageUrl": ..., "model": ...}``.
    """
    try:
        raw = await request.json()
    except ValueError:
        return _bad_request("Invalid request body")

    try:
        body = ImageRequestBody.model_validate(raw)
    except ValidationError as e:
        if any(err["loc"] and err["loc"][0] == "size" for err in e.errors()):
            return _bad_request("Invalid image size")
        return _bad_request("Missing or invalid prompt")

    outcome = await gateway.generate(body.to_request())
    return image_response(outcome)
