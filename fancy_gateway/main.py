import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fancy_gateway.api.router import api_router
from fancy_gateway.core.config import settings, validate_settings_for_production
from fancy_gateway.core.dependencies import get_chat_gateway, get_image_gateway
from fancy_gateway.core.logging import setup_logging
from fancy_gateway.core.metrics import PrometheusMiddleware, metrics_response
from fancy_gateway.core.middleware import RequestLoggingMiddleware
from fancy_gateway.core.sentry import init_sentry

# Configure logging before anything else
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    validate_settings_for_production()
    init_sentry()
    logger.info("Starting %s gateway...", settings.app_name)

    # Build both chains at startup and log their order
    for gateway in (get_chat_gateway(), get_image_gateway()):
        chain = gateway.chain
        logger.info(
            "%s chain: %s",
            chain.name,
            " -> ".join(f"{s.name.value}{'' if s.configured else ' (no credential)'}" for s in chain.specs),
        )

    yield

    # Shutdown
    logger.info("%s gateway shut down", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Cascading multi-provider chat and image completion gateway",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs" if settings.app_debug else None,
    redoc_url="/api/redoc" if settings.app_debug else None,
)


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled %s on %s %s:\n%s", type(exc).__name__, request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": f"{type(exc).__name__}: {exc}"})


# Request logging + metrics middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PrometheusMiddleware)

# CORS: parse allowed_origins from settings (comma-separated)
_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_response()
