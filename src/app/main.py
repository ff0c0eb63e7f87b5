import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from common.errors import GatewayError
from common.settings import Settings
from providers.base import get_client
from rate_limit.limiter import get_limiter
from .logging_config import configure_logging
from .middleware import log_requests, security_headers, rate_limit, body_size_limit
from .routers import health, submissions

logger = logging.getLogger(__name__)

API_PREFIX = "/api/docuseal"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    app.state.provider = get_client(settings)
    logger.info("DocuSeal API gateway started (environment=%s)", settings.environment)
    logger.info("Provider base URL: %s", settings.api_base)
    if not settings.has_api_key:
        logger.warning("DOCUSEAL_API_KEY is not set; submission routes will answer 500")
    try:
        yield
    finally:
        await app.state.provider.aclose()
        logger.info("DocuSeal API gateway shut down")


async def gateway_error_handler(request: Request, exc: GatewayError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request", "message": details})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": "An unexpected error occurred."},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="DocuSeal Signature Gateway", version=health.VERSION, lifespan=lifespan)
    app.state.settings = settings

    app.include_router(health.router, tags=["health"])
    app.include_router(submissions.router, prefix=API_PREFIX, tags=["submissions"])

    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    limiter = get_limiter(
        "api",
        window_ms=settings.rate_limit_window_ms,
        max_requests=settings.rate_limit_max_requests,
        config_path=Path(settings.rate_limit_config),
    )
    # last added runs first
    app.middleware("http")(security_headers)
    app.middleware("http")(body_size_limit(settings.max_body_bytes))
    app.middleware("http")(rate_limit(limiter))
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(CORSMiddleware, allow_origins=settings.cors_origins, allow_methods=["*"], allow_headers=["*"])
    app.middleware("http")(log_requests)
    return app


load_dotenv()
_settings = Settings.from_env()
configure_logging(_settings.log_level)
app = create_app(_settings)


def run() -> None:
    import uvicorn
    uvicorn.run(app, host=_settings.host, port=_settings.port)


if __name__ == "__main__":
    run()
