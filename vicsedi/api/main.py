"""FastAPI application for the vicsedi document API.

Provides the main application instance with routers, middleware,
and exception handlers configured.
"""

import logging
import os
import sys
from datetime import UTC, datetime

from fastapi import FastAPI, Request

# Configure logging to stdout for uvicorn to capture
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
# Ensure our application loggers are captured
logging.getLogger("vicsedi").setLevel(logging.INFO)
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vicsedi import __version__
from vicsedi.api.routes import convert, documents
from vicsedi.api.schemas import HealthResponse
from vicsedi.cli.config import VicsEdiConfig, load_config
from vicsedi.edi.models import Dialect
from vicsedi.errors import DomainError, error_payload

logger = logging.getLogger(__name__)


def _parse_allowed_origins() -> list[str]:
    """Parse comma-separated CORS allowlist from ALLOWED_ORIGINS env var."""
    raw = os.environ.get("ALLOWED_ORIGINS", "").strip()
    if not raw:
        return []
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Return domain errors as 400 with the full list of messages.

    Args:
        request: The incoming request.
        exc: The domain error raised by the service layer.

    Returns:
        JSONResponse with error details.
    """
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content=error_payload(exc))


def create_app(config: VicsEdiConfig | None = None) -> FastAPI:
    """Build the API application.

    Args:
        config: Resolved configuration. Loaded from VICSEDI_CONFIG_PATH or
            the standard locations when omitted.
    """
    if config is None:
        config = load_config(config_path=os.environ.get("VICSEDI_CONFIG_PATH"))

    app = FastAPI(
        title="vicsedi API",
        description="VICS 4010/5010 X12 850/856/810 document generation",
        version=__version__,
    )
    app.state.config = config
    app.state.envelope = config.envelope.to_settings()

    # CORS allowlist is env-driven. If unset, CORS is disabled (same-origin only).
    allowed_origins = _parse_allowed_origins()
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["Content-Type"],
        )

    app.add_exception_handler(DomainError, domain_error_handler)

    app.include_router(documents.router, prefix="/api/v1")
    app.include_router(convert.router, prefix="/api/v1")

    @app.get("/api/v1/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Health check listing the supported dialects."""
        return HealthResponse(
            message="VICS 4010/5010 EDI Suite API is running",
            supported_versions=[d.value for d in Dialect],
            timestamp=datetime.now(UTC).isoformat(),
        )

    logger.info("vicsedi API ready (default dialect %s)", config.edi.default_dialect.value)
    return app


app = create_app()
