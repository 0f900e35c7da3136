"""
FastAPI application factory.

Usage:
    python -m api.app                                  # Dev server on port 8000
    APP_DB_PATH=/data/milex.sqlite python -m api.app
    APP_DATA_BACKEND=json APP_DATA_DIR=public/data python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

The dataset backend is chosen once, here, and injected into the query layer:
``create_app(accessor=...)`` for tests or embedding, otherwise from
``AppConfig`` (APP_DATA_BACKEND).

Logging: one line per request with method, path, status, duration and a
short request ID (also returned as ``X-Request-ID``).  ``APP_LOG_FORMAT=json``
switches to newline-delimited JSON records.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.database import build_accessor
from api.routes import aggregations, reference
from expenditure.accessor import DatasetAccessor
from expenditure.errors import DataUnavailable, NotFound
from expenditure.facade import ExpenditureQueries
from utils.config import AppConfig

# ── Configuration ─────────────────────────────────────────────────────────────
_cfg = AppConfig.from_env()

# ── Structured JSON logging ───────────────────────────────────────────────────


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def configure_logging(cfg: AppConfig) -> None:
    """Install one stream handler on the root logger."""
    handler = logging.StreamHandler()
    if cfg.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    level = getattr(logging, cfg.log_level, logging.INFO)
    logging.basicConfig(handlers=[handler], level=level, force=True)


configure_logging(_cfg)
_logger = logging.getLogger("milex_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report which backend is serving on startup."""
    accessor = app.state.queries.accessor
    _logger.info("Serving expenditure data from %s", type(accessor).__name__)
    yield


def _error_body(error: str, detail: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, "status_code": status_code},
    )


def create_app(accessor: DatasetAccessor | None = None,
               cfg: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        accessor: Dataset backend to serve.  Built from ``cfg`` when omitted.
        cfg: Configuration override (defaults to the environment).

    Returns:
        Configured FastAPI application instance.
    """
    cfg = cfg or _cfg
    if accessor is None:
        accessor = build_accessor(cfg)

    app = FastAPI(
        title="Military Expenditure API",
        summary="Rankings, time series and growth rates of military expenditure.",
        description=(
            "## Military Expenditure API\n\n"
            "Read-only access to historical military expenditure by country.\n\n"
            "### Key concepts\n"
            "- **Amounts** are in **millions** of currency units, exactly as stored.\n"
            "- A year with no recorded amount is omitted, never reported as zero.\n"
            "- Rankings are sorted largest first; ties are broken by country name.\n"
            "- Growth rates are `(end - start) / start * 100` and only cover "
            "countries with a positive start amount.\n"
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "reference",
                "description": "Countries and continents.",
            },
            {
                "name": "aggregations",
                "description": "Year rankings, country series, growth rates and continent totals.",
            },
            {
                "name": "meta",
                "description": "Health check.",
            },
        ],
    )
    app.state.queries = ExpenditureQueries(accessor)

    # ── CORS middleware ───────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["*"],
    )

    # ── Request logging middleware ────────────────────────────────────────────

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request and tag the response with a request ID."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        path = request.url.path

        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, path, response.status_code, duration_ms,
                request_id,
            )
        return response

    # ── Error handling ────────────────────────────────────────────────────────

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return _error_body("Not found", str(exc), 404)

    @app.exception_handler(DataUnavailable)
    async def data_unavailable_handler(request: Request, exc: DataUnavailable):
        _logger.error("data_unavailable path=%s detail=%s", request.url.path, exc)
        return _error_body("Service unavailable", str(exc), 503)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        # InvalidArgument is a ValueError
        return _error_body("Bad request", str(exc), 400)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """Catch unhandled exceptions and return JSON instead of HTML traceback."""
        _logger.exception("unhandled error path=%s", request.url.path)
        return _error_body("Internal server error", str(exc), 500)

    # ── Health check ──────────────────────────────────────────────────────────

    @app.get("/health", tags=["meta"], summary="Health check")
    def health():
        """Return 200 OK if the dataset can be read."""
        backend = type(app.state.queries.accessor).__name__
        try:
            count = len(app.state.queries.list_countries())
        except DataUnavailable as e:
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "backend": backend, "error": str(e)},
            )
        return {"status": "ok", "backend": backend, "countries": count}

    # ── Register routers ──────────────────────────────────────────────────────

    prefix = "/api/v1"
    app.include_router(reference.router,    prefix=prefix)
    app.include_router(aggregations.router, prefix=prefix)

    return app


# Singleton instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.app:app",
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
