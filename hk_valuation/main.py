from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Routers
from .routers.aggregate import router as aggregate_router

# Core modules
from .core.config import Settings, settings as default_settings
from .core.cors import CorsHeadersMiddleware
from .core.errors import ConfigurationError, ValidationError
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint
from .data.valuation_log import valuation_log
from .services.aggregation_service import REQUIRED_FIELDS_MESSAGE, build_extractor

def create_app(settings: Settings | None = None) -> FastAPI:
    """
    App factory so tests and ASGI servers can instantiate cleanly.
    Clients are built here from ``settings`` and hung off ``app.state``.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)  # Set up JSON logs + correlation-id filter

    app = FastAPI(
        title="HK Property Valuation Aggregator",
        version="1.0.0",
        description="Collects valuation estimates for a Hong Kong address from several banks and agencies.",
    )
    app.state.settings = settings
    app.state.extractor = build_extractor(settings)
    app.state.valuation_log = valuation_log(settings)

    # Observability middlewares
    app.add_middleware(CorrelationIdMiddleware)  # Adds/propagates X-Request-Id
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)       # Records req/latency metrics
    # Outermost, so preflights and every error response carry the headers
    app.add_middleware(CorsHeadersMiddleware, allow_origins=settings.ALLOW_ORIGINS)

    # Errors are always {"error": "..."}
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def malformed_body(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": REQUIRED_FIELDS_MESSAGE})

    @app.exception_handler(ConfigurationError)
    async def configuration_error(request: Request, exc: ConfigurationError):
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)},
                            headers=getattr(exc, "headers", None))

    # Meta routes
    @app.get("/health", tags=["meta"])
    def health():
        return {"status": "ok"}

    @app.get("/ping", tags=["meta"])
    def ping():
        return {"pong": True}

    if settings.PROMETHEUS_ENABLED:
        # Standard Prometheus scrape endpoint
        app.add_route("/metrics", metrics_endpoint, methods=["GET"])

    # Business routes
    app.include_router(aggregate_router, tags=["valuation"])

    return app

app = create_app()
