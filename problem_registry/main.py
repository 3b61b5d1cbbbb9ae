from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import time
from typing import Optional

from problem_registry.config.settings import ServiceSettings, get_settings
from problem_registry.middleware.error_handler import error_handler_middleware, setup_error_handlers
from problem_registry.middleware.request_id import RequestIDMiddleware
from problem_registry.routers import health_router, problems_router
from problem_registry.services.problem_registry import ProblemRegistry

logger = logging.getLogger("problem_registry.main")


async def log_requests(request: Request, call_next):
    """Log every request with its outcome and duration."""
    start_time = time.time()
    path = request.url.path
    method = request.method

    # Health checks are polled by the hosting platform; too verbose
    skip_logging = method == "GET" and path.endswith("/health")

    if not skip_logging:
        logger.info(f"🔔 {method} {path}")

    response = await call_next(request)

    process_time = time.time() - start_time
    status_code = response.status_code

    if status_code < 400:
        status_str = f"✅ {status_code}"
    elif status_code < 500:
        status_str = f"⚠️ {status_code}"
    else:
        status_str = f"❌ {status_code}"

    if not skip_logging:
        logger.info(f"🏁 {method} {path} - {status_str} - {process_time:.3f}s")
    return response


def create_app(
    settings: Optional[ServiceSettings] = None,
    registry: Optional[ProblemRegistry] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Service settings; read from the environment when omitted
        registry: Problem registry to serve; a new empty one when omitted
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Problem Registry API",
        description="API for reporting and tracking community problems",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.registry = registry if registry is not None else ProblemRegistry()

    # Innermost first: errors are rendered before the request is logged,
    # and the request id is set before anything logs
    app.middleware("http")(error_handler_middleware)
    app.middleware("http")(log_requests)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    setup_error_handlers(app)

    app.include_router(problems_router.router, prefix=settings.route_prefix)
    app.include_router(health_router.router, prefix=settings.route_prefix)

    return app


app = create_app()
