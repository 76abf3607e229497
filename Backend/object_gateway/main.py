import sys
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request

from object_gateway.core.config import Settings, settings as default_settings
from object_gateway.core.errors import register_exception_handlers
from object_gateway.core.logging import configure_logging, log_request, logger
from object_gateway.services.render import ListingRenderer
from object_gateway.services.storage import ObjectLister, build_s3_client

# Import API routers
from object_gateway.api.v1 import browse as browse_router


def create_app(settings: Optional[Settings] = None, lister: Optional[ObjectLister] = None) -> FastAPI:
    """
    Build the gateway application.

    Args:
        settings (Settings, optional): Configuration; defaults to the values loaded from the environment.
        lister (ObjectLister, optional): Pre-built bucket view. When omitted, a boto3
            client is created from `settings`.

    Raises:
        RuntimeError: If no bucket is configured.
    """
    settings = settings or default_settings

    if lister is None:
        if not settings.S3_BUCKET_NAME:
            raise RuntimeError("S3_BUCKET_NAME is not set")
        lister = ObjectLister(build_s3_client(settings), settings.S3_BUCKET_NAME)
        logger.info("Serving bucket %s (endpoint: %s)", settings.S3_BUCKET_NAME, settings.S3_ENDPOINT or "default")

    # Initialize the FastAPI application
    app = FastAPI(title="Object Gateway", docs_url=None, redoc_url=None, openapi_url=None)

    # Shared, read-only after startup
    app.state.lister = lister
    app.state.renderer = ListingRenderer(lister.get_temporary_link)

    @app.middleware("http")
    async def access_log(request: Request, call_next):
        """
        Write one access line per request. The response is passed through untouched.
        """
        start = time.perf_counter()
        status_code = 500  # Reported if the handler raises past the error handlers
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log_request(
                request.method,
                time.perf_counter() - start,
                status_code,
                request.headers.get("host", ""),
                request.url.path,
                request.url.query,
            )

    register_exception_handlers(app)

    # Register the catch-all browse route
    app.include_router(browse_router.router)

    return app


def run(settings: Optional[Settings] = None) -> None:
    """
    Process entry point: configure logging, build the app and serve it.
    Any startup failure stops the process before a request is served.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    try:
        app = create_app(settings)
    except Exception:
        logger.exception("Failed to initialize the storage client")
        sys.exit(1)

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None, access_log=False)


if __name__ == "__main__":
    run()
