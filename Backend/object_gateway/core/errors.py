from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse


class GatewayError(Exception):
    """
    Base class for every error the gateway turns into a 500 response.
    The message is sent back to the client as-is.
    """


class StorageError(GatewayError):
    """
    Raised when the storage backend fails to list a prefix or sign a key.
    """


class RenderError(GatewayError):
    """
    Raised when a directory page cannot be completed (e.g. a link could not be signed).
    """


async def gateway_error_handler(request: Request, exc: GatewayError) -> PlainTextResponse:
    # Plain text body, no JSON envelope
    return PlainTextResponse(str(exc), status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
