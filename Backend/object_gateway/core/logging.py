import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

logger = logging.getLogger("object_gateway")
access_logger = logging.getLogger("object_gateway.access")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.
    Everything (startup messages, access lines, uvicorn) goes to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


def log_request(method: str, duration: float, status_code: int, host: str, path: str, query: str) -> None:
    """
    Emit the single access line written for every request.

    Args:
        method (str): HTTP method.
        duration (float): Wall-clock handling time in seconds.
        status_code (int): Status code sent to the client.
        host (str): Value of the Host header.
        path (str): Request path.
        query (str): Raw query string (may be empty).
    """
    access_logger.info(
        "[%s] [%.3fms] [%d] %s %s %s",
        method,
        duration * 1000,
        status_code,
        host,
        path,
        query,
    )
