"""Web adapter for the coordinator's HTTP endpoints."""

from shootout.adapters.web.server import (
    WebAdapter,
    create_web_adapter,
    to_http_exception,
)

__all__ = [
    "WebAdapter",
    "create_web_adapter",
    "to_http_exception",
]
