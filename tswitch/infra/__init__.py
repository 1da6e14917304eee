"""Internal machinery: HTTP transport."""

from .http import (
    Auth,
    BearerAuth,
    HttpClient,
)

__all__ = [
    "Auth",
    "BearerAuth",
    "HttpClient",
]
