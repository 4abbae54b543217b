"""FastAPI surface: routers, mounting, error handlers and the demo app."""

from .errors import install_error_handlers
from .router import Router, mount

__all__ = [
    "Router",
    "mount",
    "install_error_handlers",
]
