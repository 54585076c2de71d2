"""
Storefront shopping assistant.

Exposes a lazy factory for the FastAPI application so that runtime code and
tests can build the app without creating it at import time.
"""


def create_app():
    """Lazy import wrapper for create_app to avoid import-time app creation."""
    from .main import create_app as _create_app
    return _create_app()


def get_app():
    """Get or create the FastAPI application instance."""
    from .main import app
    return app


__all__ = ["create_app", "get_app"]
