"""Middleware registration."""

from fastapi import FastAPI

from advent.config import Settings
from advent.middleware.error_handler import setup_error_handlers
from advent.middleware.logging import setup_logging
from advent.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register logging, error handlers and request ids."""
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)
