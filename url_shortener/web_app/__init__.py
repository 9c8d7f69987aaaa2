"""Web application for URL shortener."""

from .app_factory import create_app, attach_services

__all__ = ["create_app", "attach_services"]
