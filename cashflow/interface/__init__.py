"""Mini README: HTTP interface package.

Exposes ``create_application`` so the CLI and tests can build the FastAPI
app without importing route modules directly.
"""

from .web_app import create_application

__all__ = ["create_application"]
