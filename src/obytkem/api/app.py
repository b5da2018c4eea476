"""ASGI application."""

from obytkem.api.factory import create_app

app = create_app()
