"""
HTTP API layer for eventgraph.
"""

from .http_server import create_app

__all__ = ["create_app"]
