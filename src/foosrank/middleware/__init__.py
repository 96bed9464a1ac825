# src/foosrank/middleware/__init__.py

"""Middleware components for FoosRank API."""

from .logging import REQUEST_ID_HEADER, RequestLoggingMiddleware

__all__ = ["REQUEST_ID_HEADER", "RequestLoggingMiddleware"]
