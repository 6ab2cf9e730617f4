"""
Middleware modules for the MedOps server.

This package contains custom middleware for request/response logging and
request persistence for the admin log viewer.
"""

from .request_log_middleware import RequestLogMiddleware

__all__ = ["RequestLogMiddleware"]
