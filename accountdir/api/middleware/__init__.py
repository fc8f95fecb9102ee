"""API middleware."""

from accountdir.api.middleware.context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
