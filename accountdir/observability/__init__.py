"""Observability: structured logging and request context.

Provides standardized logging primitives using structlog.
"""
