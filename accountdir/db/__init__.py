"""PostgreSQL connectivity."""

from accountdir.db.pool import PostgresPool

__all__ = ["PostgresPool"]
