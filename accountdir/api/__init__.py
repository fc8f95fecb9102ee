"""HTTP binding for the account directory (FastAPI)."""
