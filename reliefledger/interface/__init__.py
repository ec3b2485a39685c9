"""Mini README: Host interfaces for the relief ledger.

Exports the FastAPI application factory. Other wrappers (CLI dashboards,
message consumers) belong alongside it and map onto the same ledger calls.
"""

from .web_app import create_application

__all__ = ["create_application"]
