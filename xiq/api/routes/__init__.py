"""
API Routes module.

Contains all API endpoint routers.
"""

from xiq.api.routes import health, x

__all__ = ["health", "x"]
