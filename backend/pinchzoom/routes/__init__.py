"""
API route modules.
"""

from pinchzoom.routes.sessions import router as sessions_router

__all__ = [
    "sessions_router",
]
