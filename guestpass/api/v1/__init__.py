"""
API v1 package.

Contains versioned API routes for the guest network access API.
"""

from guestpass.api.v1.routes import router

__all__ = ["router"]
