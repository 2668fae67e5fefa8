"""API routes package for the Barangay API."""

from barangay_api.api.admin import router as admin_router
from barangay_api.api.auth import router as auth_router
from barangay_api.api.contact import router as contact_router
from barangay_api.api.health import router as health_router
from barangay_api.api.uploads import router as uploads_router

__all__ = ["admin_router", "auth_router", "contact_router", "health_router", "uploads_router"]
