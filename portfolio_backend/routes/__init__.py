"""
Routers for the data API and the admin function handlers.
"""

from fastapi import APIRouter

from portfolio_backend.routes import (
    audit_logs,
    auth,
    developers,
    files,
    functions,
    images,
    projects,
    site_settings,
)

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(developers.router, prefix="/developers", tags=["developers"])
api_router.include_router(images.router, tags=["images"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(site_settings.router, prefix="/site-settings", tags=["site-settings"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit"])
api_router.include_router(files.router, prefix="/files", tags=["files"])

functions_router = APIRouter(tags=["functions"])
functions_router.include_router(functions.router)

__all__ = ["api_router", "functions_router"]
