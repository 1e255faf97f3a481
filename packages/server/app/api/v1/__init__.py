"""
API v1 Router

All endpoints are scoped to the signed-in viewer's organization.
"""

from fastapi import APIRouter
from . import directory, projects

router = APIRouter()

router.include_router(projects.router, prefix="/projects", tags=["Projects"])
router.include_router(directory.router, prefix="/directory", tags=["Directory"])


@router.get("/", tags=["API"])
async def api_root():
    """API root — returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/projects",
            "/projects/{project_id}/members",
            "/projects/{project_id}/candidates",
            "/directory",
        ],
    }
