"""
API routes for the viability calculator.
"""

from fastapi import APIRouter

from viability.api import projects, calculations

router = APIRouter()

# Include sub-routers
router.include_router(projects.router, prefix="/projects", tags=["projects"])
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
