"""
API v1 routes.
"""

from fastapi import APIRouter

from academy.api.v1 import catalog, progress

router = APIRouter()

router.include_router(catalog.router, prefix="/catalog", tags=["Catalog"])
router.include_router(progress.router, prefix="/progress", tags=["Progress"])
