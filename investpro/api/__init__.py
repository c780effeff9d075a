"""
API routes for the appraisal engine.
"""

from fastapi import APIRouter

from investpro.api import appraisal

router = APIRouter()

# Include sub-routers
router.include_router(appraisal.router, prefix="/appraisal", tags=["appraisal"])
