"""
API routes for the mortgage calculators.
"""

from fastapi import APIRouter

from app.api import mortgage

router = APIRouter()

# Include sub-routers
router.include_router(mortgage.router, prefix="/mortgage", tags=["mortgage"])
