"""HTTP routers."""

from .appointments import router as appointments_router
from .clinics import router as clinics_router
from .vets import router as vets_router

__all__ = ["appointments_router", "clinics_router", "vets_router"]
