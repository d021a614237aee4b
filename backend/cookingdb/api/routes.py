from fastapi import APIRouter

from cookingdb.api.health import router as health_router
from cookingdb.api.nutrition import router as nutrition_router
from cookingdb.api.render import router as render_router
from cookingdb.api.units import router as units_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(units_router)
router.include_router(render_router)
router.include_router(nutrition_router)
