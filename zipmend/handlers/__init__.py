from aiogram import Router

from .base import router as base_router
from .zip_handlers import router as zip_router

router = Router(name="root")

# commands first, the document catch-all after them
router.include_router(base_router)
router.include_router(zip_router)
