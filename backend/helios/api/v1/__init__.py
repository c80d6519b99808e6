from fastapi import APIRouter

from helios.api.v1.websocket import router as websocket_router

router = APIRouter()
router.include_router(websocket_router)
