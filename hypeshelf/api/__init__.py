"""API routes"""

from fastapi import APIRouter
from .users import router as users_router
from .recommendations import router as recommendations_router
from .webhooks import router as webhooks_router

api_router = APIRouter()

api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(recommendations_router, prefix="/recommendations", tags=["recommendations"])
api_router.include_router(webhooks_router, prefix="/webhooks", tags=["webhooks"])
