from fastapi import APIRouter
from neowatch.api.endpoints import approaches

api_router = APIRouter()

api_router.include_router(approaches.router, prefix="/approaches", tags=["approaches"])
