from fastapi import APIRouter

from blocklist_manager.api.endpoints import blocklist

router = APIRouter()
router.include_router(blocklist.router, prefix="", tags=["blocklist"])
