from fastapi import APIRouter

from openwaitlist.api.v1.routes_auth import router as auth_router
from openwaitlist.api.v1.routes_waitlist import router as waitlist_router


api_router = APIRouter()

api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(waitlist_router, prefix="/waitlists", tags=["waitlists"])
