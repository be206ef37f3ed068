# File: openwaitlist/api/v1/routes_waitlist.py

from fastapi import APIRouter, Depends, Query, Response, status

from openwaitlist.api.deps import get_current_user_id, get_waitlist_service
from openwaitlist.schemas.waitlist import (
    WaitlistCreate,
    WaitlistList,
    WaitlistRead,
    WaitlistUpdate,
)
from openwaitlist.services.waitlist_service import WaitlistService

router = APIRouter()


@router.get(
    "",
    response_model=WaitlistList,
    response_model_exclude_none=True,
    summary="List the caller's waitlists",
)
def list_waitlists(
    search: str = Query("", description="Case-insensitive substring of the name"),
    user_id: int = Depends(get_current_user_id),
    service: WaitlistService = Depends(get_waitlist_service),
):
    waitlists, total = service.list_waitlists(user_id, search)
    return WaitlistList(
        waitlists=[WaitlistRead.model_validate(w) for w in waitlists],
        total=total,
    )


@router.post(
    "",
    response_model=WaitlistRead,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a waitlist",
)
def create_waitlist(
    payload: WaitlistCreate,
    user_id: int = Depends(get_current_user_id),
    service: WaitlistService = Depends(get_waitlist_service),
):
    """
    The slug is derived from the name plus a random 6 character suffix.
    """
    return service.create_waitlist(
        user_id,
        payload.name,
        is_public=payload.is_public,
        show_vendor_branding=payload.show_vendor_branding,
    )


@router.get(
    "/{slug}",
    response_model=WaitlistRead,
    response_model_exclude_none=True,
    summary="Get one of the caller's waitlists",
)
def get_waitlist(
    slug: str,
    user_id: int = Depends(get_current_user_id),
    service: WaitlistService = Depends(get_waitlist_service),
):
    return service.get_waitlist(user_id, slug)


@router.put(
    "/{slug}",
    response_model=WaitlistRead,
    response_model_exclude_none=True,
    summary="Rename / reconfigure a waitlist",
)
def update_waitlist(
    slug: str,
    payload: WaitlistUpdate,
    user_id: int = Depends(get_current_user_id),
    service: WaitlistService = Depends(get_waitlist_service),
):
    """
    The slug is regenerated from the new name, so the old slug stops
    resolving after a successful update.
    """
    return service.update_waitlist(
        user_id,
        slug,
        payload.name,
        is_public=payload.is_public,
        show_vendor_branding=payload.show_vendor_branding,
    )


@router.delete(
    "/{slug}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Archive a waitlist",
)
def delete_waitlist(
    slug: str,
    user_id: int = Depends(get_current_user_id),
    service: WaitlistService = Depends(get_waitlist_service),
):
    service.delete_waitlist(user_id, slug)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
