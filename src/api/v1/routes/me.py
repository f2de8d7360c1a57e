"""Authenticated dashboard API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.dashboard import (
    DashboardDetailResponse,
    DashboardResponse,
    OwnPageDetailResponse,
    OwnPageResponse,
)
from api.v1.schemas.page import PageResponse
from api.v1.schemas.profile import ProfileResponse, ProfileUpdate
from core.config import settings
from core.rate_limit import limiter
from domain.entities.page import Page
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/me", tags=["dashboard"])


def share_url(page: Page) -> str:
    """Public URL of a page."""
    return f"{settings.public_base_url.rstrip('/')}/{page.path}"


@router.get(
    "/profile",
    response_model=DashboardDetailResponse,
    summary="Get my profile and page",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> DashboardDetailResponse:
    """Get the authenticated user's profile and page, if they exist yet."""
    profile, page = await service.get_dashboard(str(user.id))
    return DashboardDetailResponse(
        data=DashboardResponse(
            profile=ProfileResponse.from_entity(profile) if profile else None,
            page=PageResponse.model_validate(page) if page else None,
            share_url=share_url(page) if page else None,
        )
    )


@router.put(
    "/profile",
    response_model=DashboardDetailResponse,
    summary="Save my profile",
    responses={
        200: {"description": "Profile saved; page created on first save"},
        503: {"description": "Remote store unavailable; saved on this node only"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def save_my_profile(
    request: Request,
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> DashboardDetailResponse:
    """Save profile fields. The first save also publishes the user's page."""
    profile, page = await service.save_profile(str(user.id), body.model_dump())
    return DashboardDetailResponse(
        data=DashboardResponse(
            profile=ProfileResponse.from_entity(profile),
            page=PageResponse.model_validate(page),
            share_url=share_url(page),
        )
    )


@router.get(
    "/page",
    response_model=OwnPageDetailResponse,
    summary="Get my page",
    responses={404: {"description": "No page published yet"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_page(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> OwnPageDetailResponse:
    """Get the authenticated user's page and its shareable URL."""
    page = await service.get_own_page(str(user.id))
    return OwnPageDetailResponse(
        data=OwnPageResponse(page=PageResponse.model_validate(page), share_url=share_url(page))
    )
