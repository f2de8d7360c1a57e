"""Pydantic schemas for the authenticated dashboard API."""

from pydantic import BaseModel

from api.v1.schemas.page import PageResponse
from api.v1.schemas.profile import ProfileResponse


class DashboardResponse(BaseModel):
    """The caller's profile and page; either may not exist yet."""

    profile: ProfileResponse | None = None
    page: PageResponse | None = None
    share_url: str | None = None


class DashboardDetailResponse(BaseModel):
    """Schema for the dashboard payload."""

    data: DashboardResponse


class OwnPageResponse(BaseModel):
    """The caller's page with its shareable URL."""

    page: PageResponse
    share_url: str


class OwnPageDetailResponse(BaseModel):
    """Schema for the caller's page."""

    data: OwnPageResponse
