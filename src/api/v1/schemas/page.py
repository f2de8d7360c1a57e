"""Pydantic schemas for public page API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from api.v1.schemas.profile import ProfileResponse


class PageResponse(BaseModel):
    """Schema for Page response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    path: str
    user_id: str
    created_at: datetime
    updated_at: datetime


class ResolvedPageResponse(BaseModel):
    """A public page together with its owner's profile."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "path": "k3x9q2m7ab",
                "source": "remote",
                "attempts": 1,
                "profile": {
                    "id": "7c0e3f3a-5b0c-4d47-9f5e-2d1a1b9e6c10",
                    "name": "Ann Lee",
                    "title": "Software Engineer",
                    "bio": "Builds things.",
                    "email": "ann@example.com",
                    "twitter": "@ann",
                    "linkedin": "",
                    "github": "annlee",
                    "avatar": "https://github.com/shadcn.png",
                    "links": {
                        "email": "mailto:ann@example.com",
                        "twitter": "https://twitter.com/ann",
                        "github": "https://github.com/annlee",
                    },
                },
            }
        },
    )

    path: str
    source: str
    attempts: int
    profile: ProfileResponse
    page: PageResponse


class ResolvedPageDetailResponse(BaseModel):
    """Schema for a single resolved page."""

    data: ResolvedPageResponse
