"""Pydantic schemas for Profile API."""

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.profile import Profile


def contact_links(profile: Profile) -> dict[str, str]:
    """Clickable URLs for the contact handles a profile has filled in."""
    links: dict[str, str] = {}
    if profile.email:
        links["email"] = f"mailto:{profile.email}"
    if profile.twitter:
        links["twitter"] = (
            profile.twitter
            if profile.twitter.startswith("http")
            else f"https://twitter.com/{profile.twitter.replace('@', '')}"
        )
    if profile.linkedin:
        links["linkedin"] = (
            profile.linkedin
            if profile.linkedin.startswith("http")
            else f"https://linkedin.com/in/{profile.linkedin}"
        )
    if profile.github:
        links["github"] = (
            profile.github
            if profile.github.startswith("http")
            else f"https://github.com/{profile.github}"
        )
    return links


class ProfileUpdate(BaseModel):
    """Schema for saving a profile from the dashboard."""

    name: str = Field(..., min_length=1, max_length=255)
    title: str = Field(..., min_length=1, max_length=255)
    bio: str = Field(..., min_length=1, max_length=5000)
    email: str = Field("", max_length=255)
    twitter: str = Field("", max_length=255)
    linkedin: str = Field("", max_length=500)
    github: str = Field("", max_length=500)
    avatar: str = Field("", max_length=1000)


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    title: str
    bio: str
    email: str
    twitter: str
    linkedin: str
    github: str
    avatar: str
    links: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            links=contact_links(profile),
            **profile.editable_fields(),
        )
