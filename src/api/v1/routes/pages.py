"""Public page API routes."""

from fastapi import APIRouter, Depends, Request

from api.v1.dependencies import get_page_resolver
from api.v1.schemas.page import PageResponse, ResolvedPageDetailResponse, ResolvedPageResponse
from api.v1.schemas.profile import ProfileResponse
from core.exceptions import PageNotFoundError
from core.rate_limit import limiter
from domain.services.page_resolver import PageResolver

router = APIRouter(prefix="/pages", tags=["pages"])


@router.get(
    "/{path}",
    response_model=ResolvedPageDetailResponse,
    summary="Resolve a public page",
    responses={
        200: {"description": "Page found"},
        404: {"description": "No page with this path in any store"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_page(
    request: Request,
    path: str,
    resolver: PageResolver = Depends(get_page_resolver),
) -> ResolvedPageDetailResponse:
    """Look a page up by path and return it with its owner's profile.

    The path is normalized first, so differently cased or padded links reach
    the same page. May take a couple of seconds when the page is not found on
    the first attempt.
    """

    async def client_connected() -> bool:
        return not await request.is_disconnected()

    resolution = await resolver.start(path, is_active=client_connected)

    if not resolution.found or resolution.profile is None or resolution.page is None:
        raise PageNotFoundError(resolution.path or path, message=resolution.notice)

    return ResolvedPageDetailResponse(
        data=ResolvedPageResponse(
            path=resolution.path,
            source=str(resolution.source),
            attempts=resolution.attempts,
            profile=ProfileResponse.from_entity(resolution.profile),
            page=PageResponse.model_validate(resolution.page),
        )
    )
