"""
API router for voice resolution.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from voice_resolver.config import Settings, get_settings
from voice_resolver.shared.database import get_db_session
from voice_resolver.shared.exceptions import ResolveErrorKind, VoiceResolutionError
from voice_resolver.shared.logging import get_logger
from voice_resolver.voices.repository import VoiceRepository
from voice_resolver.voices.schemas import ErrorResponse, ResolvedVoiceResponse
from voice_resolver.voices.service import VoiceResolver

logger = get_logger(__name__)

router = APIRouter(tags=["voices"])

# Transport mapping of resolution failures. Store failures only say which
# step broke; driver details stay in the logs.
ERROR_RESPONSES: dict[ResolveErrorKind, tuple[int, str]] = {
    ResolveErrorKind.INVALID_ARGUMENT: (
        status.HTTP_400_BAD_REQUEST,
        "invalid campaign_model_id",
    ),
    ResolveErrorKind.NOT_FOUND: (
        status.HTTP_404_NOT_FOUND,
        "no active voices found for this campaign model",
    ),
    ResolveErrorKind.SELECTION_QUERY_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "database query failed",
    ),
    ResolveErrorKind.SELECTION_DECODE_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "database query failed",
    ),
    ResolveErrorKind.RECORDINGS_QUERY_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "failed to fetch recordings",
    ),
    ResolveErrorKind.RECORDING_DECODE_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "failed to scan recording",
    ),
    ResolveErrorKind.RECORDINGS_ITERATION_FAILED: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "error iterating recordings",
    ),
}


async def voice_resolution_error_handler(
    request: Request,
    exc: VoiceResolutionError,
) -> JSONResponse:
    """Render a resolution failure as {"error": ...}."""
    status_code, message = ERROR_RESPONSES[exc.kind]
    log_extra = {
        "error_kind": exc.kind.value,
        "path": request.url.path,
        "status_code": status_code,
    }
    if exc.kind.is_client_error:
        logger.info("Voice resolution rejected", extra=log_extra)
    else:
        logger.error(
            "Voice resolution failed: %s",
            exc.message,
            exc_info=exc,
            extra=log_extra,
        )
    return JSONResponse(status_code=status_code, content={"error": message})


def get_voice_resolver(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> VoiceResolver:
    """Dependency for the voice resolver."""
    return VoiceResolver(
        repository=VoiceRepository(session),
        selection_mode=settings.voice_selection_mode,
    )


@router.get(
    "/resolve/{campaign_model_id}",
    response_model=ResolvedVoiceResponse,
    status_code=status.HTTP_200_OK,
    summary="Resolve a random active voice of a campaign model",
    responses={
        400: {"model": ErrorResponse, "description": "campaign_model_id is not a non-negative integer"},
        404: {"model": ErrorResponse, "description": "No active voice for the campaign model"},
        500: {"model": ErrorResponse, "description": "Database failure"},
    },
)
async def resolve_voice(
    campaign_model_id: Annotated[str, Path(description="Campaign model id")],
    resolver: Annotated[VoiceResolver, Depends(get_voice_resolver)],
) -> ResolvedVoiceResponse:
    """Pick a random active voice of the campaign model and list its recordings.

    The id is taken as a string so malformed values get the service's own
    400 body instead of FastAPI's validation error.
    """
    resolved = await resolver.resolve(campaign_model_id)
    return ResolvedVoiceResponse.from_resolved(resolved)
