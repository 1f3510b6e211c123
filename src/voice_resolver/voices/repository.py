"""
Repository for the two read queries behind voice resolution.
"""

from collections.abc import AsyncIterable, AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Protocol, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from voice_resolver.voices.models import (
    CampaignModelVoice,
    Voice,
    VoiceCategory,
    VoiceRecording,
    VoiceRecordingCategory,
)


class VoiceRepositoryProtocol(Protocol):
    """Protocol for voice repository operations."""

    async def list_active_voices(self, campaign_model_id: int) -> Sequence[Any]:
        """Return every active (campaign_model_voice_id, voice_name) row."""
        ...

    async def pick_random_active_voice(self, campaign_model_id: int) -> Any | None:
        """Return one active (campaign_model_voice_id, voice_name) row chosen by the store."""
        ...

    def open_recordings(
        self,
        campaign_model_voice_id: int,
    ) -> AbstractAsyncContextManager[AsyncIterable[Any]]:
        """Open a stream of (category_name, recording_name) rows for one association."""
        ...


def active_voices_query(campaign_model_id: int) -> Select[Any]:
    """Active associations of a campaign model joined to their voice name."""
    return (
        select(CampaignModelVoice.id, Voice.name)
        .join(Voice, CampaignModelVoice.voice_id == Voice.id)
        .where(
            CampaignModelVoice.campaign_model_id == campaign_model_id,
            CampaignModelVoice.active.is_(True),
        )
    )


def recordings_query(campaign_model_voice_id: int) -> Select[Any]:
    """Recordings of one association, one row per category they belong to."""
    return (
        select(VoiceCategory.name, VoiceRecording.name)
        .select_from(VoiceRecording)
        .join(
            VoiceRecordingCategory,
            VoiceRecording.id == VoiceRecordingCategory.voice_recording_id,
        )
        .join(VoiceCategory, VoiceRecordingCategory.voice_category_id == VoiceCategory.id)
        .where(VoiceRecording.campaign_model_voice_id == campaign_model_voice_id)
        .order_by(VoiceCategory.name)
    )


class VoiceRepository:
    """Repository for voice database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async database session.
        """
        self._session = session

    async def list_active_voices(self, campaign_model_id: int) -> Sequence[Any]:
        """Get all active voices of a campaign model.

        Args:
            campaign_model_id: Campaign model id.

        Returns:
            Rows of (campaign_model_voice_id, voice_name), ordered by
            association id.
        """
        stmt = active_voices_query(campaign_model_id).order_by(CampaignModelVoice.id)
        result = await self._session.execute(stmt)
        return result.all()

    async def pick_random_active_voice(self, campaign_model_id: int) -> Any | None:
        """Let the database pick one active voice with ORDER BY random().

        Args:
            campaign_model_id: Campaign model id.

        Returns:
            A (campaign_model_voice_id, voice_name) row, or None if the
            campaign model has no active voice.
        """
        stmt = active_voices_query(campaign_model_id).order_by(func.random()).limit(1)
        result = await self._session.execute(stmt)
        return result.first()

    @asynccontextmanager
    async def open_recordings(self, campaign_model_voice_id: int) -> AsyncIterator[AsyncIterable[Any]]:
        """Stream the recordings of one campaign model voice with their categories.

        Rows are fetched lazily, so a cancelled request stops reading right
        away. The result is closed when the context exits, whether iteration
        finished, failed or was abandoned.

        Args:
            campaign_model_voice_id: Selected association id.

        Yields:
            Async iterable of (category_name, recording_name) rows.
        """
        result = await self._session.stream(recordings_query(campaign_model_voice_id))
        try:
            yield result
        finally:
            await result.close()
