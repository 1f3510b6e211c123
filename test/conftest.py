"""
Pytest configuration and fixtures for the voice resolver tests.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from voice_resolver.config import Settings
from voice_resolver.main import app
from voice_resolver.shared.database import Base, get_db_session
from voice_resolver.voices.models import (
    CampaignModel,
    CampaignModelVoice,
    Voice,
    VoiceCategory,
    VoiceRecording,
    VoiceRecordingCategory,
)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        _env_file=None,
        app_env="dev",
        debug=True,
        db_host="db.test",
        db_ping_on_startup=False,
    )


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[Any, None]:
    """In-memory SQLite engine with the voice tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: Any) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


class VoiceStoreSeeder:
    """Inserts campaign models, voices and recordings for tests."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._campaign_models: set[int] = set()
        self._categories: dict[str, VoiceCategory] = {}

    async def _campaign_model(self, campaign_model_id: int) -> None:
        if campaign_model_id not in self._campaign_models:
            self._session.add(CampaignModel(id=campaign_model_id))
            self._campaign_models.add(campaign_model_id)
            await self._session.flush()

    async def _category(self, name: str) -> VoiceCategory:
        category = self._categories.get(name)
        if category is None:
            category = VoiceCategory(name=name)
            self._session.add(category)
            await self._session.flush()
            self._categories[name] = category
        return category

    async def add_voice(
        self,
        campaign_model_id: int,
        voice_name: str,
        *,
        active: bool = True,
        recordings: list[tuple[str, str]] | None = None,
    ) -> CampaignModelVoice:
        """Add a voice to a campaign model.

        Args:
            campaign_model_id: Campaign model to attach the voice to.
            voice_name: Voice name.
            active: Association active flag.
            recordings: (category, recording) pairs.
        """
        await self._campaign_model(campaign_model_id)

        voice = Voice(name=voice_name)
        self._session.add(voice)
        await self._session.flush()

        association = CampaignModelVoice(
            campaign_model_id=campaign_model_id,
            voice_id=voice.id,
            active=active,
        )
        self._session.add(association)
        await self._session.flush()

        for category_name, recording_name in recordings or []:
            await self.add_recording(association.id, category_name, recording_name)

        await self._session.commit()
        return association

    async def add_recording(
        self,
        campaign_model_voice_id: int,
        category_name: str,
        recording_name: str,
    ) -> VoiceRecording:
        category = await self._category(category_name)
        recording = VoiceRecording(
            campaign_model_voice_id=campaign_model_voice_id,
            name=recording_name,
        )
        self._session.add(recording)
        await self._session.flush()
        self._session.add(
            VoiceRecordingCategory(
                voice_recording_id=recording.id,
                voice_category_id=category.id,
            )
        )
        await self._session.flush()
        return recording


@pytest_asyncio.fixture
async def seeder(db_session: AsyncSession) -> VoiceStoreSeeder:
    """Seeder bound to the test session."""
    return VoiceStoreSeeder(db_session)


@pytest_asyncio.fixture
async def async_client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client backed by the SQLite session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
