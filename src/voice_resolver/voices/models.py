"""
SQLAlchemy models for campaign model voices and their recordings.

The tables are owned by the platform's core database; these mappings only
describe the columns the resolver reads.
"""

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from voice_resolver.shared.database import Base


class CampaignModel(Base):
    """Campaign model; only referenced by id."""

    __tablename__ = "campaign_models"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class Voice(Base):
    """Named voice persona."""

    __tablename__ = "voices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class CampaignModelVoice(Base):
    """Association of a voice with a campaign model."""

    __tablename__ = "campaign_model_voice"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_model_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("campaign_models.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    voice_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("voices.id", ondelete="CASCADE"),
        nullable=False,
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class VoiceRecording(Base):
    """Playable recording belonging to one campaign model voice."""

    __tablename__ = "voice_recordings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    campaign_model_voice_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("campaign_model_voice.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class VoiceCategory(Base):
    """Label used to group recordings."""

    __tablename__ = "voice_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class VoiceRecordingCategory(Base):
    """Join between recordings and categories."""

    __tablename__ = "voice_recording_categories"

    voice_recording_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("voice_recordings.id", ondelete="CASCADE"),
        primary_key=True,
    )
    voice_category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("voice_categories.id", ondelete="CASCADE"),
        primary_key=True,
    )
