"""
Pydantic schemas for the voice resolution API.
"""

from pydantic import BaseModel, ConfigDict, Field

from voice_resolver.voices.service import ResolvedVoice


class VoiceCategoryRecording(BaseModel):
    """A recording and the category it is filed under."""

    model_config = ConfigDict(from_attributes=True)

    voice_category: str = Field(..., description="Category name")
    recording: str = Field(..., description="Recording name")


class ResolvedVoiceResponse(BaseModel):
    """Response body of GET /resolve/{campaign_model_id}."""

    voice_name: str = Field(..., description="Name of the randomly selected voice")
    voice_categories: list[VoiceCategoryRecording] = Field(
        default_factory=list,
        description="Recordings of the voice, sorted by category name",
    )

    @classmethod
    def from_resolved(cls, resolved: ResolvedVoice) -> "ResolvedVoiceResponse":
        return cls(
            voice_name=resolved.voice_name,
            voice_categories=[
                VoiceCategoryRecording.model_validate(entry) for entry in resolved.categories
            ],
        )


class ErrorResponse(BaseModel):
    """Error body shared by every non-2xx resolution response."""

    error: str
