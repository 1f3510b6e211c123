"""
Custom exceptions for the application.
"""

from enum import Enum


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class ResolveErrorKind(str, Enum):
    """Why a voice resolution failed.

    The selection/recordings split tells the two store phases apart in logs;
    callers only ever see the HTTP mapping in ``voices.router``.
    """

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    SELECTION_QUERY_FAILED = "selection_query_failed"
    SELECTION_DECODE_FAILED = "selection_decode_failed"
    RECORDINGS_QUERY_FAILED = "recordings_query_failed"
    RECORDING_DECODE_FAILED = "recording_decode_failed"
    RECORDINGS_ITERATION_FAILED = "recordings_iteration_failed"

    @property
    def is_client_error(self) -> bool:
        return self in (ResolveErrorKind.INVALID_ARGUMENT, ResolveErrorKind.NOT_FOUND)


class VoiceResolutionError(AppError):
    """Base error raised by the voice resolver."""

    def __init__(self, kind: ResolveErrorKind, message: str) -> None:
        super().__init__(message, kind.name)
        self.kind = kind


class InvalidCampaignModelIdError(VoiceResolutionError):
    """Campaign model id is not a non-negative integer."""

    def __init__(self, raw_value: str) -> None:
        super().__init__(
            ResolveErrorKind.INVALID_ARGUMENT,
            f"Invalid campaign model id: {raw_value!r}",
        )
        self.raw_value = raw_value


class NoActiveVoiceError(VoiceResolutionError):
    """No active voice is associated with the campaign model."""

    def __init__(self, campaign_model_id: int) -> None:
        super().__init__(
            ResolveErrorKind.NOT_FOUND,
            f"No active voices for campaign model {campaign_model_id}",
        )
        self.campaign_model_id = campaign_model_id


class StoreQueryError(VoiceResolutionError):
    """The data store could not be reached or a query failed."""


class StoreReadCorruptionError(VoiceResolutionError):
    """A row came back but does not have the expected shape."""
