"""
Voice resolution service.

Resolving a campaign model runs two reads against the store:

1. pick one active campaign model voice uniformly at random;
2. stream that association's recordings with their categories.

Store failures are translated into ``VoiceResolutionError`` subclasses whose
``kind`` tells the phases apart. The HTTP layer decides what the caller sees.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError

from voice_resolver.shared.exceptions import (
    InvalidCampaignModelIdError,
    NoActiveVoiceError,
    ResolveErrorKind,
    StoreQueryError,
    StoreReadCorruptionError,
)
from voice_resolver.shared.logging import get_logger
from voice_resolver.voices.repository import VoiceRepositoryProtocol

logger = get_logger(__name__)

# Driver and network failures. Anything else is a bug and is not masked.
STORE_ERRORS: tuple[type[BaseException], ...] = (SQLAlchemyError, OSError)

MAX_CAMPAIGN_MODEL_ID = 2**63 - 1
_CAMPAIGN_MODEL_ID_RE = re.compile(r"\+?[0-9]+")

SelectionMode = Literal["application", "database"]


class RandomSource(Protocol):
    """The part of ``random.Random`` the resolver needs."""

    def choice(self, seq: Sequence[Any]) -> Any: ...


@dataclass(frozen=True)
class SelectedVoice:
    """Active association picked in the first phase."""

    campaign_model_voice_id: int
    voice_name: str


@dataclass(frozen=True)
class VoiceRecordingEntry:
    """One recording under one category."""

    voice_category: str
    recording: str


@dataclass(frozen=True)
class ResolvedVoice:
    """Result of a successful resolution."""

    voice_name: str
    categories: list[VoiceRecordingEntry] = field(default_factory=list)


def parse_campaign_model_id(raw: str) -> int:
    """Parse a campaign model id taken from the URL.

    Accepts ASCII decimal digits with an optional leading ``+``; the value
    must fit a signed 64-bit integer.

    Raises:
        InvalidCampaignModelIdError: for anything else.
    """
    if not isinstance(raw, str) or not _CAMPAIGN_MODEL_ID_RE.fullmatch(raw):
        raise InvalidCampaignModelIdError(str(raw))
    value = int(raw)
    if value > MAX_CAMPAIGN_MODEL_ID:
        raise InvalidCampaignModelIdError(raw)
    return value


def _decode_selection(row: Any) -> SelectedVoice:
    try:
        campaign_model_voice_id, voice_name = row
    except (TypeError, ValueError) as exc:
        raise StoreReadCorruptionError(
            ResolveErrorKind.SELECTION_DECODE_FAILED,
            "Active voice row has an unexpected shape",
        ) from exc

    if (
        not isinstance(campaign_model_voice_id, int)
        or isinstance(campaign_model_voice_id, bool)
        or not isinstance(voice_name, str)
    ):
        raise StoreReadCorruptionError(
            ResolveErrorKind.SELECTION_DECODE_FAILED,
            f"Active voice row has unexpected values: "
            f"id={type(campaign_model_voice_id).__name__}, name={type(voice_name).__name__}",
        )
    return SelectedVoice(campaign_model_voice_id=campaign_model_voice_id, voice_name=voice_name)


def _decode_recording(row: Any) -> VoiceRecordingEntry:
    try:
        voice_category, recording = row
    except (TypeError, ValueError) as exc:
        raise StoreReadCorruptionError(
            ResolveErrorKind.RECORDING_DECODE_FAILED,
            "Recording row has an unexpected shape",
        ) from exc

    if not isinstance(voice_category, str) or not isinstance(recording, str):
        raise StoreReadCorruptionError(
            ResolveErrorKind.RECORDING_DECODE_FAILED,
            f"Recording row has unexpected values: "
            f"category={type(voice_category).__name__}, recording={type(recording).__name__}",
        )
    return VoiceRecordingEntry(voice_category=voice_category, recording=recording)


class VoiceResolver:
    """Picks a random active voice for a campaign model and collects its recordings."""

    def __init__(
        self,
        repository: VoiceRepositoryProtocol,
        rng: RandomSource | None = None,
        selection_mode: SelectionMode = "application",
    ) -> None:
        """Initialize resolver.

        Args:
            repository: Store access for the two queries.
            rng: Random source for the application-side pick. Defaults to
                ``random.SystemRandom``.
            selection_mode: "application" picks in-process among all active
                rows, "database" lets the store pick with ORDER BY random().
        """
        self._repository = repository
        self._rng = rng if rng is not None else random.SystemRandom()
        self._selection_mode = selection_mode

    async def resolve(self, campaign_model_id: int | str) -> ResolvedVoice:
        """Resolve the voice of a campaign model.

        Args:
            campaign_model_id: Campaign model id, either already parsed or
                as the raw path segment.

        Returns:
            The selected voice name and its recordings sorted by category.

        Raises:
            InvalidCampaignModelIdError: id is not a non-negative integer.
            NoActiveVoiceError: campaign model has no active voice.
            StoreQueryError: the store failed during either phase.
            StoreReadCorruptionError: a row could not be decoded.
        """
        if isinstance(campaign_model_id, str):
            campaign_model_id = parse_campaign_model_id(campaign_model_id)
        elif isinstance(campaign_model_id, bool) or campaign_model_id < 0:
            raise InvalidCampaignModelIdError(str(campaign_model_id))

        selected = await self.select_voice(campaign_model_id)
        categories = await self.collect_recordings(selected.campaign_model_voice_id)

        logger.debug(
            "Voice resolved",
            extra={
                "campaign_model_id": campaign_model_id,
                "campaign_model_voice_id": selected.campaign_model_voice_id,
                "recordings": len(categories),
            },
        )
        return ResolvedVoice(voice_name=selected.voice_name, categories=categories)

    async def select_voice(self, campaign_model_id: int) -> SelectedVoice:
        """Phase 1: pick one active association uniformly at random."""
        try:
            if self._selection_mode == "database":
                row = await self._repository.pick_random_active_voice(campaign_model_id)
            else:
                rows = await self._repository.list_active_voices(campaign_model_id)
                row = self._rng.choice(rows) if rows else None
        except STORE_ERRORS as exc:
            raise StoreQueryError(
                ResolveErrorKind.SELECTION_QUERY_FAILED,
                f"Active voice query failed: {exc}",
            ) from exc

        if row is None:
            raise NoActiveVoiceError(campaign_model_id)
        return _decode_selection(row)

    async def collect_recordings(self, campaign_model_voice_id: int) -> list[VoiceRecordingEntry]:
        """Phase 2: read every (category, recording) pair of the association.

        An association that vanished since phase 1 simply yields no rows.
        """
        entries: list[VoiceRecordingEntry] = []
        opened = False
        try:
            async with self._repository.open_recordings(campaign_model_voice_id) as rows:
                opened = True
                async for row in rows:
                    entries.append(_decode_recording(row))
        except STORE_ERRORS as exc:
            if opened:
                raise StoreQueryError(
                    ResolveErrorKind.RECORDINGS_ITERATION_FAILED,
                    f"Reading recordings failed: {exc}",
                ) from exc
            raise StoreQueryError(
                ResolveErrorKind.RECORDINGS_QUERY_FAILED,
                f"Recordings query failed: {exc}",
            ) from exc

        # Store collation may differ from code point order; this sort is the contract.
        entries.sort(key=lambda entry: entry.voice_category)
        return entries
