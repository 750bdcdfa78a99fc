"""Equalizer filter payloads sent to the audio node."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator


EQUALIZER_BAND_COUNT = 15


class EqualizerBand(BaseModel):
    """Gain adjustment for a single equalizer band."""

    model_config = ConfigDict(frozen=True)

    band: int = Field(
        ..., ge=0, lt=EQUALIZER_BAND_COUNT, description="Band index (0-14)"
    )
    gain: float = Field(
        0.0,
        ge=-0.25,
        le=1.0,
        description="Multiplier for the band; -0.25 mutes it, 0.25 doubles it",
    )


class EqualizerFilterOptions(BaseModel):
    """Equalizer filter; serializes to the bare list of its bands.

    The options are write-only: the audio node reports filters back in its
    own format, so a bare band list is never read into options.
    """

    bands: list[EqualizerBand] = Field(
        default_factory=list, description="Bands to adjust; unlisted bands keep 0.0"
    )

    @model_validator(mode="before")
    @classmethod
    def _reject_band_list(cls, data: Any) -> Any:
        if isinstance(data, list):
            raise NotImplementedError(
                "Reading equalizer filter options from a band list is not supported."
            )
        return data

    @model_validator(mode="after")
    def _check_unique_bands(self) -> EqualizerFilterOptions:
        indices = [band.band for band in self.bands]
        if len(indices) != len(set(indices)):
            raise ValueError("Each equalizer band may only be adjusted once")
        return self

    @model_serializer(mode="plain")
    def _serialize_bands(self) -> list[dict[str, Any]]:
        return [band.model_dump() for band in self.bands]
