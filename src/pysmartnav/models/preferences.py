"""Persisted user preference flags."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PreferenceFlags(BaseModel):
    """Flags persisted between sessions.

    Serialized with the camelCase keys ``emergencyMode`` and
    ``ecoFriendlyMode``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    emergency_mode: bool = Field(
        default=False,
        validation_alias=AliasChoices("emergencyMode", "emergency_mode"),
        serialization_alias="emergencyMode",
    )
    eco_friendly_mode: bool = Field(
        default=False,
        validation_alias=AliasChoices("ecoFriendlyMode", "eco_friendly_mode"),
        serialization_alias="ecoFriendlyMode",
    )
