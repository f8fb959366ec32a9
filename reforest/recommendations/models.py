from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Wire format is camelCase; Python attributes stay snake_case.
_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)
_FROZEN_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, frozen=True
)


class SpeciesProfile(BaseModel):
    """Normalized tolerance record for one plant species."""

    model_config = _FROZEN_WIRE_CONFIG

    id: str
    common_name: str
    scientific_name: str
    soil_type: str
    category: str
    climate_suitability: str
    growth_rate: str
    uses: str
    is_native: bool

    moisture_min: float = Field(ge=0.0, le=100.0)
    moisture_max: float = Field(ge=0.0, le=100.0)
    ph_min: float = Field(ge=0.0, le=14.0, alias="pHMin")
    ph_max: float = Field(ge=0.0, le=14.0, alias="pHMax")
    temp_min: float
    temp_max: float

    pref_moisture: float
    pref_ph: float = Field(alias="prefpH")
    pref_temp: float

    success_rate: int = Field(ge=0, le=100)
    adaptability_score: int = Field(ge=0, le=100)

    original_ranges: dict[str, str] = Field(default_factory=dict)


class SensorReading(BaseModel):
    model_config = _WIRE_CONFIG

    ph: float = Field(..., ge=0.0, le=14.0)
    soil_moisture: float = Field(..., ge=0.0, le=100.0)
    temperature: float = Field(..., ge=-10.0, le=60.0, allow_inf_nan=False)
    location: str | None = None
    timestamp: datetime | None = None


class RecommendationItem(BaseModel):
    model_config = _FROZEN_WIRE_CONFIG

    id: str
    common_name: str
    scientific_name: str
    category: str
    is_native: bool

    confidence_score: float
    overall_score: float
    moisture_compatibility: float
    ph_compatibility: float = Field(alias="pHCompatibility")
    temp_compatibility: float

    pref_moisture: float
    pref_ph: float = Field(alias="prefpH")
    pref_temp: float

    moisture_range: str
    ph_range: str = Field(alias="pHRange")
    temp_range: str

    success_rate: int
    adaptability_score: int


class RecommendationRequest(SensorReading):
    top_n: int | None = Field(
        default=None, ge=1, le=50, description="Shortlist size; engine default when omitted"
    )

    def to_reading(self) -> SensorReading:
        return SensorReading.model_validate(
            self.model_dump(exclude={"top_n"})
        )


class RecommendationResponse(BaseModel):
    model_config = _WIRE_CONFIG

    recommendations: list[RecommendationItem]
    total_candidates: int
    strategy: str
    average_confidence: float
    status: str
    warnings: list[str] = Field(default_factory=list)
    generated_at: datetime


class DatasetLoadRequest(BaseModel):
    path: str | None = Field(
        default=None, description="Server-side dataset path; configured default when omitted"
    )


class DatasetLoadResponse(BaseModel):
    model_config = _WIRE_CONFIG

    status: str
    species_count: int
    raw_row_count: int
    last_updated: datetime
