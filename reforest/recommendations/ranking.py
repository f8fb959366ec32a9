from __future__ import annotations

from operator import attrgetter
from typing import Callable, Sequence

from ..data_ingestion.ranges import format_range
from ..exceptions import EmptyDatasetError
from .models import RecommendationItem, SensorReading, SpeciesProfile
from .scoring import Scorer, score

WEIGHTS = {
    "ph": 0.25,
    "moisture": 0.30,
    "temperature": 0.25,
    "success_rate": 0.10,
    "adaptability": 0.10,
}
OVERALL_CONFIDENCE_WEIGHT = 0.7
OVERALL_SUCCESS_WEIGHT = 0.3
MIN_CONFIDENCE = 0.05

# Differences below these count as ties and fall through to the next key.
OVERALL_TIE = 0.05
CONFIDENCE_TIE = 0.03
SUCCESS_RATE_TIE = 5


def _score_species(
    reading: SensorReading, species: SpeciesProfile, scorer: Scorer
) -> RecommendationItem:
    """Compute per-factor and composite scores for a single species."""
    ph_score = scorer(reading.ph, species.ph_min, species.ph_max)
    moisture_score = scorer(reading.soil_moisture, species.moisture_min, species.moisture_max)
    temp_score = scorer(reading.temperature, species.temp_min, species.temp_max)

    success_factor = species.success_rate / 100
    adaptability_factor = species.adaptability_score / 100

    confidence = (
        ph_score * WEIGHTS["ph"]
        + moisture_score * WEIGHTS["moisture"]
        + temp_score * WEIGHTS["temperature"]
        + success_factor * WEIGHTS["success_rate"]
        + adaptability_factor * WEIGHTS["adaptability"]
    )
    confidence = max(MIN_CONFIDENCE, min(1.0, confidence))
    overall = confidence * OVERALL_CONFIDENCE_WEIGHT + success_factor * OVERALL_SUCCESS_WEIGHT

    return RecommendationItem(
        id=species.id,
        common_name=species.common_name,
        scientific_name=species.scientific_name,
        category=species.category,
        is_native=species.is_native,
        confidence_score=confidence,
        overall_score=overall,
        moisture_compatibility=moisture_score,
        ph_compatibility=ph_score,
        temp_compatibility=temp_score,
        pref_moisture=species.pref_moisture,
        pref_ph=species.pref_ph,
        pref_temp=species.pref_temp,
        moisture_range=format_range(species.moisture_min, species.moisture_max, "%"),
        ph_range=format_range(species.ph_min, species.ph_max),
        temp_range=format_range(species.temp_min, species.temp_max, "°C"),
        success_rate=species.success_rate,
        adaptability_score=species.adaptability_score,
    )


_TIE_BREAKS: tuple[tuple[Callable[[RecommendationItem], float], float], ...] = (
    (attrgetter("overall_score"), OVERALL_TIE),
    (attrgetter("confidence_score"), CONFIDENCE_TIE),
    (attrgetter("success_rate"), SUCCESS_RATE_TIE),
    (attrgetter("adaptability_score"), 0),
)


def _order(items: list[RecommendationItem], keys=_TIE_BREAKS) -> list[RecommendationItem]:
    """
    Sort best-first on the first key, then re-order each tie window by the
    remaining keys.

    A window opens at its highest-scoring item and takes every following item
    that is less than the tie threshold below it. Windows never overlap, so
    an item is always placed ahead of anything scoring a full threshold lower.
    """
    if not keys or len(items) < 2:
        return items
    (key, tie), rest = keys[0], keys[1:]
    ordered = sorted(items, key=key, reverse=True)

    result: list[RecommendationItem] = []
    start = 0
    while start < len(ordered):
        head = key(ordered[start])
        end = start + 1
        while end < len(ordered) and head - key(ordered[end]) < tie:
            end += 1
        result.extend(_order(ordered[start:end], rest))
        start = end
    return result


def rank(items: Sequence[RecommendationItem]) -> list[RecommendationItem]:
    return _order(list(items))


def recommend(
    reading: SensorReading,
    dataset: Sequence[SpeciesProfile],
    top_n: int = 3,
    scorer: Scorer = score,
) -> list[RecommendationItem]:
    """
    Score every species against a sensor reading and return the best ``top_n``.

    Deterministic for a given reading and dataset: the sort is stable over
    the dataset order.
    """
    if top_n < 1:
        raise ValueError(f"top_n must be at least 1, got {top_n}")
    if not dataset:
        raise EmptyDatasetError("No species available to score")

    scored = [_score_species(reading, species, scorer) for species in dataset]
    return rank(scored)[:top_n]


def confidence_status(confidence: float) -> str:
    """Map a confidence score (0-1 or a percentage) to a review label."""
    percent = confidence if confidence > 1 else confidence * 100
    if percent >= 85:
        return "Approved"
    if percent >= 70:
        return "Pending"
    if percent >= 50:
        return "Under Review"
    return "Needs Review"
