from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from ..analytics.store import record_event
from .cache import cache_get, cache_set
from .config import DEFAULT_ENGINE_CONFIG, EngineConfig
from .data_store import DatasetStore
from .models import RecommendationRequest, RecommendationResponse, SensorReading
from .ranking import confidence_status, recommend
from .readings import assess_reading
from .scoring import get_scorer

logger = logging.getLogger(__name__)


def get_recommendations(
    request: RecommendationRequest | SensorReading,
    store: DatasetStore,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> RecommendationResponse:
    """Score the current snapshot against a reading and wrap the shortlist."""
    start_time = time.time()

    scorer = get_scorer(config.scoring_strategy)
    snapshot = store.snapshot()

    top_n = getattr(request, "top_n", None) or config.default_top_n
    reading = request.to_reading() if isinstance(request, RecommendationRequest) else request

    # --- Cache check ---
    request_dict = reading.model_dump(exclude={"timestamp"})
    request_dict["_top_n"] = top_n
    request_dict["_strategy"] = config.scoring_strategy
    request_dict["_snapshot"] = snapshot.loaded_at.isoformat()

    cached = cache_get(request_dict) if config.cache_enabled else None
    if cached is not None:
        logger.debug("Recommendation cache hit for %s", request_dict)
        _record_run(reading, cached, start_time, cache_hit=True)
        return cached

    items = recommend(reading, snapshot.profiles, top_n=top_n, scorer=scorer)

    average_confidence = sum(i.confidence_score for i in items) / len(items)
    response = RecommendationResponse(
        recommendations=items,
        total_candidates=len(snapshot),
        strategy=config.scoring_strategy,
        average_confidence=round(average_confidence, 4),
        status=confidence_status(average_confidence),
        warnings=assess_reading(reading),
        generated_at=datetime.now(timezone.utc),
    )

    if config.cache_enabled:
        cache_set(
            request_dict, response,
            ttl=config.cache_ttl_seconds, max_entries=config.cache_max_entries,
        )

    logger.info(
        "Top recommendation for pH=%s moisture=%s temp=%s: %s (%.1f%% confidence)",
        reading.ph, reading.soil_moisture, reading.temperature,
        items[0].common_name, items[0].confidence_score * 100,
    )
    _record_run(reading, response, start_time, cache_hit=False)
    return response


def _record_run(
    reading: SensorReading,
    response: RecommendationResponse,
    start_time: float,
    cache_hit: bool,
) -> None:
    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("recommendation", {
        "location": reading.location,
        "ph": reading.ph,
        "soil_moisture": reading.soil_moisture,
        "temperature": reading.temperature,
        "species": [item.common_name for item in response.recommendations],
        "average_confidence": response.average_confidence,
        "total_candidates": response.total_candidates,
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    })
