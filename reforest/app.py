from __future__ import annotations

import logging
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException

from .analytics.aggregator import compute_analytics, summarize_species
from .analytics.store import get_events, record_event
from .data_ingestion.config import DEFAULT_INGESTION_CONFIG, IngestionConfig
from .data_ingestion.ingest import load_dataset_from_file
from .exceptions import (
    DatasetNotFoundError,
    DatasetNotLoadedError,
    DatasetPathNotAllowedError,
    DatasetReadError,
    EmptyDatasetError,
    UnsupportedDatasetFormatError,
)
from .recommendations.cache import get_cache_stats, invalidate
from .recommendations.data_store import DatasetStore
from .recommendations.models import (
    DatasetLoadRequest,
    DatasetLoadResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from .recommendations.service import get_recommendations

logger = logging.getLogger(__name__)

app = FastAPI(title="Seedling Recommendation API", version="1.0.0")

_store = DatasetStore()
_store.subscribe(invalidate)


def get_store() -> DatasetStore:
    return _store


def get_ingestion_config() -> IngestionConfig:
    return DEFAULT_INGESTION_CONFIG


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health(store: DatasetStore = Depends(get_store)) -> dict[str, str]:
    return {
        "status": "ok",
        "dataset": "Ready" if store.is_loaded() else "No Dataset",
    }


# ── Dataset endpoints ────────────────────────────────────────────────────


def _resolve_dataset_path(requested: str | None, config: IngestionConfig) -> Path:
    """Map a client-supplied path into the dataset directory, or reject it."""
    if not requested:
        return config.dataset_path
    root = config.dataset_dir.resolve()
    path = (root / requested).resolve()
    if not path.is_relative_to(root):
        raise DatasetPathNotAllowedError(requested)
    return path


@app.post("/dataset/load", response_model=DatasetLoadResponse)
def load_dataset(
    body: DatasetLoadRequest | None = None,
    store: DatasetStore = Depends(get_store),
    config: IngestionConfig = Depends(get_ingestion_config),
) -> DatasetLoadResponse:
    try:
        path = _resolve_dataset_path(body.path if body else None, config)
        profiles = load_dataset_from_file(path, store, config)
    except DatasetPathNotAllowedError as exc:
        logger.warning("Dataset load rejected: %s", exc)
        raise HTTPException(status_code=403, detail=str(exc))
    except DatasetNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (EmptyDatasetError, UnsupportedDatasetFormatError, DatasetReadError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    snapshot = store.snapshot()
    record_event("ingestion", {
        "source": snapshot.source,
        "species_count": len(profiles),
        "raw_row_count": snapshot.raw_row_count,
    })
    return DatasetLoadResponse(
        status="loaded",
        species_count=len(profiles),
        raw_row_count=snapshot.raw_row_count,
        last_updated=snapshot.loaded_at,
    )


@app.get("/dataset")
def dataset_info(store: DatasetStore = Depends(get_store)) -> dict:
    try:
        snapshot = store.snapshot()
    except DatasetNotLoadedError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return summarize_species(snapshot)


@app.delete("/dataset")
def clear_dataset(store: DatasetStore = Depends(get_store)) -> dict:
    was_loaded = store.is_loaded()
    store.clear()
    return {
        "status": "cleared",
        "message": "Dataset cleared" if was_loaded else "No dataset was loaded",
    }


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.post("/recommendations", response_model=RecommendationResponse)
def recommendations(
    body: RecommendationRequest,
    store: DatasetStore = Depends(get_store),
) -> RecommendationResponse:
    try:
        return get_recommendations(body, store)
    except (DatasetNotLoadedError, EmptyDatasetError) as exc:
        logger.warning("Recommendation request rejected: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())


@app.get("/cache/stats")
def cache_stats() -> dict:
    return get_cache_stats()
