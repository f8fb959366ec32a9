from __future__ import annotations

from collections import Counter
from typing import Any

from ..recommendations.data_store import DatasetSnapshot


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    runs = [e for e in events if e["type"] == "recommendation"]
    ingestions = [e for e in events if e["type"] == "ingestion"]
    total = len(runs)

    # Average response time
    times = [r["response_time_ms"] for r in runs if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Most recommended species
    species_counter: Counter[str] = Counter()
    for r in runs:
        for name in r.get("species", []) or []:
            species_counter[name] += 1
    top_species = [{"name": n, "count": c} for n, c in species_counter.most_common(10)]

    # Top locations
    loc_counter: Counter[str] = Counter()
    for r in runs:
        loc_counter[r.get("location") or "unknown"] += 1
    top_locations = [{"name": n, "count": c} for n, c in loc_counter.most_common(10)]

    confidences = [r["average_confidence"] for r in runs if "average_confidence" in r]
    avg_confidence = round(sum(confidences) / len(confidences), 4) if confidences else 0.0

    # Cache stats
    cache_hits = sum(1 for r in runs if r.get("cache_hit"))
    cache_misses = total - cache_hits

    return {
        "total_recommendations": total,
        "total_ingestions": len(ingestions),
        "avg_response_time_ms": avg_time,
        "avg_confidence": avg_confidence,
        "top_species": top_species,
        "top_locations": top_locations,
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
    }


def summarize_species(snapshot: DatasetSnapshot, sample_size: int = 5) -> dict[str, Any]:
    """Describe the composition of a dataset snapshot."""
    profiles = snapshot.profiles
    native = sum(1 for p in profiles if p.is_native)
    categories = Counter(p.category or "unknown" for p in profiles)

    return {
        "total_species": len(profiles),
        "native_species": native,
        "non_native_species": len(profiles) - native,
        "categories": dict(categories),
        "raw_row_count": snapshot.raw_row_count,
        "source": snapshot.source,
        "last_updated": snapshot.loaded_at.isoformat(),
        "sample_species": [
            {
                "commonName": p.common_name,
                "scientificName": p.scientific_name,
                "category": p.category,
                "isNative": p.is_native,
                "successRate": p.success_rate,
            }
            for p in profiles[:sample_size]
        ],
    }
