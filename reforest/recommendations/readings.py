from __future__ import annotations

from .models import SensorReading

# Agronomic comfort bands; hard bounds are enforced by SensorReading itself.
OPTIMAL_BANDS: dict[str, tuple[float, float]] = {
    "ph": (6.0, 8.0),
    "soil_moisture": (30.0, 70.0),
    "temperature": (20.0, 35.0),
}


def assess_reading(reading: SensorReading) -> list[str]:
    """Return a warning for every value outside its optimal band."""
    warnings: list[str] = []
    for field_name, (low, high) in OPTIMAL_BANDS.items():
        value = getattr(reading, field_name)
        if value < low or value > high:
            warnings.append(
                f"{field_name} ({value:g}) is outside optimal range ({low:g}-{high:g})"
            )
    return warnings
