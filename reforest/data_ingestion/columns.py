from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class ColumnMap:
    """Alias table mapping canonical species fields to source column names.

    Aliases are listed in priority order; the first one holding a non-empty
    value in a row wins.
    """

    aliases: Mapping[str, tuple[str, ...]]

    @property
    def fields(self) -> list[str]:
        return list(self.aliases)

    def resolve(self, row: Mapping[str, Any], field_name: str) -> Any | None:
        """Return the first non-empty value for ``field_name`` in ``row``."""
        for column in self.aliases.get(field_name, ()):
            value = row.get(column)
            if not _is_empty(value):
                return value
        return None


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


DEFAULT_COLUMN_MAP = ColumnMap(
    aliases={
        "moisture": ("Soil Moisture", "Moisture", "Preferred Moisture"),
        "ph": ("pH Range", "pH", "Preferred pH"),
        "temperature": ("Temperature", "Preferred Temperature", "Temp"),
        "native": ("Native", "Is Native"),
        "common_name": ("Common Name", "common_name"),
        "scientific_name": ("Scientific Name", "scientific_name"),
        "soil_type": ("Soil Type", "soil_type"),
        "category": ("Category", "category"),
        "success_rate": ("Success Rate (%)", "Success Rate", "success_rate"),
        "adaptability_score": ("Adaptability Score", "adaptability_score"),
        "climate_suitability": ("Climate Suitability", "climate_suitability"),
        "growth_rate": ("Growth Rate", "growth_rate"),
        "uses": ("Uses", "uses"),
    }
)
