"""
Species dataset ingestion package.

Responsibilities:
- Read the species tolerance spreadsheet (first sheet) or CSV export.
- Resolve columns through an explicit alias table.
- Normalize each row into an immutable SpeciesProfile.
- Swap the parsed profiles into the dataset store as a new snapshot.
"""
