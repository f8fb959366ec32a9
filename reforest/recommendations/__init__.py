"""
Seedling recommendation engine.

Responsibilities:
- Hold the current species dataset as an immutable snapshot.
- Score each species' tolerance ranges against a sensor reading.
- Combine per-factor scores into confidence and overall scores.
- Rank species and return the top shortlist ready for API serialisation.
"""
