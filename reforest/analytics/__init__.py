"""
Usage analytics for the recommendation engine.

Responsibilities:
- Record dataset ingestions and recommendation runs as in-memory events.
- Aggregate run counts, response times, cache usage and top species.
- Summarise the species composition of a dataset snapshot.
"""
