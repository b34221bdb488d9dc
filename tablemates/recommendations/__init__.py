"""
Recommendation service layer.

Responsibilities:
- Accept people (busy time, availability settings, cuisines) and venues.
- Build availability windows and hand them to the engine.
- Resolve venues from inline provider records or a cached catalog.
- Return structured recommendations ready for API serialisation.
"""
