"""
Availability & outing recommendation engine.

Responsibilities:
- Turn a person's busy intervals into free availability windows.
- Match availability windows against venue opening hours.
- Recommend venues for a single person from windows and cuisine preferences.
- Find the best shared meeting slot for a group and rank venue candidates.

Everything in this package is pure and synchronous; callers fetch busy
intervals and venue catalogs before invoking it.
"""
