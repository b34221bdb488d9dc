"""
Venue catalog layer.

Responsibilities:
- Manage Yelp Fusion configuration and credentials.
- Search venues by location and term, decoding the provider's records.
- Keep the last good catalog per query so a failed refresh never discards it.
"""
