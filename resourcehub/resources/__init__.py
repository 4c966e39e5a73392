"""
Resource storage and discovery service.

Responsibilities:
- Hold resources, categories, tags, ratings, comments and favorites in memory.
- Supply read-only snapshots to the discovery core.
- Cache and record discovery requests for the API layer.
"""
