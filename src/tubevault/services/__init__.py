"""Services for TubeVault.

Cache store, YouTube client, enrichment and the two cache-first services
(catalog and channel review).
"""
